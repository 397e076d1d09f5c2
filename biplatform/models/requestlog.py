"""Audit trail of api requests, written by a celery task"""

from django.db import models
from django.utils import timezone


class RequestLog(models.Model):
    """One handled api request"""

    id = models.BigAutoField(primary_key=True)
    user_id = models.CharField(max_length=24, blank=True, default="", db_index=True)
    method = models.CharField(max_length=10)
    path = models.CharField(max_length=1024)
    status = models.PositiveSmallIntegerField()
    latency_ms = models.FloatField()
    ip = models.CharField(max_length=64, blank=True, default="")
    user_agent = models.CharField(max_length=512, blank=True, default="")
    created_at = models.DateTimeField(default=timezone.now)

    def __str__(self):
        return f"{self.method} {self.path} {self.status}"

    class Meta:
        db_table = "request_logs"
