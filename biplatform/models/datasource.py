"""Data source models for the BI platform"""

from enum import Enum
from django.db import models
from django.utils import timezone
from biplatform.utils.object_id import generate_object_id


class DataSourceType(str, Enum):
    """Data source type enum"""

    CSV = "csv"
    EXCEL = "excel"
    JSON = "json"

    @classmethod
    def choices(cls):
        """django model definition needs an iterable for `choices`"""
        return [(key.value, key.name) for key in cls]


class DataSource(models.Model):
    """Uploaded tabular data, already parsed into headers + rows"""

    id = models.CharField(
        primary_key=True, max_length=24, default=generate_object_id, editable=False
    )
    name = models.CharField(max_length=255)
    source_type = models.CharField(max_length=10, choices=DataSourceType.choices())

    headers = models.JSONField(default=list)
    content = models.JSONField(default=list, help_text="Rows of cell strings, parallel to headers")
    file_url = models.CharField(max_length=1024, blank=True, default="")
    preprocessing = models.JSONField(
        default=list, help_text="Rules of the form {field, type, format, aggregator}"
    )

    # chart ids built from this source, maintained by the link maintainer
    linked_charts = models.JSONField(default=list)

    created_by = models.CharField(max_length=24, db_index=True)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    updated_at = models.DateTimeField(default=timezone.now)

    def __str__(self):
        return f"{self.name} ({self.source_type})"

    def to_json(self, include_content: bool = True):
        """Return JSON representation"""
        data = {
            "id": self.id,
            "name": self.name,
            "type": self.source_type,
            "headers": self.headers,
            "file_url": self.file_url,
            "preprocessing": self.preprocessing,
            "linked_charts": self.linked_charts,
            "row_count": len(self.content or []),
            "created_by": self.created_by,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_content:
            data["content"] = self.content
        return data

    class Meta:
        db_table = "data_sources"
        ordering = ["-created_at"]
