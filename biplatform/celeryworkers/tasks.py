"""these are tasks which we run through celery"""

from django.db import DatabaseError

from biplatform.celery import app
from biplatform.models import RequestLog
from biplatform.utils.custom_logger import CustomLogger

logger = CustomLogger("biplatform")


@app.task(bind=True, max_retries=3, default_retry_delay=30)
def record_request_log(
    self,
    user_id: str,
    method: str,
    path: str,
    status: int,
    latency_ms: float,
    ip: str = "",
    user_agent: str = "",
):
    """Persist one entry of the request audit trail"""
    try:
        RequestLog.objects.create(
            user_id=user_id or "",
            method=method,
            path=path[:1024],
            status=status,
            latency_ms=latency_ms,
            ip=ip or "",
            user_agent=(user_agent or "")[:512],
        )
    except DatabaseError as err:
        logger.error(f"could not record request log for {method} {path}: {err}")
        raise self.retry(exc=err)
