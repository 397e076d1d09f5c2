"""Request audit trail

Each handled request is recorded by a celery task after the response is
built, so the caller never waits on the audit write.
"""

import time

from django.conf import settings

from biplatform.celeryworkers.tasks import record_request_log
from biplatform.utils.custom_logger import CustomLogger

logger = CustomLogger("biplatform")


def client_ip(request) -> str:
    forwarded = request.META.get("HTTP_X_FORWARDED_FOR")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.META.get("REMOTE_ADDR", "")


class RequestAuditMiddleware:
    """Enqueues one `record_request_log` task per api request"""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        started = time.monotonic()
        response = self.get_response(request)
        if getattr(settings, "REQUEST_AUDIT_ENABLED", True) and request.path.startswith("/api/"):
            self.enqueue(request, response, (time.monotonic() - started) * 1000)
        return response

    @staticmethod
    def enqueue(request, response, latency_ms: float):
        try:
            record_request_log.delay(
                user_id=getattr(request, "owner_id", None) or "",
                method=request.method,
                path=request.path,
                status=response.status_code,
                latency_ms=round(latency_ms, 3),
                ip=client_ip(request),
                user_agent=request.META.get("HTTP_USER_AGENT", ""),
            )
        except Exception as err:  # pylint:disable=broad-exception-caught
            # the broker being down must not fail the request
            logger.error(f"could not enqueue request log for {request.path}: {err}")
