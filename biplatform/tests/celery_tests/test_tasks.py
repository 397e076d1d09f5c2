from unittest.mock import Mock, patch

import pytest
from django.db import OperationalError
from django.test import RequestFactory
from django.http import HttpResponse

from biplatform.celeryworkers.tasks import record_request_log
from biplatform.middleware import RequestAuditMiddleware
from biplatform.models import RequestLog

pytestmark = pytest.mark.django_db


def test_record_request_log():
    record_request_log(
        user_id="a" * 24,
        method="GET",
        path="/api/charts/",
        status=200,
        latency_ms=1.5,
        ip="10.0.0.1",
        user_agent="pytest",
    )

    entry = RequestLog.objects.get()
    assert (entry.user_id, entry.path, entry.status) == ("a" * 24, "/api/charts/", 200)


def test_record_request_log_raises_database_error_for_retry():
    """called directly, retry re-raises the original error"""
    with patch.object(RequestLog.objects, "create", side_effect=OperationalError("down")):
        with pytest.raises(OperationalError):
            record_request_log(
                user_id="", method="GET", path="/api/", status=500, latency_ms=2
            )
    assert RequestLog.objects.count() == 0


@patch("biplatform.middleware.record_request_log")
def test_middleware_enqueues_audit(record_task):
    request = RequestFactory().get("/api/charts/", HTTP_USER_AGENT="pytest")
    request.owner_id = "b" * 24
    middleware = RequestAuditMiddleware(lambda request: HttpResponse(status=201))

    response = middleware(request)

    assert response.status_code == 201
    kwargs = record_task.delay.call_args.kwargs
    assert kwargs["user_id"] == "b" * 24
    assert kwargs["status"] == 201
    assert kwargs["path"] == "/api/charts/"
    assert kwargs["user_agent"] == "pytest"


@patch("biplatform.middleware.record_request_log")
def test_middleware_ignores_broker_failure(record_task):
    record_task.delay.side_effect = ConnectionError("broker down")
    request = RequestFactory().get("/api/dashboards/")
    middleware = RequestAuditMiddleware(lambda request: HttpResponse("ok"))

    assert middleware(request).status_code == 200


@patch("biplatform.middleware.record_request_log")
def test_middleware_skips_non_api_paths(record_task):
    middleware = RequestAuditMiddleware(Mock(return_value=HttpResponse("OK")))

    middleware(RequestFactory().get("/healthcheck"))

    record_task.delay.assert_not_called()
