# main urls
from django.http import HttpResponse
from django.urls import path

from biplatform.routes import bi_api


def healthcheck(request):  # pylint:disable=unused-argument
    """Healthcheck endpoint for load balancers"""
    return HttpResponse("OK")


urlpatterns = [
    path("healthcheck", healthcheck),
    path("", bi_api.urls),
]
