from ninja import NinjaAPI
from ninja.errors import ValidationError
from ninja.responses import Response
from pydantic import ValidationError as PydanticValidationError

from biplatform.api.chart_api import charts_router
from biplatform.api.dashboard_api import dashboard_router
from biplatform.api.datasource_api import datasource_router
from biplatform.api.mlmodel_api import mlmodel_router
from biplatform.api.stats_api import user_router
from biplatform.utils.custom_logger import CustomLogger

logger = CustomLogger("biplatform")

bi_api = NinjaAPI(
    urls_namespace="api",
    title="BI platform apis",
    description="Data sources, charts, dashboards and ML model definitions",
    docs_url="/api/docs",
)


@bi_api.exception_handler(ValidationError)
def ninja_validation_error_handler(request, exc):  # pylint: disable=unused-argument
    """
    Handle any ninja validation errors raised in the apis
    These are raised during request payload validation
    """
    return Response({"detail": exc.errors}, status=422)


@bi_api.exception_handler(PydanticValidationError)
def pydantic_validation_error_handler(
    request, exc: PydanticValidationError
):  # pylint: disable=unused-argument
    """
    Handle any pydantic errors raised in the apis
    These are raised during response payload validation
    """
    return Response({"detail": exc.errors()}, status=500)


@bi_api.exception_handler(Exception)
def ninja_default_error_handler(request, exc: Exception):  # pylint: disable=unused-argument
    """Handle any other exception raised in the apis"""
    logger.exception(f"unhandled error on {request.path}: {exc}")
    return Response({"detail": "something went wrong"}, status=500)


# tag routes to specify sections in docs
charts_router.tags = ["Charts"]
dashboard_router.tags = ["Dashboards"]
datasource_router.tags = ["DataSources"]
mlmodel_router.tags = ["MLModels"]
user_router.tags = ["User"]

# mount all the module routes
bi_api.add_router("/api/datasources/", datasource_router)
bi_api.add_router("/api/charts/", charts_router)
bi_api.add_router("/api/dashboards/", dashboard_router)
bi_api.add_router("/api/mlmodels/", mlmodel_router)
bi_api.add_router("/api/user/", user_router)
