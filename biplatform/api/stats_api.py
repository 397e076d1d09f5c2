"""User stats endpoint"""

from ninja import Router

from biplatform.api.error_handling import handle_service_errors
from biplatform.apps import get_entity_store
from biplatform.auth import get_owner_id
from biplatform.schemas.stats_schema import UserStatsResponse
from biplatform.services.stats_service import StatsService

user_router = Router()


@user_router.get("/stats", response=UserStatsResponse)
@handle_service_errors
def get_user_stats(request):
    """Totals, six months of usage and the latest activity of the caller"""
    owner_id = get_owner_id(request)
    return StatsService(get_entity_store()).build_user_stats(owner_id).to_json()
