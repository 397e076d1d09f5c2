"""Dashboard API endpoints"""

from typing import List

from ninja import Router

from biplatform.api.error_handling import cascade_response, handle_service_errors
from biplatform.apps import get_entity_store
from biplatform.auth import get_owner_id
from biplatform.schemas.dashboard_schema import (
    DashboardCreate,
    DashboardDetailResponse,
    DashboardResponse,
    DashboardUpdate,
)
from biplatform.services.dashboard_service import DashboardService

dashboard_router = Router()


def get_service() -> DashboardService:
    return DashboardService(get_entity_store())


@dashboard_router.get("/", response=List[DashboardResponse])
@handle_service_errors
def list_dashboards(request):
    owner_id = get_owner_id(request)
    return [dashboard.to_json() for dashboard in get_service().list_dashboards(owner_id)]


@dashboard_router.post("/", response=DashboardResponse)
@handle_service_errors
def create_dashboard(request, payload: DashboardCreate):
    owner_id = get_owner_id(request)
    dashboard = get_service().create_dashboard(
        owner_id,
        payload.name,
        payload.description,
        [item.model_dump() for item in payload.layout],
    )
    return dashboard.to_json()


@dashboard_router.get("/{dashboard_id}/", response=DashboardDetailResponse)
@handle_service_errors
def get_dashboard(request, dashboard_id: str):
    """Get a dashboard with the charts it places"""
    owner_id = get_owner_id(request)
    dashboard, charts = get_service().get_dashboard_detail(dashboard_id, owner_id)
    return {**dashboard.to_json(), "charts": charts}


@dashboard_router.put("/{dashboard_id}/", response=DashboardResponse)
@handle_service_errors
def update_dashboard(request, dashboard_id: str, payload: DashboardUpdate):
    owner_id = get_owner_id(request)
    layout = None
    if payload.layout is not None:
        layout = [item.model_dump() for item in payload.layout]
    dashboard = get_service().update_dashboard(
        dashboard_id,
        owner_id,
        name=payload.name,
        description=payload.description,
        layout=layout,
    )
    return dashboard.to_json()


@dashboard_router.delete("/{dashboard_id}/")
@handle_service_errors
def delete_dashboard(request, dashboard_id: str):
    """Delete a dashboard and the charts placed on it"""
    owner_id = get_owner_id(request)
    result = get_service().delete_dashboard(dashboard_id, owner_id)
    return cascade_response({"success": True, "charts_deleted": result.charts_deleted}, result)
