"""Chart API endpoints

Chart writes accept an optional `dashboard_id` query parameter naming the
dashboard being edited; its edit count is bumped as a best-effort follow-up.
"""

from typing import List, Optional

from ninja import Router

from biplatform.api.error_handling import cascade_response, handle_service_errors
from biplatform.apps import get_entity_store
from biplatform.auth import get_owner_id
from biplatform.schemas.chart_schema import (
    ChartConfigUpdate,
    ChartCreate,
    ChartResponse,
    ChartUpdate,
    ChartWithSourceResponse,
    ChartWriteResponse,
)
from biplatform.services.chart_service import ChartData, ChartService

charts_router = Router()


def get_service() -> ChartService:
    return ChartService(get_entity_store())


@charts_router.get("/", response=List[ChartResponse])
@handle_service_errors
def list_charts(request, data_source_id: Optional[str] = None, ids: Optional[str] = None):
    """List the caller's charts, optionally by data source or a comma separated id list"""
    owner_id = get_owner_id(request)
    service = get_service()
    if ids:
        charts = service.get_charts([chart_id for chart_id in ids.split(",") if chart_id], owner_id)
    else:
        charts = service.list_charts(owner_id, data_source_id)
    return [chart.to_json() for chart in charts]


@charts_router.post("/", response=ChartWriteResponse)
@handle_service_errors
def create_chart(request, payload: ChartCreate, dashboard_id: Optional[str] = None):
    owner_id = get_owner_id(request)
    data = ChartData(
        name=payload.name,
        chart_type=payload.type,
        data_source_id=payload.data_source_id,
        config=payload.config.model_dump(exclude_none=True),
    )
    chart, result = get_service().create_chart(owner_id, data, dashboard_id)
    return cascade_response({"chart": chart.to_json()}, result)


@charts_router.get("/{chart_id}/", response=ChartWithSourceResponse)
@handle_service_errors
def get_chart(request, chart_id: str):
    """Get a chart along with its data source when that still exists"""
    owner_id = get_owner_id(request)
    chart, data_source = get_service().get_chart_with_source(chart_id, owner_id)
    return {
        "chart": chart.to_json(),
        "data_source": data_source.to_json() if data_source else None,
    }


@charts_router.put("/{chart_id}/", response=ChartWriteResponse)
@handle_service_errors
def update_chart(request, chart_id: str, payload: ChartUpdate, dashboard_id: Optional[str] = None):
    owner_id = get_owner_id(request)
    service = get_service()
    result = service.update_chart(
        chart_id,
        owner_id,
        payload.name,
        payload.type,
        payload.config.model_dump(exclude_none=True),
        dashboard_id,
    )
    return cascade_response({"chart": service.get_chart(chart_id, owner_id).to_json()}, result)


@charts_router.put("/{chart_id}/config/", response=ChartWriteResponse)
@handle_service_errors
def update_chart_config(
    request, chart_id: str, payload: ChartConfigUpdate, dashboard_id: Optional[str] = None
):
    owner_id = get_owner_id(request)
    service = get_service()
    result = service.update_chart_config(
        chart_id, owner_id, payload.config.model_dump(exclude_none=True), dashboard_id
    )
    return cascade_response({"chart": service.get_chart(chart_id, owner_id).to_json()}, result)


@charts_router.delete("/{chart_id}/")
@handle_service_errors
def delete_chart(request, chart_id: str):
    owner_id = get_owner_id(request)
    result = get_service().delete_chart(chart_id, owner_id)
    return cascade_response(
        {"success": True, "dashboards_pruned": result.dashboards_pruned}, result
    )
