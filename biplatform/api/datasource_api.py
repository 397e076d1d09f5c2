"""Data source API endpoints"""

from typing import List

from ninja import Router

from biplatform.api.error_handling import cascade_response, handle_service_errors
from biplatform.apps import get_entity_store
from biplatform.auth import get_owner_id
from biplatform.schemas.datasource_schema import (
    DataSourceCreate,
    DataSourcePreprocessingUpdate,
    DataSourceRename,
    DataSourceResponse,
)
from biplatform.services.datasource_service import DataSourceData, DataSourceService
from biplatform.utils.custom_logger import CustomLogger

logger = CustomLogger("biplatform")

datasource_router = Router()


def get_service() -> DataSourceService:
    return DataSourceService(get_entity_store())


@datasource_router.get("/", response=List[DataSourceResponse])
@handle_service_errors
def list_data_sources(request):
    """List the caller's data sources without their rows"""
    owner_id = get_owner_id(request)
    data_sources = get_service().list_data_sources(owner_id)
    return [data_source.to_json(include_content=False) for data_source in data_sources]


@datasource_router.post("/", response=DataSourceResponse)
@handle_service_errors
def create_data_source(request, payload: DataSourceCreate):
    owner_id = get_owner_id(request)
    data = DataSourceData(
        name=payload.name,
        source_type=payload.type,
        headers=payload.headers,
        content=payload.content,
        file_url=payload.file_url,
        preprocessing=[rule.model_dump() for rule in payload.preprocessing],
    )
    data_source = get_service().create_data_source(owner_id, data)
    return data_source.to_json()


@datasource_router.get("/{data_source_id}/", response=DataSourceResponse)
@handle_service_errors
def get_data_source(request, data_source_id: str):
    owner_id = get_owner_id(request)
    return get_service().get_data_source(data_source_id, owner_id).to_json()


@datasource_router.put("/{data_source_id}/", response=DataSourceResponse)
@handle_service_errors
def rename_data_source(request, data_source_id: str, payload: DataSourceRename):
    owner_id = get_owner_id(request)
    service = get_service()
    service.rename_data_source(data_source_id, owner_id, payload.name)
    return service.get_data_source(data_source_id, owner_id).to_json()


@datasource_router.put("/{data_source_id}/preprocessing/", response=DataSourceResponse)
@handle_service_errors
def update_preprocessing(request, data_source_id: str, payload: DataSourcePreprocessingUpdate):
    owner_id = get_owner_id(request)
    service = get_service()
    service.update_preprocessing(
        data_source_id, owner_id, [rule.model_dump() for rule in payload.preprocessing]
    )
    return service.get_data_source(data_source_id, owner_id).to_json()


@datasource_router.delete("/{data_source_id}/")
@handle_service_errors
def delete_data_source(request, data_source_id: str):
    """Delete a data source together with the charts built on it"""
    owner_id = get_owner_id(request)
    result = get_service().delete_data_source(data_source_id, owner_id)
    logger.info(f"data source {data_source_id} deleted, warnings: {len(result.errors)}")
    return cascade_response(
        {"success": True, "charts_deleted": result.charts_deleted}, result
    )
