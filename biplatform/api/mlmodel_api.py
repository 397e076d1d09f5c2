"""ML model API endpoints"""

from typing import List

from ninja import Router

from biplatform.api.error_handling import handle_service_errors
from biplatform.apps import get_entity_store
from biplatform.auth import get_owner_id
from biplatform.schemas.mlmodel_schema import (
    MLModelCreate,
    MLModelResponse,
    TrainingResultPayload,
)
from biplatform.services.mlmodel_service import MLModelData, MLModelService

mlmodel_router = Router()


def get_service() -> MLModelService:
    return MLModelService(get_entity_store())


def to_model_data(payload: MLModelCreate) -> MLModelData:
    return MLModelData(
        name=payload.name,
        model_type=payload.type,
        data_source_id=payload.data_source_id,
        description=payload.description,
        features=payload.features,
        target=payload.target,
        parameters=payload.parameters,
        preprocessing=[rule.model_dump() for rule in payload.preprocessing],
    )


@mlmodel_router.get("/", response=List[MLModelResponse])
@handle_service_errors
def list_models(request):
    owner_id = get_owner_id(request)
    return [model.to_json() for model in get_service().list_models(owner_id)]


@mlmodel_router.post("/", response=MLModelResponse)
@handle_service_errors
def create_model(request, payload: MLModelCreate):
    owner_id = get_owner_id(request)
    return get_service().create_model(owner_id, to_model_data(payload)).to_json()


@mlmodel_router.get("/{model_id}/", response=MLModelResponse)
@handle_service_errors
def get_model(request, model_id: str):
    owner_id = get_owner_id(request)
    return get_service().get_model(model_id, owner_id).to_json()


@mlmodel_router.put("/{model_id}/", response=MLModelResponse)
@handle_service_errors
def update_model(request, model_id: str, payload: MLModelCreate):
    owner_id = get_owner_id(request)
    return get_service().update_model(model_id, owner_id, to_model_data(payload)).to_json()


@mlmodel_router.put("/{model_id}/training-result/", response=MLModelResponse)
@handle_service_errors
def store_training_result(request, model_id: str, payload: TrainingResultPayload):
    """Store the result the external trainer computed"""
    owner_id = get_owner_id(request)
    model = get_service().store_training_result(model_id, owner_id, payload.training_result)
    return model.to_json()


@mlmodel_router.delete("/{model_id}/")
@handle_service_errors
def delete_model(request, model_id: str):
    owner_id = get_owner_id(request)
    get_service().delete_model(model_id, owner_id)
    return {"success": True}
