"""ML model service for business logic

Models are descriptions only. Training runs elsewhere and its result payload
is stored back on the model as-is.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from biplatform.core.entity_store import Collection, EntityStore
from biplatform.core.exceptions import EntityNotFoundError, ValidationFailedError
from biplatform.models import MLModel
from biplatform.models.mlmodel import ML_MODEL_TYPE_CHOICES
from biplatform.services.datasource_service import validate_preprocessing
from biplatform.utils.custom_logger import CustomLogger
from biplatform.utils.object_id import ensure_object_id

logger = CustomLogger("biplatform.mlmodel_service")

VALID_MODEL_TYPES = [value for value, _ in ML_MODEL_TYPE_CHOICES]


@dataclass
class MLModelData:
    """Data class for ML model definitions"""

    name: str
    model_type: str
    data_source_id: str
    description: str = ""
    features: List[str] = field(default_factory=list)
    target: str = ""
    parameters: Dict[str, Any] = field(default_factory=dict)
    preprocessing: List[dict] = field(default_factory=list)


class MLModelService:
    """Service class for ML model operations"""

    def __init__(self, store: EntityStore):
        self.store = store

    @staticmethod
    def validate(data: MLModelData):
        if not data.name:
            raise ValidationFailedError("model name is required")
        if data.model_type not in VALID_MODEL_TYPES:
            raise ValidationFailedError(f"invalid model type {data.model_type}")
        # only the format is checked, the data source may be deleted later anyway
        ensure_object_id(data.data_source_id, "data source id")
        if not isinstance(data.features, list) or not all(
            isinstance(feature, str) for feature in data.features
        ):
            raise ValidationFailedError("model features must be a list of column names")

    def create_model(self, owner_id: str, data: MLModelData) -> MLModel:
        self.validate(data)
        model = MLModel(
            name=data.name,
            description=data.description,
            model_type=data.model_type,
            data_source_id=data.data_source_id,
            features=list(data.features),
            target=data.target,
            parameters=data.parameters,
            preprocessing=validate_preprocessing(data.preprocessing),
            created_by=owner_id,
        )
        self.store.insert(Collection.ML_MODELS, model)
        logger.info(f"created {data.model_type} model {model.id}")
        return model

    def list_models(self, owner_id: str) -> List[MLModel]:
        return self.store.find_many(Collection.ML_MODELS, created_by=owner_id)

    def get_model(self, model_id: str, owner_id: str) -> MLModel:
        ensure_object_id(model_id, "model id")
        return self.store.find(Collection.ML_MODELS, id=model_id, created_by=owner_id)

    def update_model(self, model_id: str, owner_id: str, data: MLModelData) -> MLModel:
        """Replace the definition; a previous training result no longer applies and is cleared"""
        ensure_object_id(model_id, "model id")
        self.validate(data)
        self._update(
            model_id,
            owner_id,
            {
                "name": data.name,
                "description": data.description,
                "model_type": data.model_type,
                "data_source_id": data.data_source_id,
                "features": list(data.features),
                "target": data.target,
                "parameters": data.parameters,
                "preprocessing": validate_preprocessing(data.preprocessing),
                "training_result": None,
            },
        )
        return self.get_model(model_id, owner_id)

    def store_training_result(
        self, model_id: str, owner_id: str, training_result: Optional[dict]
    ) -> MLModel:
        ensure_object_id(model_id, "model id")
        if not isinstance(training_result, dict):
            raise ValidationFailedError("training result must be an object")
        self._update(model_id, owner_id, {"training_result": training_result})
        logger.info(f"stored training result for model {model_id}")
        return self.get_model(model_id, owner_id)

    def delete_model(self, model_id: str, owner_id: str) -> None:
        ensure_object_id(model_id, "model id")
        deleted = self.store.delete_one(
            Collection.ML_MODELS, {"id": model_id, "created_by": owner_id}
        )
        if deleted == 0:
            raise EntityNotFoundError(Collection.ML_MODELS.value, model_id)
        logger.info(f"deleted model {model_id}")

    def _update(self, model_id: str, owner_id: str, fields: dict):
        matched = self.store.update_fields(
            Collection.ML_MODELS, {"id": model_id, "created_by": owner_id}, fields
        )
        if matched == 0:
            raise EntityNotFoundError(Collection.ML_MODELS.value, model_id)
