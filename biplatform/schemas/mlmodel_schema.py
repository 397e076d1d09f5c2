from datetime import datetime
from typing import List, Optional

from ninja import Schema

from biplatform.schemas.datasource_schema import PreprocessingRule


class MLModelCreate(Schema):
    """Schema for defining an ML model"""

    name: str
    type: str  # linear_regression, decision_tree, correlation or kmeans
    data_source_id: str
    description: str = ""
    features: List[str] = []
    target: str = ""
    parameters: dict = {}
    preprocessing: List[PreprocessingRule] = []


class TrainingResultPayload(Schema):
    """Result posted back by the external trainer"""

    training_result: dict


class MLModelResponse(Schema):
    """Schema for ML model response"""

    id: str
    name: str
    description: str
    type: str
    data_source_id: str
    features: List[str]
    target: str
    parameters: dict
    preprocessing: List[dict]
    training_result: Optional[dict] = None
    created_by: str
    created_at: datetime
    updated_at: datetime
