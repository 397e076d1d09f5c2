from datetime import datetime
from typing import Dict, List, Optional

from ninja import Schema


class ActivityResponse(Schema):
    id: str
    name: str
    type: Optional[str] = None  # chart or model type, null for dashboards
    created_at: datetime
    activity_type: str  # dashboard, chart or mlmodel


class UsageStatResponse(Schema):
    """Entities created in one calendar month"""

    date: str  # YYYY-MM
    dashboards: int
    charts: int
    queries: int
    ml_models: int


class MLModelStatsResponse(Schema):
    model_types: Dict[str, int]
    trained_models: int
    pending_models: int
    average_metrics: Dict[str, float]


class UserStatsResponse(Schema):
    """Schema for the user stats report"""

    total_dashboards: int
    total_data_sources: int
    total_charts: int
    total_ml_models: int
    recent_activity: List[ActivityResponse]
    recent_dashboards: List[dict]
    recent_ml_models: List[dict]
    usage_stats: List[UsageStatResponse]
    ml_model_stats: MLModelStatsResponse
