from datetime import datetime
from typing import List, Optional

from ninja import Schema


class LayoutItem(Schema):
    """Placement of one chart on the dashboard grid"""

    chart_id: str
    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0


class DashboardCreate(Schema):
    """Schema for creating a dashboard"""

    name: str
    description: str = ""
    layout: List[LayoutItem] = []


class DashboardUpdate(Schema):
    """Schema for updating a dashboard, every field optional"""

    name: Optional[str] = None
    description: Optional[str] = None
    layout: Optional[List[LayoutItem]] = None


class DashboardResponse(Schema):
    """Schema for dashboard response"""

    id: str
    name: str
    description: str
    layout: List[dict]
    edit_count: int
    created_by: str
    created_at: datetime
    updated_at: datetime


class HydratedLayoutItem(Schema):
    chart_id: str
    x: int
    y: int
    width: int
    height: int
    name: str
    type: str
    data_source_id: str
    config: dict


class DashboardDetailResponse(DashboardResponse):
    """Dashboard with its layout joined to the charts it places"""

    charts: List[HydratedLayoutItem]
