from datetime import datetime
from typing import List, Optional

from ninja import Schema


class ChartDimension(Schema):
    """Schema for a grouping column"""

    field: str
    type: str = ""  # date, category etc.
    format: Optional[str] = None


class ChartMetric(Schema):
    """Schema for individual chart metric"""

    field: str
    aggregator: str = ""  # sum, avg, count etc.
    alias: Optional[str] = None  # Display name for the metric


class VisualMapConfig(Schema):
    """Color and size scales for scatter, heatmap and map style charts"""

    color_field: str = ""
    color_range: List[str] = []
    size_field: str = ""
    size_range: List[float] = []
    label_fields: List[str] = []


class DualAxisConfig(Schema):
    enabled: bool = False
    types: List[str] = []  # series type per axis


class ChartConfig(Schema):
    """Schema for the chart config document"""

    dimensions: List[ChartDimension] = []
    metrics: List[ChartMetric] = []
    settings: Optional[dict] = None  # rendering options, stored as given
    visual_map: Optional[VisualMapConfig] = None
    dual_axis: Optional[DualAxisConfig] = None


class ChartCreate(Schema):
    """Schema for creating a chart"""

    name: str
    type: str
    data_source_id: str
    config: ChartConfig = ChartConfig()


class ChartUpdate(Schema):
    """Schema for updating a chart"""

    name: str
    type: str
    config: ChartConfig


class ChartConfigUpdate(Schema):
    config: ChartConfig


class ChartResponse(Schema):
    """Schema for chart response"""

    id: str
    name: str
    type: str
    data_source_id: str
    config: dict
    created_by: str
    created_at: datetime
    updated_at: datetime


class ChartWithSourceResponse(Schema):
    chart: ChartResponse
    data_source: Optional[dict] = None  # null once the data source is gone


class ChartWriteResponse(Schema):
    """A chart written through a cascade, with any follow-up step failures"""

    chart: ChartResponse
    warnings: List[str] = []
