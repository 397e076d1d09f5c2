from datetime import datetime
from typing import List, Optional

from ninja import Schema


class PreprocessingRule(Schema):
    """Schema for a per-column preprocessing rule"""

    field: str
    type: Optional[str] = None  # number, date or text
    format: Optional[str] = None
    aggregator: Optional[str] = None


class DataSourceCreate(Schema):
    """Schema for storing an already parsed file"""

    name: str
    type: str  # csv, excel or json
    headers: List[str]
    content: List[List[str]]
    file_url: str = ""
    preprocessing: List[PreprocessingRule] = []


class DataSourceRename(Schema):
    name: str


class DataSourcePreprocessingUpdate(Schema):
    preprocessing: List[PreprocessingRule]


class DataSourceResponse(Schema):
    """Schema for data source response"""

    id: str
    name: str
    type: str
    headers: List[str]
    content: Optional[List[List[str]]] = None  # omitted in listings
    row_count: int
    file_url: str
    preprocessing: List[dict]
    linked_charts: List[str]
    created_by: str
    created_at: datetime
    updated_at: datetime
