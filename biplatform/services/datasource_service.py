"""Data source service for business logic

Parsing uploaded files and storing them in blob storage happen upstream; this
service receives headers and rows that are already parsed.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from biplatform.core.entity_store import Collection, EntityStore
from biplatform.core.exceptions import EntityNotFoundError, ValidationFailedError
from biplatform.core.link_maintainer import CascadeResult, LinkMaintainer
from biplatform.models import DataSource, DataSourceType
from biplatform.utils.custom_logger import CustomLogger
from biplatform.utils.object_id import ensure_object_id

logger = CustomLogger("biplatform.datasource_service")

PREPROCESSING_TYPES = {"number", "date", "text"}


@dataclass
class DataSourceData:
    """Data class for data source creation payloads"""

    name: str
    source_type: str
    headers: List[str]
    content: List[List[str]]
    file_url: str = ""
    preprocessing: List[dict] = field(default_factory=list)


def validate_preprocessing(rules: List[dict], headers: Optional[List[str]] = None) -> List[dict]:
    """check preprocessing rules and normalise them to {field, type, format, aggregator}"""
    normalised = []
    for rule in rules:
        if not isinstance(rule, dict) or not rule.get("field"):
            raise ValidationFailedError("preprocessing rule without a field")
        if headers is not None and rule["field"] not in headers:
            raise ValidationFailedError(f"preprocessing field {rule['field']} is not a column")
        if rule.get("type") and rule["type"] not in PREPROCESSING_TYPES:
            raise ValidationFailedError(f"invalid preprocessing type {rule['type']}")
        normalised.append(
            {
                "field": rule["field"],
                "type": rule.get("type") or "",
                "format": rule.get("format") or "",
                "aggregator": rule.get("aggregator") or "",
            }
        )
    return normalised


class DataSourceService:
    """Service class for data source operations"""

    def __init__(self, store: EntityStore, link_maintainer: Optional[LinkMaintainer] = None):
        self.store = store
        self.link_maintainer = link_maintainer or LinkMaintainer(store)

    def create_data_source(self, owner_id: str, data: DataSourceData) -> DataSource:
        """Store parsed tabular content for `owner_id`

        Raises:
            ValidationFailedError: unknown type, empty name or ragged rows
        """
        if data.source_type not in [member.value for member in DataSourceType]:
            raise ValidationFailedError(f"unsupported data source type {data.source_type}")
        if not data.name:
            raise ValidationFailedError("data source name is required")
        width = len(data.headers)
        for index, row in enumerate(data.content):
            if len(row) > width:
                raise ValidationFailedError(f"row {index} has more cells than headers")

        data_source = DataSource(
            name=data.name,
            source_type=data.source_type,
            headers=list(data.headers),
            # short rows are padded with empty cells
            content=[list(row) + [""] * (width - len(row)) for row in data.content],
            file_url=data.file_url,
            preprocessing=validate_preprocessing(data.preprocessing, data.headers),
            created_by=owner_id,
        )
        self.store.insert(Collection.DATA_SOURCES, data_source)
        logger.info(f"created data source {data_source.id} with {len(data.content)} rows")
        return data_source

    def list_data_sources(self, owner_id: str) -> List[DataSource]:
        return self.store.find_many(Collection.DATA_SOURCES, created_by=owner_id)

    def get_data_source(self, data_source_id: str, owner_id: str) -> DataSource:
        ensure_object_id(data_source_id, "data source id")
        return self.store.find(Collection.DATA_SOURCES, id=data_source_id, created_by=owner_id)

    def rename_data_source(self, data_source_id: str, owner_id: str, name: str) -> None:
        ensure_object_id(data_source_id, "data source id")
        if not name:
            raise ValidationFailedError("data source name is required")
        self._update(data_source_id, owner_id, {"name": name})

    def update_preprocessing(self, data_source_id: str, owner_id: str, rules: List[dict]) -> None:
        data_source = self.get_data_source(data_source_id, owner_id)
        rules = validate_preprocessing(rules, data_source.headers)
        self._update(data_source_id, owner_id, {"preprocessing": rules})

    def delete_data_source(self, data_source_id: str, owner_id: str) -> CascadeResult:
        return self.link_maintainer.delete_data_source(data_source_id, owner_id)

    def _update(self, data_source_id: str, owner_id: str, fields: dict):
        matched = self.store.update_fields(
            Collection.DATA_SOURCES, {"id": data_source_id, "created_by": owner_id}, fields
        )
        if matched == 0:
            raise EntityNotFoundError(Collection.DATA_SOURCES.value, data_source_id)
