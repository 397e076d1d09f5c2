"""Chart service for business logic

This module encapsulates chart-related business logic, separating it from the
API layer. Creation and deletion go through the LinkMaintainer because they
touch data sources and dashboards as well.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from biplatform.core.entity_store import Collection, EntityStore
from biplatform.core.exceptions import EntityNotFoundError, ValidationFailedError
from biplatform.core.link_maintainer import CascadeResult, LinkMaintainer
from biplatform.models import Chart, DataSource
from biplatform.models.chart import CHART_TYPE_CHOICES
from biplatform.utils.custom_logger import CustomLogger
from biplatform.utils.object_id import ensure_object_id

logger = CustomLogger("biplatform.chart_service")

VALID_CHART_TYPES = [value for value, _ in CHART_TYPE_CHOICES]


@dataclass
class ChartData:
    """Data class for chart creation/update payloads"""

    name: str
    chart_type: str
    data_source_id: str
    config: dict = field(default_factory=dict)


def validate_chart_config(config: dict) -> dict:
    """the config must at least carry lists of dimensions and metrics"""
    if not isinstance(config, dict):
        raise ValidationFailedError("chart config must be an object")
    for key in ("dimensions", "metrics"):
        if not isinstance(config.get(key, []), list):
            raise ValidationFailedError(f"chart config {key} must be a list")
    for metric in config.get("metrics", []):
        if not isinstance(metric, dict) or not metric.get("field"):
            raise ValidationFailedError("chart metric without a field")
    for key in ("settings", "visual_map", "dual_axis"):
        if config.get(key) is not None and not isinstance(config[key], dict):
            raise ValidationFailedError(f"chart config {key} must be an object")
    return config


class ChartService:
    """Service class for chart-related operations"""

    def __init__(self, store: EntityStore, link_maintainer: Optional[LinkMaintainer] = None):
        self.store = store
        self.link_maintainer = link_maintainer or LinkMaintainer(store)

    @staticmethod
    def validate_chart_type(chart_type: str):
        if chart_type not in VALID_CHART_TYPES:
            raise ValidationFailedError(f"invalid chart type {chart_type}")

    def create_chart(
        self, owner_id: str, data: ChartData, dashboard_id: Optional[str] = None
    ) -> Tuple[Chart, CascadeResult]:
        """Create a chart on one of the owner's data sources.

        Args:
            owner_id: The owner
            data: name, type, data source and config
            dashboard_id: dashboard being edited when the chart was created, if any

        Returns:
            The chart and the outcome of the follow-up link steps

        Raises:
            ValidationFailedError: bad type, config or data source id
            EntityNotFoundError: the data source does not resolve under the owner
        """
        self.validate_chart_type(data.chart_type)
        chart = Chart(
            name=data.name,
            chart_type=data.chart_type,
            data_source_id=data.data_source_id,
            config=validate_chart_config(data.config),
        )
        return self.link_maintainer.create_chart(chart, owner_id, dashboard_id)

    def get_chart(self, chart_id: str, owner_id: str) -> Chart:
        """Get a chart by id for an owner.

        Raises:
            EntityNotFoundError: If chart doesn't exist or belongs to someone else
        """
        ensure_object_id(chart_id, "chart id")
        return self.store.find(Collection.CHARTS, id=chart_id, created_by=owner_id)

    def get_chart_with_source(
        self, chart_id: str, owner_id: str
    ) -> Tuple[Chart, Optional[DataSource]]:
        """the chart plus its data source, or None when the source no longer resolves"""
        chart = self.get_chart(chart_id, owner_id)
        try:
            data_source = self.store.find(
                Collection.DATA_SOURCES, id=chart.data_source_id, created_by=owner_id
            )
        except EntityNotFoundError:
            logger.warning(f"chart {chart_id} points at missing data source {chart.data_source_id}")
            data_source = None
        return chart, data_source

    def get_charts(self, chart_ids: List[str], owner_id: str) -> List[Chart]:
        for chart_id in chart_ids:
            ensure_object_id(chart_id, "chart id")
        return self.store.find_many(Collection.CHARTS, id__in=chart_ids, created_by=owner_id)

    def list_charts(self, owner_id: str, data_source_id: Optional[str] = None) -> List[Chart]:
        filters: Dict[str, str] = {"created_by": owner_id}
        if data_source_id:
            filters["data_source_id"] = ensure_object_id(data_source_id, "data source id")
        return self.store.find_many(Collection.CHARTS, **filters)

    def update_chart(
        self,
        chart_id: str,
        owner_id: str,
        name: str,
        chart_type: str,
        config: dict,
        dashboard_id: Optional[str] = None,
    ) -> CascadeResult:
        """replace name, type and config; bumps the hinted dashboard's edit count"""
        self.validate_chart_type(chart_type)
        return self._update(
            chart_id,
            owner_id,
            {"name": name, "chart_type": chart_type, "config": validate_chart_config(config)},
            dashboard_id,
        )

    def update_chart_config(
        self, chart_id: str, owner_id: str, config: dict, dashboard_id: Optional[str] = None
    ) -> CascadeResult:
        return self._update(
            chart_id, owner_id, {"config": validate_chart_config(config)}, dashboard_id
        )

    def delete_chart(self, chart_id: str, owner_id: str) -> CascadeResult:
        return self.link_maintainer.delete_chart(chart_id, owner_id)

    def _update(self, chart_id, owner_id, fields, dashboard_id) -> CascadeResult:
        ensure_object_id(chart_id, "chart id")
        matched = self.store.update_fields(
            Collection.CHARTS, {"id": chart_id, "created_by": owner_id}, fields
        )
        if matched == 0:
            raise EntityNotFoundError(Collection.CHARTS.value, chart_id)

        result = CascadeResult(chart_id)
        if dashboard_id:
            self.link_maintainer.touch_dashboard(result, dashboard_id, owner_id)
        return result
