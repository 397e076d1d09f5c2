"""Dashboard service for business logic"""

from typing import Any, Dict, List, Optional, Tuple

from biplatform.core.edit_counter import EditCounter
from biplatform.core.entity_store import Collection, EntityStore
from biplatform.core.exceptions import EntityNotFoundError, ValidationFailedError
from biplatform.core.link_maintainer import CascadeResult, LinkMaintainer
from biplatform.models import Dashboard
from biplatform.models.dashboard import INITIAL_EDIT_COUNT
from biplatform.utils.custom_logger import CustomLogger
from biplatform.utils.object_id import ensure_object_id

logger = CustomLogger("biplatform.dashboard_service")

LAYOUT_KEYS = ("x", "y", "width", "height")


def validate_layout(layout: List[dict]) -> List[dict]:
    """Check layout placements and normalise them to {chart_id, x, y, width, height}

    Referenced charts are not required to exist; readers skip dangling entries.
    """
    normalised = []
    for index, item in enumerate(layout):
        if not isinstance(item, dict):
            raise ValidationFailedError(f"layout entry {index} must be an object")
        ensure_object_id(item.get("chart_id"), f"chart id in layout entry {index}")
        placement = {"chart_id": item["chart_id"]}
        for key in LAYOUT_KEYS:
            value = item.get(key, 0)
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise ValidationFailedError(f"layout entry {index} has an invalid {key}")
            placement[key] = value
        normalised.append(placement)
    return normalised


class DashboardService:
    """Service class for dashboard-related operations"""

    def __init__(
        self,
        store: EntityStore,
        link_maintainer: Optional[LinkMaintainer] = None,
        edit_counter: Optional[EditCounter] = None,
    ):
        self.store = store
        self.edit_counter = edit_counter or EditCounter(store)
        self.link_maintainer = link_maintainer or LinkMaintainer(store, self.edit_counter)

    def create_dashboard(
        self, owner_id: str, name: str, description: str = "", layout: Optional[List[dict]] = None
    ) -> Dashboard:
        if not name:
            raise ValidationFailedError("dashboard name is required")
        dashboard = Dashboard(
            name=name,
            description=description or "",
            layout=validate_layout(layout or []),
            edit_count=INITIAL_EDIT_COUNT,
            created_by=owner_id,
        )
        self.store.insert(Collection.DASHBOARDS, dashboard)
        logger.info(f"created dashboard {dashboard.id}")
        return dashboard

    def list_dashboards(self, owner_id: str) -> List[Dashboard]:
        return self.store.find_many(Collection.DASHBOARDS, created_by=owner_id)

    def get_dashboard(self, dashboard_id: str, owner_id: str) -> Dashboard:
        ensure_object_id(dashboard_id, "dashboard id")
        return self.store.find(Collection.DASHBOARDS, id=dashboard_id, created_by=owner_id)

    def get_dashboard_detail(
        self, dashboard_id: str, owner_id: str
    ) -> Tuple[Dashboard, List[Dict[str, Any]]]:
        """Get a dashboard with its layout joined to the charts it places

        Returns:
            The dashboard and the hydrated layout; entries whose chart is gone
            are left out
        """
        dashboard = self.get_dashboard(dashboard_id, owner_id)
        chart_ids = dashboard.chart_ids
        if not chart_ids:
            return dashboard, []

        charts = {
            chart.id: chart
            for chart in self.store.find_many(
                Collection.CHARTS, id__in=chart_ids, created_by=owner_id
            )
        }
        layout = []
        for item in dashboard.layout:
            chart = charts.get(item.get("chart_id"))
            if chart is None:
                logger.warning(f"chart not found for layout entry {item.get('chart_id')}")
                continue
            layout.append(
                {
                    **{key: item.get(key, 0) for key in LAYOUT_KEYS},
                    "chart_id": chart.id,
                    "name": chart.name,
                    "type": chart.chart_type,
                    "data_source_id": chart.data_source_id,
                    "config": chart.config,
                }
            )
        return dashboard, layout

    def update_dashboard(
        self,
        dashboard_id: str,
        owner_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        layout: Optional[List[dict]] = None,
    ) -> Dashboard:
        """Apply the given fields and count the edit, in one write"""
        ensure_object_id(dashboard_id, "dashboard id")
        fields: Dict[str, Any] = {}
        if name is not None:
            if not name:
                raise ValidationFailedError("dashboard name is required")
            fields["name"] = name
        if description is not None:
            fields["description"] = description
        if layout is not None:
            fields["layout"] = validate_layout(layout)

        matched = self.store.update_fields(
            Collection.DASHBOARDS,
            {"id": dashboard_id, "created_by": owner_id},
            self.edit_counter.with_increment(fields),
        )
        if matched == 0:
            raise EntityNotFoundError(Collection.DASHBOARDS.value, dashboard_id)
        return self.get_dashboard(dashboard_id, owner_id)

    def delete_dashboard(self, dashboard_id: str, owner_id: str) -> CascadeResult:
        return self.link_maintainer.delete_dashboard(dashboard_id, owner_id)
