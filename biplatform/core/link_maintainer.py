"""Keeps the data source -> chart -> dashboard references consistent

There are no foreign keys and no multi-document transactions. Each cascade is
an ordered list of independent steps: the primary write decides success,
every follow-up step is best-effort. A failed follow-up step is logged and
recorded on the CascadeResult, never rolled back, and does not stop the
remaining steps. `reconcile` repairs whatever a crash or a failed step left
behind.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from biplatform.core.edit_counter import EditCounter
from biplatform.core.entity_store import Collection, EntityStore
from biplatform.core.exceptions import EntityNotFoundError, EntityServiceError
from biplatform.models import Chart
from biplatform.utils.custom_logger import CustomLogger
from biplatform.utils.object_id import ensure_object_id, is_valid_object_id

logger = CustomLogger("biplatform.link_maintainer")


@dataclass
class CascadeResult:
    """Outcome of a primary write and its follow-up steps"""

    entity_id: str
    charts_deleted: int = 0
    dashboards_pruned: int = 0
    sources_unlinked: int = 0
    errors: List[str] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.errors


@dataclass
class ReconcileReport:
    """What a reconcile pass changed for one owner"""

    owner_id: str
    sources_relinked: int = 0
    dashboards_pruned: int = 0
    orphan_charts: List[str] = field(default_factory=list)
    orphans_deleted: int = 0


def _layout_references(chart_ids: Iterable[str]):
    targets = set(chart_ids)
    return lambda item: isinstance(item, dict) and item.get("chart_id") in targets


class LinkMaintainer:
    """Create/delete paths that have to touch more than one collection"""

    def __init__(self, store: EntityStore, edit_counter: Optional[EditCounter] = None):
        self.store = store
        self.edit_counter = edit_counter or EditCounter(store)

    def _best_effort(self, result: CascadeResult, step: str, func, *args, **kwargs):
        try:
            return func(*args, **kwargs)
        except EntityServiceError as err:
            logger.error(f"{step} failed after primary write on {result.entity_id}: {err.message}")
            result.errors.append(f"{step}: {err.message}")
            return None

    # follow-up steps

    def touch_dashboard(self, result: CascadeResult, dashboard_id: str, owner_id: str):
        """best-effort edit count bump for a dashboard hinted by a chart call"""
        if not is_valid_object_id(dashboard_id):
            logger.warning(f"ignoring malformed dashboard hint {dashboard_id!r}")
            result.errors.append("increment edit count: invalid dashboard id")
            return
        self._best_effort(
            result, "increment edit count", self.edit_counter.increment, dashboard_id, owner_id
        )

    def prune_layouts(self, result: CascadeResult, owner_id: str, chart_ids: List[str]):
        """drop layout entries pointing at `chart_ids` from every dashboard of the owner"""
        pruned = self._best_effort(
            result,
            "prune dashboard layouts",
            self.store.pull,
            Collection.DASHBOARDS,
            {"created_by": owner_id},
            "layout",
            _layout_references(chart_ids),
        )
        result.dashboards_pruned += pruned or 0

    def unlink_charts(self, result: CascadeResult, owner_id: str, chart_ids: List[str]):
        """drop `chart_ids` from the linked_charts of every data source of the owner"""
        targets = set(chart_ids)
        unlinked = self._best_effort(
            result,
            "unlink charts from data sources",
            self.store.pull,
            Collection.DATA_SOURCES,
            {"created_by": owner_id},
            "linked_charts",
            lambda item: item in targets,
        )
        result.sources_unlinked += unlinked or 0

    # cascades

    def create_chart(
        self, chart: Chart, owner_id: str, dashboard_id: Optional[str] = None
    ) -> Tuple[Chart, CascadeResult]:
        """
        Persist `chart` for `owner_id` after checking its data source.

        Raises ValidationFailedError for a malformed data source id and
        EntityNotFoundError when the data source does not resolve under the owner.
        """
        ensure_object_id(chart.data_source_id, "data source id")
        self.store.find(Collection.DATA_SOURCES, id=chart.data_source_id, created_by=owner_id)

        chart.created_by = owner_id
        self.store.insert(Collection.CHARTS, chart)
        result = CascadeResult(chart.id)

        matched = self._best_effort(
            result,
            "link chart to data source",
            self.store.add_to_set,
            Collection.DATA_SOURCES,
            {"id": chart.data_source_id},
            "linked_charts",
            chart.id,
        )
        if matched == 0:
            logger.error(
                f"data source {chart.data_source_id} vanished before chart {chart.id} was linked"
            )
            result.errors.append("link chart to data source: data source not found")

        if dashboard_id:
            self.touch_dashboard(result, dashboard_id, owner_id)

        logger.info(f"created chart {chart.id} on data source {chart.data_source_id}")
        return chart, result

    def delete_chart(self, chart_id: str, owner_id: str) -> CascadeResult:
        """delete an owned chart, then prune it from layouts and data sources"""
        ensure_object_id(chart_id, "chart id")
        deleted = self.store.delete_one(Collection.CHARTS, {"id": chart_id, "created_by": owner_id})
        if deleted == 0:
            raise EntityNotFoundError(Collection.CHARTS.value, chart_id)

        result = CascadeResult(chart_id, charts_deleted=deleted)
        self.prune_layouts(result, owner_id, [chart_id])
        self.unlink_charts(result, owner_id, [chart_id])
        logger.info(f"deleted chart {chart_id}, pruned {result.dashboards_pruned} dashboards")
        return result

    def delete_data_source(self, data_source_id: str, owner_id: str) -> CascadeResult:
        """
        Delete the charts built on a data source, prune them from the owner's
        dashboards, then delete the data source itself.
        """
        ensure_object_id(data_source_id, "data source id")
        data_source = self.store.find(
            Collection.DATA_SOURCES, id=data_source_id, created_by=owner_id
        )
        result = CascadeResult(data_source_id)

        chart_ids = list(data_source.linked_charts or [])
        # charts whose link step failed never made it into linked_charts
        dependents = self._dependent_chart_ids(result, data_source_id, owner_id)
        for chart_id in dependents:
            if chart_id not in chart_ids:
                chart_ids.append(chart_id)

        if chart_ids:
            deleted = self._best_effort(
                result,
                "delete linked charts",
                self.store.delete_many,
                Collection.CHARTS,
                {"id__in": chart_ids},
            )
            result.charts_deleted = deleted or 0
            self.prune_layouts(result, owner_id, chart_ids)

        deleted = self.store.delete_one(
            Collection.DATA_SOURCES, {"id": data_source_id, "created_by": owner_id}
        )
        if deleted == 0:
            raise EntityNotFoundError(Collection.DATA_SOURCES.value, data_source_id)

        logger.info(
            f"deleted data source {data_source_id} with {result.charts_deleted} charts"
        )
        return result

    def delete_dashboard(self, dashboard_id: str, owner_id: str) -> CascadeResult:
        """
        Delete the charts placed on a dashboard, unlink them from their data
        sources and from the owner's other dashboards, then delete the dashboard.
        The chart delete is not best-effort: when it fails nothing else is touched.
        """
        ensure_object_id(dashboard_id, "dashboard id")
        dashboard = self.store.find(Collection.DASHBOARDS, id=dashboard_id, created_by=owner_id)
        result = CascadeResult(dashboard_id)

        chart_ids = list(dict.fromkeys(dashboard.chart_ids))
        if chart_ids:
            # primary step: a failure here leaves the dashboard and its links untouched
            result.charts_deleted = self.store.delete_many(
                Collection.CHARTS, {"id__in": chart_ids, "created_by": owner_id}
            )
            self.unlink_charts(result, owner_id, chart_ids)
            self.prune_layouts(result, owner_id, chart_ids)

        deleted = self.store.delete_one(
            Collection.DASHBOARDS, {"id": dashboard_id, "created_by": owner_id}
        )
        if deleted == 0:
            raise EntityNotFoundError(Collection.DASHBOARDS.value, dashboard_id)

        logger.info(f"deleted dashboard {dashboard_id} with {result.charts_deleted} charts")
        return result

    def _dependent_chart_ids(self, result: CascadeResult, data_source_id: str, owner_id: str):
        rows = self._best_effort(
            result,
            "find dependent charts",
            self.store.project,
            Collection.CHARTS,
            {"id": "id"},
            order_by=("created_at",),
            data_source_id=data_source_id,
            created_by=owner_id,
        )
        return [row["id"] for row in rows or []]

    def reconcile(self, owner_id: str, delete_orphans: bool = False) -> ReconcileReport:
        """
        Repair one owner's reference graph.

        Rebuilds every data source's linked_charts from the charts pointing at
        it, optionally deletes charts whose data source is gone, and prunes
        layout entries that point at charts which no longer exist. Writes made
        concurrently with a reconcile pass can be undone by it.
        """
        report = ReconcileReport(owner_id)
        charts = self.store.project(
            Collection.CHARTS,
            {"id": "id", "data_source_id": "data_source_id"},
            order_by=("created_at",),
            created_by=owner_id,
        )
        sources = self.store.find_many(Collection.DATA_SOURCES, created_by=owner_id)
        source_ids = {source.id for source in sources}

        expected = {source_id: [] for source_id in source_ids}
        for chart in charts:
            if chart["data_source_id"] in expected:
                expected[chart["data_source_id"]].append(chart["id"])
            else:
                report.orphan_charts.append(chart["id"])

        for source in sources:
            linked = list(source.linked_charts or [])
            wanted = expected[source.id]
            if len(linked) != len(wanted) or set(linked) != set(wanted):
                self.store.update_fields(
                    Collection.DATA_SOURCES, {"id": source.id}, {"linked_charts": wanted}
                )
                report.sources_relinked += 1

        existing = {chart["id"] for chart in charts}
        if delete_orphans and report.orphan_charts:
            report.orphans_deleted = self.store.delete_many(
                Collection.CHARTS, {"id__in": report.orphan_charts, "created_by": owner_id}
            )
            existing -= set(report.orphan_charts)

        report.dashboards_pruned = self.store.pull(
            Collection.DASHBOARDS,
            {"created_by": owner_id},
            "layout",
            lambda item: not isinstance(item, dict) or item.get("chart_id") not in existing,
        )
        logger.info(
            f"reconciled owner {owner_id}: {report.sources_relinked} sources relinked, "
            f"{report.dashboards_pruned} dashboards pruned, "
            f"{len(report.orphan_charts)} orphan charts"
        )
        return report
