"""User stats report: totals, usage history and recent activity

The report is a best-effort composite. Every query below runs on its own and
degrades to zero/empty when the store fails, so one broken collection never
hides the rest of the report.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from django.utils import timezone

from biplatform.core.activity import (
    RECENT_LIMIT,
    USAGE_MONTHS,
    ActivityRecord,
    ActivityType,
    merge_recent_activity,
    usage_windows,
)
from biplatform.core.entity_store import Collection, EntityStore
from biplatform.core.exceptions import StoreUnavailableError
from biplatform.utils.custom_logger import CustomLogger
from biplatform.utils.timezone import shift_months

logger = CustomLogger("biplatform.stats_service")

# estimated queries issued per chart created
QUERIES_PER_CHART = 2

ACTIVITY_SOURCES = (
    (Collection.DASHBOARDS, ActivityType.DASHBOARD, None),
    (Collection.CHARTS, ActivityType.CHART, "chart_type"),
    (Collection.ML_MODELS, ActivityType.MLMODEL, "model_type"),
)


@dataclass
class UsageStat:
    """Entities created by the owner in one calendar month"""

    date: str
    dashboards: int = 0
    charts: int = 0
    ml_models: int = 0

    @property
    def queries(self) -> int:
        return self.charts * QUERIES_PER_CHART

    def to_json(self):
        return {
            "date": self.date,
            "dashboards": self.dashboards,
            "charts": self.charts,
            "queries": self.queries,
            "ml_models": self.ml_models,
        }


@dataclass
class MLModelStats:
    model_types: Dict[str, int] = field(default_factory=dict)
    trained_models: int = 0
    pending_models: int = 0
    average_metrics: Dict[str, float] = field(default_factory=dict)

    def to_json(self):
        return {
            "model_types": self.model_types,
            "trained_models": self.trained_models,
            "pending_models": self.pending_models,
            "average_metrics": self.average_metrics,
        }


@dataclass
class UserStats:
    total_dashboards: int = 0
    total_data_sources: int = 0
    total_charts: int = 0
    total_ml_models: int = 0
    recent_activity: List[ActivityRecord] = field(default_factory=list)
    recent_dashboards: List[Dict[str, Any]] = field(default_factory=list)
    recent_ml_models: List[Dict[str, Any]] = field(default_factory=list)
    usage_stats: List[UsageStat] = field(default_factory=list)
    ml_model_stats: MLModelStats = field(default_factory=MLModelStats)

    def to_json(self):
        return {
            "total_dashboards": self.total_dashboards,
            "total_data_sources": self.total_data_sources,
            "total_charts": self.total_charts,
            "total_ml_models": self.total_ml_models,
            "recent_activity": [record.to_json() for record in self.recent_activity],
            "recent_dashboards": self.recent_dashboards,
            "recent_ml_models": self.recent_ml_models,
            "usage_stats": [usage.to_json() for usage in self.usage_stats],
            "ml_model_stats": self.ml_model_stats.to_json(),
        }


class StatsService:
    """Builds the per-owner analytics report"""

    def __init__(self, store: EntityStore):
        self.store = store

    def _degrade(self, step: str, default, func, *args, **kwargs):
        try:
            return func(*args, **kwargs)
        except StoreUnavailableError as err:
            logger.error(f"stats step '{step}' degraded: {err.message}")
            return default

    def build_user_stats(self, owner_id: str, now: Optional[datetime] = None) -> UserStats:
        """Compose the report for `owner_id` as of `now` (defaults to the current time)"""
        now = now or timezone.now()
        stats = UserStats()

        stats.total_dashboards = self._count("count dashboards", Collection.DASHBOARDS, owner_id)
        stats.total_data_sources = self._count(
            "count data sources", Collection.DATA_SOURCES, owner_id
        )
        stats.total_charts = self._count("count charts", Collection.CHARTS, owner_id)
        stats.total_ml_models = self._count("count ml models", Collection.ML_MODELS, owner_id)

        stats.recent_dashboards = [
            dashboard.to_json() for dashboard in self._recent(Collection.DASHBOARDS, owner_id)
        ]
        stats.recent_ml_models = [
            model.to_json() for model in self._recent(Collection.ML_MODELS, owner_id)
        ]

        if stats.total_ml_models > 0:
            stats.ml_model_stats = self._ml_model_stats(owner_id, stats.total_ml_models)

        stats.usage_stats = self._usage_stats(owner_id, now)
        stats.recent_activity = self._recent_activity(owner_id, now)

        logger.info(
            f"built stats with {len(stats.recent_activity)} recent activities "
            f"for owner {owner_id}"
        )
        return stats

    def _count(self, step: str, collection: Collection, owner_id: str, **filters) -> int:
        return self._degrade(step, 0, self.store.count, collection, created_by=owner_id, **filters)

    def _recent(self, collection: Collection, owner_id: str):
        return self._degrade(
            f"recent {collection.value}",
            [],
            self.store.find_many,
            collection,
            limit=RECENT_LIMIT,
            created_by=owner_id,
        )

    def _ml_model_stats(self, owner_id: str, total: int) -> MLModelStats:
        model_stats = MLModelStats()
        model_stats.trained_models = self._count(
            "count trained models",
            Collection.ML_MODELS,
            owner_id,
            training_result__isnull=False,
        )
        model_stats.pending_models = total - model_stats.trained_models
        model_stats.model_types = self._degrade(
            "count model types",
            {},
            self.store.count_by,
            Collection.ML_MODELS,
            "model_type",
            created_by=owner_id,
        )
        trained = self._degrade(
            "trained models",
            [],
            self.store.find_many,
            Collection.ML_MODELS,
            created_by=owner_id,
            training_result__isnull=False,
        )
        model_stats.average_metrics = average_metrics(model.training_result for model in trained)
        return model_stats

    def _usage_stats(self, owner_id: str, now: datetime) -> List[UsageStat]:
        usage = []
        for label, start, end in usage_windows(now, USAGE_MONTHS):
            window = {"created_at__gte": start, "created_at__lt": end}
            usage.append(
                UsageStat(
                    date=label,
                    dashboards=self._count(
                        f"usage dashboards {label}", Collection.DASHBOARDS, owner_id, **window
                    ),
                    charts=self._count(
                        f"usage charts {label}", Collection.CHARTS, owner_id, **window
                    ),
                    ml_models=self._count(
                        f"usage ml models {label}", Collection.ML_MODELS, owner_id, **window
                    ),
                )
            )
        return usage

    def _recent_activity(self, owner_id: str, now: datetime) -> List[ActivityRecord]:
        since = shift_months(now, -USAGE_MONTHS)
        feeds = []
        for collection, activity_type, type_field in ACTIVITY_SOURCES:
            fields = {"id": "id", "name": "name", "created_at": "created_at"}
            literals = {"activity_type": activity_type}
            if type_field:
                fields["type"] = type_field
            else:
                literals["type"] = None
            rows = self._degrade(
                f"{activity_type} activity",
                [],
                self.store.project,
                collection,
                fields,
                literals,
                limit=RECENT_LIMIT,
                created_by=owner_id,
                created_at__gte=since,
            )
            feeds.append([ActivityRecord(**row) for row in rows])
        return merge_recent_activity(feeds, RECENT_LIMIT)


def average_metrics(training_results) -> Dict[str, float]:
    """mean of every numeric metric reported across training results"""
    totals = defaultdict(float)
    counts = defaultdict(int)
    for result in training_results:
        metrics = (result or {}).get("metrics") or {}
        if not isinstance(metrics, dict):
            continue
        for name, value in metrics.items():
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                totals[name] += value
                counts[name] += 1
    return {name: totals[name] / counts[name] for name in totals}
