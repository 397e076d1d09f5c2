"""Tests for the user stats report"""

from unittest.mock import patch

import pytest

from biplatform.core.exceptions import StoreUnavailableError
from biplatform.services.stats_service import StatsService, average_metrics
from biplatform.tests.conftest import at

pytestmark = pytest.mark.django_db

NOW = at(2024, 6, 15, 12)


@pytest.fixture
def stats_service(store):
    return StatsService(store)


def test_empty_owner(stats_service, owner_id):
    stats = stats_service.build_user_stats(owner_id, now=NOW)

    assert stats.total_dashboards == 0
    assert stats.total_data_sources == 0
    assert stats.total_charts == 0
    assert stats.total_ml_models == 0
    assert stats.recent_activity == []
    assert [usage.date for usage in stats.usage_stats] == [
        "2024-01",
        "2024-02",
        "2024-03",
        "2024-04",
        "2024-05",
        "2024-06",
    ]
    for usage in stats.usage_stats:
        assert (usage.dashboards, usage.charts, usage.queries, usage.ml_models) == (0, 0, 0, 0)
    assert stats.to_json()["ml_model_stats"] == {
        "model_types": {},
        "trained_models": 0,
        "pending_models": 0,
        "average_metrics": {},
    }


def test_totals_are_owner_scoped(
    stats_service, owner_id, other_owner_id, make_data_source, make_chart, make_dashboard
):
    data_source = make_data_source(owner_id)
    make_chart(owner_id, data_source)
    make_dashboard(owner_id)
    make_dashboard(other_owner_id)

    stats = stats_service.build_user_stats(owner_id, now=NOW)

    assert (stats.total_dashboards, stats.total_data_sources, stats.total_charts) == (1, 1, 1)


def test_usage_series_buckets_by_calendar_month(
    stats_service, owner_id, make_data_source, make_chart, make_dashboard, make_ml_model
):
    data_source = make_data_source(owner_id)
    make_chart(owner_id, data_source, created_at=at(2024, 3, 31, 23))
    make_chart(owner_id, data_source, created_at=at(2024, 4, 1))
    make_chart(owner_id, data_source, created_at=at(2024, 4, 20))
    make_dashboard(owner_id, created_at=at(2024, 6, 1))
    make_ml_model(owner_id, created_at=at(2024, 1, 1))
    # outside the six months
    make_dashboard(owner_id, created_at=at(2023, 12, 31, 23))

    usage = {item.date: item for item in stats_service.build_user_stats(owner_id, now=NOW).usage_stats}

    assert usage["2024-03"].charts == 1
    assert usage["2024-04"].charts == 2
    assert usage["2024-04"].queries == 4
    assert usage["2024-06"].dashboards == 1
    assert usage["2024-01"].ml_models == 1
    assert usage["2024-01"].dashboards == 0


def test_recent_activity_merge(
    stats_service, owner_id, make_data_source, make_chart, make_dashboard, make_ml_model
):
    data_source = make_data_source(owner_id)
    for day in range(1, 7):
        make_dashboard(owner_id, name=f"d{day}", created_at=at(2024, 5, day))
    make_chart(owner_id, data_source, name="latest chart", chart_type="pie", created_at=at(2024, 6, 1))
    make_ml_model(owner_id, name="model", model_type="kmeans", created_at=at(2024, 5, 4, 12))
    # older than six months
    make_chart(owner_id, data_source, name="stale", created_at=at(2023, 11, 1))

    activity = stats_service.build_user_stats(owner_id, now=NOW).recent_activity

    assert [item.name for item in activity] == ["latest chart", "d6", "d5", "model", "d4"]
    assert activity[0].type == "pie"
    assert activity[0].activity_type == "chart"
    assert activity[1].type is None
    assert activity[3].type == "kmeans"
    assert activity[3].activity_type == "mlmodel"


def test_recent_lists(stats_service, owner_id, make_dashboard, make_ml_model):
    for day in range(1, 8):
        make_dashboard(owner_id, name=f"d{day}", created_at=at(2024, 5, day))
    make_ml_model(owner_id)

    stats = stats_service.build_user_stats(owner_id, now=NOW)

    assert [item["name"] for item in stats.recent_dashboards] == ["d7", "d6", "d5", "d4", "d3"]
    assert len(stats.recent_ml_models) == 1


def test_ml_model_stats(stats_service, owner_id, make_ml_model):
    make_ml_model(owner_id, model_type="kmeans", training_result={"metrics": {"r2": 0.5}})
    make_ml_model(owner_id, model_type="kmeans", training_result={"metrics": {"r2": 0.7, "mse": 2}})
    make_ml_model(owner_id, model_type="decision_tree")

    model_stats = stats_service.build_user_stats(owner_id, now=NOW).ml_model_stats

    assert model_stats.trained_models == 2
    assert model_stats.pending_models == 1
    assert model_stats.model_types == {"kmeans": 2, "decision_tree": 1}
    assert model_stats.average_metrics == {"r2": pytest.approx(0.6), "mse": 2}


def test_failed_count_degrades_to_zero(stats_service, store, owner_id, make_dashboard):
    make_dashboard(owner_id, created_at=at(2024, 6, 2))

    with patch.object(store, "count", side_effect=StoreUnavailableError()):
        stats = stats_service.build_user_stats(owner_id, now=NOW)

    assert stats.total_dashboards == 0
    assert len(stats.usage_stats) == 6
    assert [item.name for item in stats.recent_activity] == ["overview"]


def test_failed_activity_query_keeps_the_rest(stats_service, store, owner_id, make_dashboard):
    make_dashboard(owner_id, created_at=at(2024, 6, 2))

    with patch.object(store, "project", side_effect=StoreUnavailableError()):
        stats = stats_service.build_user_stats(owner_id, now=NOW)

    assert stats.recent_activity == []
    assert stats.total_dashboards == 1


def test_average_metrics_ignores_non_numeric():
    assert average_metrics([{"metrics": {"r2": 1, "label": "x", "flag": True}}, None, {}]) == {
        "r2": 1
    }
