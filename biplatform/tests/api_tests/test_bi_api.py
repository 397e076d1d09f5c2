"""Tests for the BI api endpoints, called directly with a mock request"""

from unittest.mock import patch

import pytest
from ninja.errors import HttpError

from biplatform.api.chart_api import create_chart, delete_chart, get_chart, list_charts
from biplatform.api.dashboard_api import (
    create_dashboard,
    delete_dashboard,
    get_dashboard,
    update_dashboard,
)
from biplatform.api.datasource_api import create_data_source, delete_data_source, list_data_sources
from biplatform.api.mlmodel_api import create_model, store_training_result
from biplatform.api.stats_api import get_user_stats
from biplatform.core.entity_store import EntityStore
from biplatform.core.exceptions import StoreUnavailableError
from biplatform.models import Chart
from biplatform.schemas.chart_schema import ChartCreate
from biplatform.schemas.dashboard_schema import DashboardCreate, DashboardUpdate
from biplatform.schemas.datasource_schema import DataSourceCreate
from biplatform.schemas.mlmodel_schema import MLModelCreate, TrainingResultPayload
from biplatform.tests.conftest import mock_request
from biplatform.utils.object_id import generate_object_id

pytestmark = pytest.mark.django_db


@pytest.fixture
def request_for(owner_id):
    return mock_request(owner_id)


def test_missing_owner_is_unauthorized():
    for owner_id in (None, "", "not-an-id", "a" * 24 + "\n"):
        with pytest.raises(HttpError) as excinfo:
            list_data_sources(mock_request(owner_id))
        assert excinfo.value.status_code == 401


def test_data_source_lifecycle(request_for):
    payload = DataSourceCreate(
        name="sales.csv",
        type="csv",
        headers=["region", "amount"],
        content=[["north", "10"]],
    )
    created = create_data_source(request_for, payload)
    assert created["row_count"] == 1

    listed = list_data_sources(request_for)
    assert [item["id"] for item in listed] == [created["id"]]
    assert "content" not in listed[0]

    response = delete_data_source(request_for, created["id"])
    assert response == {"success": True, "charts_deleted": 0, "warnings": []}


def test_create_chart_returns_warnings(request_for, owner_id, make_data_source):
    data_source = make_data_source(owner_id)
    payload = ChartCreate(
        name="revenue",
        type="bar",
        data_source_id=data_source.id,
        config={
            "metrics": [{"field": "amount", "aggregator": "sum"}],
            "settings": {"colors": ["#fff"]},
        },
    )

    response = create_chart(request_for, payload, dashboard_id=generate_object_id())

    assert response["chart"]["data_source_id"] == data_source.id
    assert response["chart"]["config"]["settings"] == {"colors": ["#fff"]}
    assert "visual_map" not in response["chart"]["config"]
    assert response["warnings"] == ["increment edit count: dashboard not found"]


def test_create_chart_unknown_data_source_is_404(request_for):
    payload = ChartCreate(name="revenue", type="bar", data_source_id=generate_object_id())

    with pytest.raises(HttpError) as excinfo:
        create_chart(request_for, payload)
    assert excinfo.value.status_code == 404
    assert str(excinfo.value) == "data source not found"


def test_malformed_id_is_400(request_for):
    with pytest.raises(HttpError) as excinfo:
        get_chart(request_for, "1234")
    assert excinfo.value.status_code == 400


def test_store_unavailable_is_503(request_for):
    with patch.object(EntityStore, "find_many", side_effect=StoreUnavailableError()):
        with pytest.raises(HttpError) as excinfo:
            list_charts(request_for)
    assert excinfo.value.status_code == 503


def test_chart_of_other_owner_is_404(owner_id, other_owner_id, make_data_source, make_chart):
    chart = make_chart(other_owner_id, make_data_source(other_owner_id))

    with pytest.raises(HttpError) as excinfo:
        delete_chart(mock_request(owner_id), chart.id)
    assert excinfo.value.status_code == 404
    assert Chart.objects.filter(id=chart.id).exists()


def test_list_charts_by_ids(request_for, owner_id, make_data_source, make_chart):
    data_source = make_data_source(owner_id)
    first = make_chart(owner_id, data_source)
    make_chart(owner_id, data_source)

    response = list_charts(request_for, ids=f"{first.id},")

    assert [item["id"] for item in response] == [first.id]


def test_dashboard_lifecycle(request_for, owner_id, make_data_source, make_chart):
    chart = make_chart(owner_id, make_data_source(owner_id))
    created = create_dashboard(
        request_for,
        DashboardCreate(name="Sales", layout=[{"chart_id": chart.id, "width": 6, "height": 4}]),
    )
    assert created["edit_count"] == 1

    updated = update_dashboard(request_for, created["id"], DashboardUpdate(description="q3"))
    assert updated["edit_count"] == 2

    detail = get_dashboard(request_for, created["id"])
    assert detail["charts"][0]["name"] == chart.name

    response = delete_dashboard(request_for, created["id"])
    assert response == {"success": True, "charts_deleted": 1, "warnings": []}


def test_mlmodel_training_result(request_for):
    model = create_model(
        request_for,
        MLModelCreate(name="forecast", type="kmeans", data_source_id=generate_object_id()),
    )

    trained = store_training_result(
        request_for, model["id"], TrainingResultPayload(training_result={"metrics": {"r2": 1}})
    )

    assert trained["training_result"] == {"metrics": {"r2": 1}}


def test_user_stats(request_for, owner_id, make_dashboard):
    make_dashboard(owner_id)

    response = get_user_stats(request_for)

    assert response["total_dashboards"] == 1
    assert len(response["usage_stats"]) == 6
    assert response["recent_activity"][0]["activity_type"] == "dashboard"
