"""Tests for DashboardService"""

from unittest.mock import patch

import pytest

from biplatform.core.exceptions import EntityNotFoundError, ValidationFailedError
from biplatform.models import Dashboard
from biplatform.services.dashboard_service import DashboardService, validate_layout
from biplatform.utils.object_id import generate_object_id

pytestmark = pytest.mark.django_db


@pytest.fixture
def dashboard_service(store):
    return DashboardService(store)


def test_create_then_update_counts_edits(dashboard_service, owner_id):
    dashboard = dashboard_service.create_dashboard(owner_id, "Sales", "quarterly")
    assert dashboard.edit_count == 1

    updated = dashboard_service.update_dashboard(dashboard.id, owner_id, name="Sales 2024")

    assert updated.edit_count == 2
    assert updated.name == "Sales 2024"
    assert updated.description == "quarterly"


def test_update_is_a_single_write(dashboard_service, store, owner_id):
    dashboard = dashboard_service.create_dashboard(owner_id, "Sales")

    with patch.object(store, "update_fields", wraps=store.update_fields) as update_fields:
        dashboard_service.update_dashboard(dashboard.id, owner_id, description="new")

    assert update_fields.call_count == 1


def test_update_not_owned(dashboard_service, owner_id, other_owner_id):
    dashboard = dashboard_service.create_dashboard(other_owner_id, "theirs")

    with pytest.raises(EntityNotFoundError):
        dashboard_service.update_dashboard(dashboard.id, owner_id, name="mine")
    assert Dashboard.objects.get(id=dashboard.id).edit_count == 1


def test_update_layout(dashboard_service, owner_id):
    dashboard = dashboard_service.create_dashboard(owner_id, "Sales")
    chart_id = generate_object_id()

    updated = dashboard_service.update_dashboard(
        dashboard.id, owner_id, layout=[{"chart_id": chart_id, "x": 1, "y": 2, "width": 3, "height": 4}]
    )

    assert updated.layout == [{"chart_id": chart_id, "x": 1, "y": 2, "width": 3, "height": 4}]


def test_validate_layout_rejects_bad_entries():
    with pytest.raises(ValidationFailedError):
        validate_layout([{"chart_id": "nope"}])
    with pytest.raises(ValidationFailedError):
        validate_layout([{"chart_id": generate_object_id(), "width": -1}])
    with pytest.raises(ValidationFailedError):
        validate_layout(["not a dict"])
    assert validate_layout([{"chart_id": "a" * 24}]) == [
        {"chart_id": "a" * 24, "x": 0, "y": 0, "width": 0, "height": 0}
    ]


def test_create_requires_name(dashboard_service, owner_id):
    with pytest.raises(ValidationFailedError):
        dashboard_service.create_dashboard(owner_id, "")


def test_list_dashboards_owner_scoped(dashboard_service, owner_id, other_owner_id):
    dashboard_service.create_dashboard(owner_id, "mine")
    dashboard_service.create_dashboard(other_owner_id, "theirs")

    assert [d.name for d in dashboard_service.list_dashboards(owner_id)] == ["mine"]


def test_dashboard_detail_skips_missing_charts(
    dashboard_service, owner_id, make_data_source, make_chart, make_dashboard
):
    data_source = make_data_source(owner_id)
    chart = make_chart(owner_id, data_source, chart_type="line")
    dashboard = make_dashboard(owner_id, charts=[chart, generate_object_id()])

    found, layout = dashboard_service.get_dashboard_detail(dashboard.id, owner_id)

    assert found.id == dashboard.id
    assert layout == [
        {
            "chart_id": chart.id,
            "x": 0,
            "y": 0,
            "width": 6,
            "height": 4,
            "name": "revenue",
            "type": "line",
            "data_source_id": data_source.id,
            "config": chart.config,
        }
    ]


def test_get_dashboard_malformed_id(dashboard_service, owner_id):
    with pytest.raises(ValidationFailedError):
        dashboard_service.get_dashboard("xyz", owner_id)


def test_delete_dashboard(dashboard_service, owner_id, make_data_source, make_chart, make_dashboard):
    chart = make_chart(owner_id, make_data_source(owner_id))
    dashboard = make_dashboard(owner_id, charts=[chart])

    result = dashboard_service.delete_dashboard(dashboard.id, owner_id)

    assert result.charts_deleted == 1
    assert not Dashboard.objects.filter(id=dashboard.id).exists()
