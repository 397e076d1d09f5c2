"""Shared fixtures for the BI platform tests"""

import os
from datetime import datetime
from unittest.mock import Mock

import django
import pytest

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "biplatform.settings")
django.setup()

from biplatform.core.entity_store import EntityStore
from biplatform.models import Chart, Dashboard, DataSource, MLModel
from biplatform.utils.object_id import generate_object_id
from biplatform.utils.timezone import UTC


def mock_request(owner_id=None):
    """a request as the upstream authentication layer would hand it over"""
    request = Mock()
    request.owner_id = owner_id
    return request


def at(year, month, day=1, hour=0):
    return datetime(year, month, day, hour, tzinfo=UTC)


@pytest.fixture
def store():
    """a store handle of its own so that tests can close it"""
    return EntityStore()


@pytest.fixture
def owner_id():
    return generate_object_id()


@pytest.fixture
def other_owner_id():
    return generate_object_id()


@pytest.fixture
def make_data_source():
    def factory(owner_id, name="sales.csv", linked_charts=None, **fields):
        return DataSource.objects.create(
            name=name,
            source_type="csv",
            headers=["region", "amount"],
            content=[["north", "10"], ["south", "20"]],
            linked_charts=linked_charts or [],
            created_by=owner_id,
            **fields,
        )

    return factory


@pytest.fixture
def make_chart():
    def factory(owner_id, data_source, name="revenue", link=True, **fields):
        chart = Chart.objects.create(
            name=name,
            chart_type=fields.pop("chart_type", "bar"),
            data_source_id=data_source if isinstance(data_source, str) else data_source.id,
            config=fields.pop("config", {"dimensions": [{"field": "region"}], "metrics": []}),
            created_by=owner_id,
            **fields,
        )
        if link and not isinstance(data_source, str):
            data_source.linked_charts = list(data_source.linked_charts) + [chart.id]
            data_source.save()
        return chart

    return factory


@pytest.fixture
def make_dashboard():
    def factory(owner_id, charts=(), name="overview", **fields):
        layout = [
            {"chart_id": chart if isinstance(chart, str) else chart.id, "x": 0, "y": index * 4, "width": 6, "height": 4}
            for index, chart in enumerate(charts)
        ]
        return Dashboard.objects.create(name=name, layout=layout, created_by=owner_id, **fields)

    return factory


@pytest.fixture
def make_ml_model():
    def factory(owner_id, name="forecast", model_type="linear_regression", **fields):
        return MLModel.objects.create(
            name=name,
            model_type=model_type,
            data_source_id=fields.pop("data_source_id", generate_object_id()),
            features=["amount"],
            created_by=owner_id,
            **fields,
        )

    return factory
