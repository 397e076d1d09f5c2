"""Tests for DataSourceService"""

import pytest

from biplatform.core.exceptions import EntityNotFoundError, ValidationFailedError
from biplatform.models import DataSource
from biplatform.services.datasource_service import (
    DataSourceData,
    DataSourceService,
    validate_preprocessing,
)

pytestmark = pytest.mark.django_db


@pytest.fixture
def datasource_service(store):
    return DataSourceService(store)


def upload(**overrides):
    fields = {
        "name": "sales.csv",
        "source_type": "csv",
        "headers": ["region", "amount", "date"],
        "content": [["north", "10", "2024-01-01"], ["south", "20"]],
    }
    fields.update(overrides)
    return DataSourceData(**fields)


def test_create_pads_short_rows(datasource_service, owner_id):
    data_source = datasource_service.create_data_source(owner_id, upload())

    stored = DataSource.objects.get(id=data_source.id)
    assert stored.content[1] == ["south", "20", ""]
    assert stored.linked_charts == []
    assert stored.to_json(include_content=False)["row_count"] == 2


def test_create_rejects_bad_input(datasource_service, owner_id):
    with pytest.raises(ValidationFailedError):
        datasource_service.create_data_source(owner_id, upload(source_type="parquet"))
    with pytest.raises(ValidationFailedError):
        datasource_service.create_data_source(owner_id, upload(name=""))
    with pytest.raises(ValidationFailedError):
        datasource_service.create_data_source(owner_id, upload(content=[["a", "b", "c", "d"]]))


def test_validate_preprocessing():
    assert validate_preprocessing([{"field": "amount", "type": "number"}], ["amount"]) == [
        {"field": "amount", "type": "number", "format": "", "aggregator": ""}
    ]
    with pytest.raises(ValidationFailedError):
        validate_preprocessing([{"field": "missing"}], ["amount"])
    with pytest.raises(ValidationFailedError):
        validate_preprocessing([{"field": "amount", "type": "blob"}])
    with pytest.raises(ValidationFailedError):
        validate_preprocessing(["amount"])


def test_rename_and_preprocessing(datasource_service, owner_id):
    data_source = datasource_service.create_data_source(owner_id, upload())

    datasource_service.rename_data_source(data_source.id, owner_id, "renamed.csv")
    datasource_service.update_preprocessing(
        data_source.id, owner_id, [{"field": "date", "type": "date", "format": "%Y-%m-%d"}]
    )

    stored = DataSource.objects.get(id=data_source.id)
    assert stored.name == "renamed.csv"
    assert stored.preprocessing[0]["format"] == "%Y-%m-%d"


def test_get_not_owned(datasource_service, owner_id, other_owner_id):
    data_source = datasource_service.create_data_source(other_owner_id, upload())

    with pytest.raises(EntityNotFoundError):
        datasource_service.get_data_source(data_source.id, owner_id)
    with pytest.raises(EntityNotFoundError):
        datasource_service.rename_data_source(data_source.id, owner_id, "x")
    assert datasource_service.list_data_sources(owner_id) == []


def test_delete_data_source(datasource_service, owner_id, make_chart):
    data_source = datasource_service.create_data_source(owner_id, upload())
    make_chart(owner_id, data_source)

    result = datasource_service.delete_data_source(data_source.id, owner_id)

    assert result.charts_deleted == 1
    assert not DataSource.objects.filter(id=data_source.id).exists()
