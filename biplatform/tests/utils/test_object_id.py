import pytest

from biplatform.core.exceptions import ValidationFailedError
from biplatform.utils.object_id import ensure_object_id, generate_object_id, is_valid_object_id


def test_generated_ids_are_unique_and_valid():
    ids = {generate_object_id() for _ in range(1000)}
    assert len(ids) == 1000
    assert all(is_valid_object_id(value) for value in ids)


@pytest.mark.parametrize("value", ["", "xyz", "A" * 24, "a" * 23, "a" * 24 + "\n", None, 12])
def test_invalid_ids(value):
    assert not is_valid_object_id(value)
    with pytest.raises(ValidationFailedError) as excinfo:
        ensure_object_id(value, "chart id")
    assert excinfo.value.message == "invalid chart id"
