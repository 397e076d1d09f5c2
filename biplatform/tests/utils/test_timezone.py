import datetime

import pytest

from biplatform.utils.timezone import UTC, as_utc, month_start, shift_months


@pytest.mark.parametrize(
    "start,months,expected",
    [
        (datetime.datetime(2024, 1, 31), 1, datetime.datetime(2024, 2, 29)),
        (datetime.datetime(2023, 3, 31), -1, datetime.datetime(2023, 2, 28)),
        (datetime.datetime(2024, 11, 15), 2, datetime.datetime(2025, 1, 15)),
        (datetime.datetime(2024, 2, 10), -6, datetime.datetime(2023, 8, 10)),
    ],
)
def test_shift_months(start, months, expected):
    assert shift_months(start, months) == expected


def test_month_start_is_utc():
    local = datetime.datetime(2024, 3, 1, 1, 0, tzinfo=datetime.timezone(datetime.timedelta(hours=5)))
    # 2024-02-29 20:00 in UTC
    assert month_start(local) == UTC.localize(datetime.datetime(2024, 2, 1))
    assert month_start(local, 2) == UTC.localize(datetime.datetime(2023, 12, 1))


def test_as_utc_naive_is_assumed_utc():
    assert as_utc(datetime.datetime(2024, 1, 1)).tzinfo is not None
