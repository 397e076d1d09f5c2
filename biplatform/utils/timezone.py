import datetime
import pytz

UTC = pytz.utc


def as_utc(timestamp: datetime.datetime):
    """Return time in UTC"""
    return timestamp.astimezone(UTC) if timestamp.tzinfo else UTC.localize(timestamp)


def shift_months(timestamp: datetime.datetime, months: int) -> datetime.datetime:
    """Move a timestamp by whole calendar months, clamping the day to the target month"""
    month_index = timestamp.year * 12 + (timestamp.month - 1) + months
    year, month = divmod(month_index, 12)
    month += 1
    next_month_index = month_index + 1
    next_year, next_month = divmod(next_month_index, 12)
    last_day = (
        datetime.date(next_year, next_month + 1, 1) - datetime.timedelta(days=1)
    ).day
    return timestamp.replace(year=year, month=month, day=min(timestamp.day, last_day))


def month_start(timestamp: datetime.datetime, months_back: int = 0) -> datetime.datetime:
    """First instant (UTC) of the calendar month `months_back` months before `timestamp`"""
    shifted = shift_months(as_utc(timestamp).replace(day=1), -months_back)
    return UTC.localize(datetime.datetime(shifted.year, shifted.month, 1))
