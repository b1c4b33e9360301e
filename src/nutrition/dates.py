"""Calendar date helpers (dates carry no time zone)."""
from datetime import date, datetime, timedelta
from typing import List, Union

from src.data_layer.exceptions import InvalidArgumentError

DateLike = Union[date, str]


def parse_date(value: DateLike) -> date:
    """Parse an ISO YYYY-MM-DD string (or pass a date through).

    Raises:
        InvalidArgumentError: If the string is not an ISO calendar date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        raise InvalidArgumentError(
            "date", value, "expected an ISO date (YYYY-MM-DD)"
        ) from None


def add_days(day: DateLike, days: int) -> date:
    return parse_date(day) + timedelta(days=days)


def date_range(start: DateLike, end: DateLike) -> List[date]:
    """Return every date from start to end, both inclusive."""
    current = parse_date(start)
    end = parse_date(end)
    dates = []
    while current <= end:
        dates.append(current)
        current += timedelta(days=1)
    return dates


def week_start(day: DateLike) -> date:
    """Monday of the week containing day."""
    day = parse_date(day)
    return day - timedelta(days=day.weekday())


def month_start(day: DateLike) -> date:
    return parse_date(day).replace(day=1)
