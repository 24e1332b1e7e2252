from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Any, Union

from ..core.enums import Weekday
from ..core.exceptions import ValidationError

DateLike = Union[date, datetime]

# date.weekday(): Monday=0 .. Sunday=6
_COLUMNS_BY_WEEKDAY = tuple(Weekday)


def parse_iso_date(value: Any) -> date:
    """Parse YYYY-MM-DD string into date."""
    if not isinstance(value, str):
        raise ValidationError(f"Invalid date {value!r}, expected YYYY-MM-DD")
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date {value!r}, expected YYYY-MM-DD")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def local_date(value: DateLike) -> date:
    """Calendar date of ``value`` as the user sees it.

    Aware datetimes are converted to the server's local zone first; naive
    datetimes are already local.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date()
    return value


def week_start_monday(value: DateLike) -> date:
    """Monday of the week containing ``value`` (weeks run Monday..Sunday)."""
    d = local_date(value)
    return d - timedelta(days=d.weekday())


def week_end(week_start: date) -> date:
    return week_start + timedelta(days=6)


def day_column(value: DateLike) -> Weekday:
    """Timesheet column for the local day of ``value``; Sunday maps to ``sun``."""
    return _COLUMNS_BY_WEEKDAY[local_date(value).weekday()]


def week_days(week_start: date) -> list[tuple[Weekday, date]]:
    return [(day, week_start + timedelta(days=i)) for i, day in enumerate(_COLUMNS_BY_WEEKDAY)]


def hours_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 3600.0
