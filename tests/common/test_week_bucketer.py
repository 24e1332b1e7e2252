from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from src.timeclock_system.timeclock_system.common.datetime_utils import (
    day_column,
    parse_iso_date,
    week_days,
    week_end,
    week_start_monday,
)
from src.timeclock_system.timeclock_system.common.validators import optional_coordinate, optional_string, parse_hours
from src.timeclock_system.timeclock_system.core.enums import Weekday
from src.timeclock_system.timeclock_system.core.exceptions import ValidationError


@pytest.mark.parametrize(
    "value, expected",
    [
        (date(2024, 1, 15), date(2024, 1, 15)),  # Monday
        (date(2024, 1, 17), date(2024, 1, 15)),
        (date(2024, 1, 21), date(2024, 1, 15)),  # Sunday belongs to the preceding Monday
        (date(2024, 1, 22), date(2024, 1, 22)),
        (datetime(2024, 3, 1, 23, 59, 59), date(2024, 2, 26)),  # leap year boundary
    ],
)
def test_week_start_is_monday_of_containing_week(value, expected):
    assert week_start_monday(value) == expected


def test_every_day_of_a_week_maps_to_the_same_start():
    ws = date(2024, 12, 30)
    starts = {week_start_monday(ws + timedelta(days=i)) for i in range(7)}
    assert starts == {ws}
    assert week_end(ws) == date(2025, 1, 5)


def test_day_column_maps_sunday_to_sun():
    assert day_column(date(2024, 1, 21)) == Weekday.SUN
    assert day_column(date(2024, 1, 15)) == Weekday.MON
    assert day_column(datetime(2024, 1, 19, 18, 0)).column == "fri_hours"


def test_aware_datetimes_are_bucketed_in_local_time():
    aware = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)
    local = aware.astimezone()
    assert week_start_monday(aware) == week_start_monday(local.date())
    assert day_column(aware) == day_column(local.date())


def test_week_days_lists_monday_through_sunday():
    days = week_days(date(2024, 1, 15))
    assert [d for d, _ in days] == list(Weekday)
    assert days[0][1] == date(2024, 1, 15)
    assert days[-1][1] == date(2024, 1, 21)


def test_parse_iso_date_rejects_garbage():
    assert parse_iso_date(" 2024-01-15 ") == date(2024, 1, 15)
    with pytest.raises(ValidationError):
        parse_iso_date("15/01/2024")
    with pytest.raises(ValidationError):
        parse_iso_date(20240115)


def test_parse_hours_blank_is_zero_negative_rejected():
    assert parse_hours("", "mon_hours") == 0.0
    assert parse_hours(None, "mon_hours") == 0.0
    assert parse_hours("7.25", "mon_hours") == 7.25
    with pytest.raises(ValidationError):
        parse_hours(-1, "mon_hours")
    with pytest.raises(ValidationError):
        parse_hours("abc", "mon_hours")
    assert parse_hours(999.99, "mon_hours", max_value=999.99) == 999.99
    with pytest.raises(ValidationError):
        parse_hours("1000", "mon_hours", max_value=999.99)


def test_coordinates_must_be_in_range():
    assert optional_coordinate("45.5", "latitude", limit=90) == 45.5
    assert optional_coordinate(None, "latitude", limit=90) is None
    with pytest.raises(ValidationError):
        optional_coordinate(91, "latitude", limit=90)
    with pytest.raises(ValidationError):
        optional_coordinate(-180.5, "longitude", limit=180)


def test_optional_string_rejects_other_json_types():
    assert optional_string("  lunch ", "reason") == "lunch"
    assert optional_string("   ", "reason") is None
    assert optional_string(None, "reason") is None
    for value in (5, ["lunch"], {"a": 1}):
        with pytest.raises(ValidationError):
            optional_string(value, "reason")
    with pytest.raises(ValidationError):
        optional_string("x" * 11, "reason", max_length=10)
