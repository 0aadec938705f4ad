"""Tests for HH:MM conversions and calendar helpers."""

from datetime import date, datetime

import pytest

from app.core.exceptions import ValidationError
from app.utils.time_utils import (
    time_to_minutes,
    minutes_to_time,
    is_valid_time,
    day_of_week,
    combine,
    hour_bucket_label,
)


def test_time_to_minutes():
    assert time_to_minutes("00:00") == 0
    assert time_to_minutes("09:30") == 570
    assert time_to_minutes("23:59") == 1439


@pytest.mark.parametrize("value", ["9:30", "24:00", "12:60", "noon", "", None])
def test_time_to_minutes_rejects_malformed(value):
    with pytest.raises(ValidationError):
        time_to_minutes(value)


def test_minutes_to_time_pads_and_does_not_wrap():
    assert minutes_to_time(0) == "00:00"
    assert minutes_to_time(545) == "09:05"
    assert minutes_to_time(1500) == "25:00"


def test_is_valid_time():
    assert is_valid_time("17:00") is True
    assert is_valid_time("7:00") is False


def test_day_of_week_starts_on_sunday():
    assert day_of_week(date(2024, 6, 2)) == 0   # Sunday
    assert day_of_week(date(2024, 6, 3)) == 1   # Monday
    assert day_of_week(date(2024, 6, 8)) == 6   # Saturday


def test_combine():
    assert combine(date(2024, 6, 3), "14:45") == datetime(2024, 6, 3, 14, 45)


def test_hour_bucket_label():
    assert hour_bucket_label(0) == "12 AM"
    assert hour_bucket_label(9) == "9 AM"
    assert hour_bucket_label(12) == "12 PM"
    assert hour_bucket_label(13) == "1 PM"
