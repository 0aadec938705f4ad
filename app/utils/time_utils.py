"""Conversions between "HH:MM" strings, minute offsets and calendar values.

All times are wall-clock times in the single timezone the service runs in.
"""

import re
from datetime import date, datetime, time

from app.core.exceptions import ValidationError

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")
WEEKDAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]


def time_to_minutes(value: str) -> int:
    """Convert HH:MM string to minutes since midnight."""
    match = TIME_PATTERN.match(value or "")
    if not match:
        raise ValidationError(f"Invalid time '{value}', expected HH:MM")
    return int(match.group(1)) * 60 + int(match.group(2))


def minutes_to_time(minutes: int) -> str:
    """Convert minutes since midnight to HH:MM string.

    No wrap-around: 1500 becomes "25:00". Callers keep values below 1440.
    """
    h = minutes // 60
    m = minutes % 60
    return f"{h:02d}:{m:02d}"


def is_valid_time(value: str) -> bool:
    return bool(TIME_PATTERN.match(value or ""))


def day_of_week(day: date) -> int:
    """0 = Sunday ... 6 = Saturday."""
    return day.isoweekday() % 7


def local_now() -> datetime:
    return datetime.now()


def combine(day: date, hhmm: str) -> datetime:
    """Start instant of an HH:MM time on a given date."""
    minutes = time_to_minutes(hhmm)
    return datetime.combine(day, time(minutes // 60, minutes % 60))


def hour_bucket_label(hour: int) -> str:
    """12-hour label for an hour of day: 0 -> "12 AM", 13 -> "1 PM"."""
    period = "AM" if hour < 12 else "PM"
    hour12 = hour % 12 or 12
    return f"{hour12} {period}"
