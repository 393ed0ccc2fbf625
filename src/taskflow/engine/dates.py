# src/taskflow/engine/dates.py

"""
Date parsing and formatting helpers.

Accepted input is ISO-8601: a plain date ("2024-06-30") or a datetime,
with or without offset ("2024-06-30T12:00:00Z"). Naive values are taken
as UTC so every timestamp in the engine is comparable.
"""

import math
from datetime import date, datetime, time, timezone
from typing import Optional, Union

from . import clock

DateLike = Union[str, date, datetime]

_SECONDS_PER_DAY = 24 * 60 * 60


def to_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_datetime(value: DateLike) -> datetime:
    """
    Convert `value` into an aware UTC datetime.

    A bare date means midnight UTC. Raises ValueError for unparseable text.
    """
    if isinstance(value, datetime):
        return to_utc(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)

    s = (value or "").strip()
    if not s:
        raise ValueError("Empty date string")
    if s.endswith(("Z", "z")):
        s = s[:-1] + "+00:00"
    try:
        return to_utc(datetime.fromisoformat(s))
    except ValueError as e:
        raise ValueError(f"Invalid ISO date: '{value}'") from e


def is_valid_date(value: Optional[DateLike]) -> bool:
    if value is None or value == "":
        return False
    try:
        parse_datetime(value)
    except ValueError:
        return False
    return True


def to_iso(value: datetime) -> str:
    """Render an aware datetime as ISO-8601 UTC with millisecond precision."""
    return to_utc(value).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def format_date(value: Optional[datetime]) -> str:
    """Short human form, e.g. "Jun 15, 2024"; empty string for None."""
    if value is None:
        return ""
    return f"{value:%b} {value.day}, {value.year}"


def format_relative_date(value: Optional[datetime], now: Optional[datetime] = None) -> str:
    """
    Describe `value` relative to `now`:

    Today / Yesterday / Tomorrow, "In N days" / "N days ago" within a
    week, otherwise format_date().
    """
    if value is None:
        return ""
    moment = now if now is not None else clock.now()
    diff_days = math.floor((value - moment).total_seconds() / _SECONDS_PER_DAY + 0.5)

    if diff_days == 0:
        return "Today"
    if diff_days == -1:
        return "Yesterday"
    if diff_days == 1:
        return "Tomorrow"
    if 1 < diff_days <= 7:
        return f"In {diff_days} days"
    if -7 <= diff_days < -1:
        return f"{abs(diff_days)} days ago"
    return format_date(value)


def days_until_due(due_date: Optional[datetime], now: Optional[datetime] = None) -> Optional[int]:
    """Whole days until `due_date`, rounded up; negative when past, None without a date."""
    if due_date is None:
        return None
    moment = now if now is not None else clock.now()
    return math.ceil((due_date - moment).total_seconds() / _SECONDS_PER_DAY)

