"""Date and time helpers for calendar windows and task scheduling.

All helpers are timezone-naive. Dates are calendar dates (``YYYY-MM-DD``) and
times are wall-clock times (``HH:MM`` or ``HH:MM:SS``). An ISO datetime string
is truncated to its calendar day without any timezone conversion, so a task
stored as ``2025-04-14T23:59:00Z`` always belongs to the 14th.
"""

from __future__ import annotations

import calendar
import re
from collections.abc import Iterable
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Any

from tempus_cli.exceptions import ParseError, ValidationError

MONTH_ABBREVIATIONS = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)

DEFAULT_MIN_DELTA_MINUTES = 60

_DATE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})")
_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")
_TIME_12H_RE = re.compile(r"^(\d{1,2}):(\d{2})\s*([AaPp][Mm])$")


class Ordering(str, Enum):
    """Result of comparing two instants."""

    BEFORE = "before"
    EQUAL = "equal"
    AFTER = "after"


def parse_date(value: Any) -> date:
    """Parse a date, datetime or ISO date/datetime string into a ``date``.

    Raises:
        ParseError: If the value is not a recognisable calendar date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ParseError(f"Unsupported date value: {value!r}")

    text = value.strip()
    match = _DATE_RE.match(text)
    if not match:
        raise ParseError(f"Invalid date: {value!r}")

    rest = text[match.end() :]
    if rest:
        if rest[0] not in ("T", " "):
            raise ParseError(f"Invalid date: {value!r}")
        try:
            datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError as e:
            raise ParseError(f"Invalid datetime: {value!r}") from e

    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError as e:
        raise ParseError(f"Invalid date: {value!r}") from e


def parse_time(value: Any) -> time:
    """Parse ``HH:MM`` or ``HH:MM:SS``; empty or missing values mean midnight."""
    if value is None:
        return time(0, 0)
    if isinstance(value, datetime):
        return value.time().replace(tzinfo=None)
    if isinstance(value, time):
        return value
    if not isinstance(value, str):
        raise ParseError(f"Unsupported time value: {value!r}")

    text = value.strip()
    if not text:
        return time(0, 0)

    match = _TIME_RE.match(text)
    if not match:
        raise ParseError(f"Invalid time: {value!r}")
    hour, minute, second = match.groups()
    try:
        return time(int(hour), int(minute), int(second or 0))
    except ValueError as e:
        raise ParseError(f"Invalid time: {value!r}") from e


def to_instant(day: Any, clock: Any = None) -> datetime:
    """Combine a date and an optional clock time into a naive ``datetime``."""
    if isinstance(day, datetime) and clock is None:
        return day.replace(tzinfo=None)
    return datetime.combine(parse_date(day), parse_time(clock))


def _as_instant(value: Any) -> datetime:
    if isinstance(value, tuple):
        return to_instant(*value)
    if isinstance(value, str) and len(value.strip()) > 10:
        # Full ISO datetime string: keep the wall-clock part, drop any offset.
        parse_date(value)
        return datetime.fromisoformat(value.strip().replace("Z", "+00:00")).replace(
            tzinfo=None
        )
    return to_instant(value)


def to_date_key(value: Any) -> str:
    """Normalize any date representation to ``YYYY-MM-DD``."""
    return parse_date(value).isoformat()


def is_same_calendar_day(a: Any, b: Any) -> bool:
    """Compare year, month and day only."""
    return parse_date(a) == parse_date(b)


def compare_instant(a: Any, b: Any) -> Ordering:
    """Compare two combined date+time values.

    Each side may be a ``datetime``, a ``date`` (midnight), an ISO string or a
    ``(date, time)`` tuple.
    """
    left, right = _as_instant(a), _as_instant(b)
    if left < right:
        return Ordering.BEFORE
    if left > right:
        return Ordering.AFTER
    return Ordering.EQUAL


def format_short_label(value: Any) -> str:
    """Compact section label such as ``14 Apr``; locale independent."""
    day = parse_date(value)
    return f"{day.day} {MONTH_ABBREVIATIONS[day.month - 1]}"


def clamp_end_after_start(
    start: Any, end: Any, min_delta_minutes: int = DEFAULT_MIN_DELTA_MINUTES
) -> datetime:
    """Return ``end`` unless it does not come after ``start``.

    A non-positive ``end - start`` is replaced by ``start + min_delta_minutes``.
    """
    if min_delta_minutes <= 0:
        raise ValueError("min_delta_minutes must be positive")

    start_at, end_at = _as_instant(start), _as_instant(end)
    if end_at <= start_at:
        return start_at + timedelta(minutes=min_delta_minutes)
    return end_at


def _check_window(month: int, year: int) -> None:
    if not isinstance(month, int) or not 1 <= month <= 12:
        raise ValidationError(f"Month must be between 1 and 12, got {month!r}")
    if not isinstance(year, int) or not 1000 <= year <= 9999:
        raise ValidationError(f"Year must have four digits, got {year!r}")


def window_key(month: int, year: int) -> str:
    """Cache key for a calendar window, e.g. ``2025-04``."""
    _check_window(month, year)
    return f"{year:04d}-{month:02d}"


def window_key_for(value: Any) -> str:
    """Window key of the month containing ``value``."""
    day = parse_date(value)
    return window_key(day.month, day.year)


def window_bounds(month: int, year: int) -> tuple[date, date]:
    """First and last calendar day of a window."""
    _check_window(month, year)
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def in_window(value: Any, month: int, year: int) -> bool:
    """Whether a date falls inside the (month, year) window."""
    first, last = window_bounds(month, year)
    return first <= parse_date(value) <= last


def shift_date(value: Any, days: int) -> str:
    """Move a date by ``days``; used for previous/next day navigation."""
    return (parse_date(value) + timedelta(days=days)).isoformat()


def week_dates(value: Any) -> list[str]:
    """The Monday-to-Sunday week containing ``value``, as date keys."""
    day = parse_date(value)
    monday = day - timedelta(days=day.weekday())
    return [(monday + timedelta(days=offset)).isoformat() for offset in range(7)]


def format_time_12h(value: Any) -> str:
    """``14:05`` -> ``2:05 PM``."""
    clock = parse_time(value)
    suffix = "PM" if clock.hour >= 12 else "AM"
    hour = clock.hour % 12 or 12
    return f"{hour}:{clock.minute:02d} {suffix}"


def to_24_hour(value: str) -> str:
    """``2:05 PM`` -> ``14:05``; ``12:30 AM`` -> ``00:30``."""
    match = _TIME_12H_RE.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise ParseError(f"Invalid 12-hour time: {value!r}")

    hour, minute, modifier = int(match.group(1)), int(match.group(2)), match.group(3)
    if not 1 <= hour <= 12 or minute > 59:
        raise ParseError(f"Invalid 12-hour time: {value!r}")

    hour = hour % 12
    if modifier.upper() == "PM":
        hour += 12
    return f"{hour:02d}:{minute:02d}"


def _field(item: Any, name: str) -> Any:
    if isinstance(item, dict):
        return item.get(name)
    return getattr(item, name, None)


def events_overlap(a: Any, b: Any) -> bool:
    """Whether two timed tasks on the same start day overlap.

    Intervals are half-open, so an event ending at 10:00 does not overlap one
    starting at 10:00. A missing end time makes an event zero-length.
    """
    day_a, day_b = _field(a, "task_start_date"), _field(b, "task_start_date")
    if not day_a or not day_b or not is_same_calendar_day(day_a, day_b):
        return False
    if not _field(a, "task_start_time") or not _field(b, "task_start_time"):
        return False

    start_a = parse_time(_field(a, "task_start_time"))
    end_a = parse_time(_field(a, "task_end_time") or _field(a, "task_start_time"))
    start_b = parse_time(_field(b, "task_start_time"))
    end_b = parse_time(_field(b, "task_end_time") or _field(b, "task_start_time"))
    return start_a < end_b and start_b < end_a


def sort_by_start_time(tasks: Iterable[Any]) -> list[Any]:
    """Stable sort by start date then start time; untimed tasks lead their day."""

    def sort_key(item: Any) -> tuple[str, time]:
        start_date = _field(item, "task_start_date")
        day = to_date_key(start_date) if start_date else ""
        return day, parse_time(_field(item, "task_start_time"))

    return sorted(tasks, key=sort_key)
