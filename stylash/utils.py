"""Shared date and time helpers used across the booking engine."""

import re
from datetime import date, datetime, timezone
from typing import Callable, Union
from zoneinfo import ZoneInfo

Clock = Callable[[], datetime]

_SLOT_PATTERN = re.compile(r"^([01]\d|2[0-3]):(00|30)$")


def utc_now() -> datetime:
    """Default clock: the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def local_today(clock: Clock, tz_name: str) -> date:
    """Return the calendar date of ``clock()`` in the business timezone."""
    return clock().astimezone(ZoneInfo(tz_name)).date()


def parse_date(value: Union[str, date]) -> date:
    """Accept a ``date`` or a ``YYYY-MM-DD`` string.

    Examples:
        >>> parse_date("2025-06-10")
        datetime.date(2025, 6, 10)
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(value.strip(), "%Y-%m-%d").date()


def is_valid_time_slot(value: str) -> bool:
    """Check a label is a zero-padded half-hour ``HH:MM`` string."""
    return bool(_SLOT_PATTERN.match(value))


def weekday_index(day: date) -> int:
    """Weekday number with Sunday as 0 and Saturday as 6."""
    return day.isoweekday() % 7
