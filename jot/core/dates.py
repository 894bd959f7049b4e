"""
FILE: jot/core/dates.py
PURPOSE: Timestamp, due-date and due-time parsing shared by the core modules
EXPORTS:
  - now() -> datetime
  - now_iso() -> str
  - parse_timestamp(value) -> datetime
  - parse_due_time(value) -> int
  - format_minutes(minutes) -> str
DEPENDENCIES:
  - datetime, re (stdlib)
  - jot.core.exceptions (MalformedInputError)
NOTES:
  - All datetimes are naive local time, like the timestamps the repository writes
  - Aware timestamps are converted to local time and made naive
  - Due times are minutes after midnight
"""

import re
from datetime import date, datetime
from typing import Union

from .exceptions import MalformedInputError


_TIME_PATTERN = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*$")

Timestamp = Union[str, date, datetime]


def now() -> datetime:
    """Current local time (naive)."""
    return datetime.now()


def now_iso() -> str:
    return now().isoformat()


def parse_timestamp(value: Timestamp) -> datetime:
    """
    Parse an ISO-8601 date or timestamp.

    Args:
        value: "YYYY-MM-DD", a full ISO-8601 timestamp, or a date/datetime

    Returns:
        Naive local datetime (dates become midnight)

    Raises:
        MalformedInputError: If the string isn't ISO-8601
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        text = str(value).strip()
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError as e:
            raise MalformedInputError(text, "an ISO-8601 date") from e

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def parse_due_time(value: str) -> int:
    """
    Parse an "HH:MM" clock time into minutes after midnight.

    Single-digit hours ("9:05") are accepted.

    Raises:
        MalformedInputError: If the string isn't a valid clock time
    """
    match = _TIME_PATTERN.match(str(value))
    if not match:
        raise MalformedInputError(str(value), "HH:MM")

    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise MalformedInputError(str(value), "HH:MM")

    return hours * 60 + minutes


def format_minutes(minutes: int) -> str:
    """Format minutes after midnight as zero-padded "HH:MM"."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"
