"""
Date parsing and bucketing utilities for fleetstats.

Provides consistent handling of record dates with:
- Multiple input types (date, datetime, ISO strings, common formats)
- Timezone normalization (aware values become naive UTC)
- Month (YYYY-MM) and year (YYYY) bucket keys
- Day gaps between records
"""

import logging
from datetime import date, datetime, timezone
from typing import Any, Optional

from dateutil import parser as date_parser

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 60 * 60 * 24

# Fields missing from a date string come from here, never from today
MISSING_FIELDS_DEFAULT = datetime(2000, 1, 1)


def normalize_datetime(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Convert a datetime to naive UTC for safe comparisons.

    Args:
        dt: A datetime that may or may not have timezone info

    Returns:
        Naive datetime in UTC, or None if input was None

    Examples:
        >>> aware = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
        >>> normalize_datetime(aware)
        datetime.datetime(2024, 1, 1, 12, 0)
    """
    if dt is None:
        return None
    if dt.tzinfo is not None:
        return dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def parse_date(value: Any, default: Optional[datetime] = None) -> Optional[datetime]:
    """
    Parse a record date into a naive UTC datetime.

    Supports:
    - datetime objects (timezone-aware values are converted to UTC)
    - date objects (midnight)
    - ISO 8601 strings: "2024-01-15", "2024-01-15T14:30:00Z"
    - Other formats understood by dateutil: "01/15/2024", "Jan 15 2024"

    Args:
        value: The raw date value
        default: Value to return if parsing fails (default: None)

    Returns:
        datetime object or default value if parsing fails

    Example:
        >>> parse_date("2024-01-15")
        datetime.datetime(2024, 1, 15, 0, 0)
        >>> parse_date("not a date") is None
        True
    """
    if value is None:
        return default

    if isinstance(value, datetime):
        return normalize_datetime(value)

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)

    if not isinstance(value, str):
        logger.debug(f"Unsupported date value type: {type(value).__name__}")
        return default

    date_string = value.strip()
    if not date_string:
        return default

    try:
        return normalize_datetime(date_parser.parse(date_string, default=MISSING_FIELDS_DEFAULT))
    except (ValueError, OverflowError):
        logger.debug(f"Failed to parse date string: {date_string}")
        return default


def month_key(dt: datetime) -> str:
    """
    Monthly bucket key.

    Examples:
        >>> month_key(datetime(2024, 3, 9))
        '2024-03'
    """
    return f"{dt.year:04d}-{dt.month:02d}"


def year_key(dt: datetime) -> str:
    """Yearly bucket key, e.g. '2024'."""
    return f"{dt.year:04d}"


def days_between(start: datetime, end: datetime) -> float:
    """
    Fractional number of days from start to end (negative if end is earlier).

    Examples:
        >>> days_between(datetime(2024, 1, 1), datetime(2024, 1, 20))
        19.0
    """
    return (end - start).total_seconds() / SECONDS_PER_DAY


def format_date_iso(dt: Optional[datetime]) -> Optional[str]:
    """
    Format a datetime for chart rows.

    Midnight values are rendered as a plain date so date-only records keep
    their original "YYYY-MM-DD" shape.

    Examples:
        >>> format_date_iso(datetime(2024, 1, 15))
        '2024-01-15'
        >>> format_date_iso(datetime(2024, 1, 15, 8, 30))
        '2024-01-15T08:30:00'
    """
    if dt is None:
        return None
    if dt.hour == 0 and dt.minute == 0 and dt.second == 0 and dt.microsecond == 0:
        return dt.date().isoformat()
    return dt.isoformat()
