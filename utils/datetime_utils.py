"""
Datetime utilities for consistent timezone handling.
Timeline dates and server timestamps are ISO-8601 strings on the wire.
"""

from datetime import date, datetime, timezone
from typing import Optional, Union


def utc_now() -> datetime:
    """
    Get current UTC time as timezone-aware datetime.

    Returns:
        Current UTC datetime with timezone info
    """
    return datetime.now(timezone.utc)


def parse_iso_datetime(iso_string: str) -> datetime:
    """
    Parse ISO format datetime string to timezone-aware datetime.
    Handles both 'Z' suffix and '+00:00' timezone formats.

    Raises:
        ValueError: If datetime string cannot be parsed
    """
    normalized = iso_string.strip().replace("Z", "+00:00")

    try:
        dt = datetime.fromisoformat(normalized)
    except ValueError as e:
        raise ValueError(f"Invalid datetime string: {iso_string}") from e

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def try_parse_datetime(value: Union[str, datetime, date, None]) -> Optional[datetime]:
    """Return an aware datetime for dates and ISO strings, None otherwise."""
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return parse_iso_datetime(value)
    except ValueError:
        return None


def to_iso_string(dt: datetime) -> str:
    """
    Convert datetime to ISO-8601 string with a 'Z' suffix for UTC.

    Naive datetimes are treated as UTC.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)

    iso = dt.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return iso.replace("+00:00", "Z")


def is_before_today(value: Optional[str], today: Optional[date] = None) -> bool:
    """Check whether a date string (YYYY-MM-DD or ISO instant) lies before today."""
    parsed = try_parse_datetime(value)
    if parsed is None:
        return False
    today = today or utc_now().date()
    return parsed.date() < today
