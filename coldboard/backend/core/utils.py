"""
Core Utilities.

Shared utility functions used across the backend.
All modules should import utilities from this module.
"""

from datetime import date, datetime, timezone, tzinfo


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-naive datetime.

    All datetime values produced by the application are timezone-naive
    and assumed to be UTC.

    Returns:
        Current UTC time with tzinfo stripped
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def local_date(value: datetime, tz: tzinfo | None = None) -> date:
    """
    Calendar day of a timestamp as seen by the viewer.

    Aware timestamps are converted to ``tz`` when one is given; otherwise
    the wall-clock date the timestamp carries is used.
    """
    if tz is not None and value.tzinfo is not None:
        value = value.astimezone(tz)
    return value.date()


def parse_iso_date(value: str | None) -> date | None:
    """Parse a ``YYYY-MM-DD`` string (a full ISO timestamp is accepted too).

    Returns None for empty or unparsable input.
    """
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None
