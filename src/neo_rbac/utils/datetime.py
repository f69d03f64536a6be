"""
DateTime utilities for consistent timezone handling.
"""
from datetime import datetime, timezone


def utc_now() -> datetime:
    """
    Get the current UTC time with timezone awareness.

    Returns:
        datetime: Current UTC time with timezone info
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """
    Make a datetime timezone-aware in UTC.

    Naive datetimes (as returned by ``timestamp without time zone`` columns)
    are assumed to already be UTC.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
