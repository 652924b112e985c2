"""Datetime utilities for common operations."""

from datetime import datetime, timedelta, timezone


def now() -> datetime:
    """Get current datetime in UTC."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """
    Return a timezone-aware UTC datetime.

    Naive values are assumed to already be UTC (SQLite drops the offset
    when storing ``DateTime(timezone=True)`` columns).

    Args:
        dt: Datetime, naive or aware

    Returns:
        Aware datetime in UTC
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def add_days(dt: datetime, days: int) -> datetime:
    """
    Add days to a datetime.

    Args:
        dt: Datetime
        days: Number of days to add (can be negative)

    Returns:
        New datetime
    """
    return dt + timedelta(days=days)


def days_between(start: datetime, end: datetime) -> int:
    """
    Number of whole days elapsed from ``start`` to ``end`` (floored).

    Args:
        start: Start datetime
        end: End datetime

    Returns:
        Whole days, negative if ``end`` precedes ``start``
    """
    return (ensure_utc(end) - ensure_utc(start)) // timedelta(days=1)
