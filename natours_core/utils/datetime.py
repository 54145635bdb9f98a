"""
DateTime Utilities for Natours

Provides consistent timezone-aware datetime handling. All timestamps are
stored and compared in UTC.

Usage:
    from natours_core.utils.datetime import utc_now, to_utc

    now = utc_now()
    expires = to_utc(user.password_reset_expires)
"""

from datetime import datetime, timezone
from typing import Callable, Optional

# A clock is any zero-argument callable returning an aware UTC datetime.
# Components take one so tests can pin "now".
Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """
    Get the current UTC time as a timezone-aware datetime.

    Returns:
        datetime: Current UTC time with tzinfo=timezone.utc
    """
    return datetime.now(timezone.utc)


def to_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Convert a datetime to UTC.

    If the datetime is naive (no timezone), it's assumed to be UTC. Some
    database backends (SQLite) drop tzinfo on the way back out.

    Args:
        dt: A datetime object (naive or timezone-aware)

    Returns:
        datetime: UTC datetime with tzinfo=timezone.utc, or None if input is None
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_timestamp(dt: datetime) -> int:
    """Whole seconds since the epoch, as carried in JWT claims."""
    return int(to_utc(dt).timestamp())


def from_timestamp(ts: Optional[float]) -> Optional[datetime]:
    """
    Convert a Unix timestamp to a UTC datetime.

    Args:
        ts: Unix timestamp (seconds since epoch)

    Returns:
        datetime: UTC datetime, or None if input is None
    """
    if ts is None:
        return None
    return datetime.fromtimestamp(ts, tz=timezone.utc)
