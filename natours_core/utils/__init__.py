"""
Utilities module for Natours Core

Provides:
- DateTime utilities (UTC clock, conversions)
"""

from .datetime import (
    Clock,
    utc_now,
    to_utc,
    to_timestamp,
    from_timestamp,
)

__all__ = [
    "Clock",
    "utc_now",
    "to_utc",
    "to_timestamp",
    "from_timestamp",
]
