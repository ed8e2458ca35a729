"""
Domain time utilities (pure).

Centralized timestamp validation and parsing helpers.

All timestamps stored on domain entities are timezone-aware UTC. Conversion to a
local calendar (for reporting) happens explicitly at the edges.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any


def require_utc_timestamp(name: str, value: datetime) -> None:
    """
    Enforce that a timestamp is UTC.

    Invariants:
    - Timestamps must be timezone-aware.
    - Timestamps must have UTC offset 0.
    """

    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError(f"{name} must be timezone-aware (UTC)")
    if value.utcoffset() != timedelta(0):
        raise ValueError(f"{name} must be a UTC timestamp (offset 0)")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_utc_datetime(value: Any) -> datetime:
    """
    Parse a stored timestamp into a timezone-aware UTC datetime.

    Supabase commonly returns ISO-8601 strings, sometimes with a trailing 'Z'.
    Naive values are assumed to already be UTC.
    """

    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    else:
        raise TypeError(f"Unsupported timestamp type: {type(value)!r}")

    if dt.tzinfo is None or dt.utcoffset() is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
