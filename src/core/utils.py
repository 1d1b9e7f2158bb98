"""Core utility functions."""
from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional


def utcnow() -> datetime:
    """Get current UTC datetime with timezone info. Always use this instead of datetime.now()."""
    return datetime.now(timezone.utc)


def ensure_aware(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Ensure a datetime is timezone-aware (UTC).

    SQLite stores datetimes without timezone info, so we need to make them
    aware before comparing with utcnow().
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def local_midnight_utc(now: Optional[datetime] = None) -> datetime:
    """
    Start of the current local day, expressed in UTC.

    "Today" filters use the server's local midnight; rows are stored in UTC,
    so the boundary is converted before it reaches a query.
    """
    local_now = (now or utcnow()).astimezone()
    midnight = local_now.replace(hour=0, minute=0, second=0, microsecond=0)
    return midnight.astimezone(timezone.utc)


def days_from_now(days: int, start: Optional[datetime] = None) -> datetime:
    return (start or utcnow()) + timedelta(days=days)


def generate_id() -> str:
    """Generate a primary key (UUID4 string)."""
    return str(uuid.uuid4())
