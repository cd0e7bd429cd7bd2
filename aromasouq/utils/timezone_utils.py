"""
Timezone helpers.

All timestamps are stored and compared in UTC. SQLite hands back naive
datetimes for ``DateTime(timezone=True)`` columns, so comparisons go through
``ensure_utc``.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional


def utc_now() -> datetime:
    """Current UTC time (aware)."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes and convert aware ones to UTC."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        # naive datetime is assumed to be UTC
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def days_from_now(days: int) -> datetime:
    return utc_now() + timedelta(days=days)


def epoch_millis(dt: Optional[datetime] = None) -> int:
    dt = dt or utc_now()
    return int(dt.timestamp() * 1000)
