"""
Date/time helpers — framework-agnostic.

All timestamps in the service are UTC. SQLite hands back naive datetimes
for timezone-aware columns, so values read from the store are normalised
with ensure_utc() before comparison or serialisation.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Return *value* as an aware UTC datetime.

    Naive datetimes (no ``tzinfo``) are assumed to be UTC. ``None`` passes
    through unchanged.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
