"""Shared utility functions."""

from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return aware UTC datetime."""
    return datetime.now(timezone.utc)


def month_index(year: int, month: int) -> int:
    """Collapse a year/month pair into a comparable month counter."""
    return year * 12 + (month - 1)
