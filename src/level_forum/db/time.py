# src/level_forum/db/time.py
"""Time utilities for database models."""

from datetime import UTC, datetime, timedelta


def utcnow() -> datetime:
    """Return the current UTC time as a naive datetime.

    SQLite drops tzinfo on round-trip, so every stored timestamp is naive UTC
    to keep comparisons consistent across backends.
    """
    return datetime.now(UTC).replace(tzinfo=None)


def days_ago(days: int) -> datetime:
    """Return the naive UTC instant ``days`` days before now."""
    return utcnow() - timedelta(days=days)
