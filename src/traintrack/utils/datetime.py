"""Datetime helpers. Timestamps are stored as naive UTC."""

from datetime import datetime, timezone


def now_utc() -> datetime:
    """Get current UTC datetime as NAIVE for database storage."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def now_utc_naive() -> datetime:
    """Alias for now_utc() - both return naive UTC."""
    return now_utc()
