"""
Core Utilities.

Shared utility functions used across the backend.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-naive datetime.

    All datetime values in the application are timezone-naive and assumed
    to be UTC. The document store hands back naive UTC datetimes as well,
    so comparisons never mix aware and naive values.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def from_epoch_millis(value: int) -> datetime:
    """Convert epoch milliseconds to a timezone-naive UTC datetime."""
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc).replace(tzinfo=None)


def is_absolute_url(value: str | None) -> bool:
    """True for http:// and https:// URLs."""
    if not value:
        return False
    return value.startswith(("http://", "https://"))


def as_utc(value: datetime) -> datetime:
    """Attach the UTC offset to a naive UTC datetime; aware values pass through."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
