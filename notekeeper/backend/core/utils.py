"""
Core Utilities.

Shared utility functions used across the backend.
All modules should import utilities from this module.
"""

from datetime import datetime, timedelta, timezone

_TICK = timedelta(microseconds=1)


def utc_now() -> datetime:
    """
    Return current UTC time as a timezone-aware datetime.

    Note timestamps are stored as ISO-8601 strings with an explicit UTC
    offset, so every datetime in the application carries tzinfo. Naive and
    aware values never get compared.

    Returns:
        Current UTC time
    """
    return datetime.now(timezone.utc)


def next_timestamp(previous: datetime | None = None) -> datetime:
    """
    Return a timestamp strictly later than ``previous``.

    Falls back to one microsecond after ``previous`` when the clock has not
    advanced (or went backwards) since it was taken.
    """
    now = utc_now()
    if previous is not None and now <= previous:
        return previous + _TICK
    return now
