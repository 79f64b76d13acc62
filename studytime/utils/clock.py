"""Time helpers shared by services and routers."""
from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    """
    Current time as a naive UTC datetime.

    All timestamps in the store are naive UTC, so comparisons never mix
    aware and naive values.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    """
    Normalise a datetime to naive UTC.

    Args:
        value: Aware or naive datetime (naive values are assumed UTC)

    Returns:
        Naive datetime in UTC
    """
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def get_clock() -> Clock:
    """Dependency returning the clock used by services."""
    return utcnow
