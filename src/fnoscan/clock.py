"""Nanosecond epoch timestamps and injectable clocks.

Timestamps exchanged with dashboard clients are integer nanoseconds since the
Unix epoch. Clients divide by :data:`NANOS_PER_MILLI` to get a millisecond epoch.
"""

from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Protocol

NANOS_PER_SECOND = 1_000_000_000
NANOS_PER_MILLI = 1_000_000

Nanos = int


def now_ns() -> Nanos:
    return time.time_ns()


def ns_to_millis(value: Nanos) -> int:
    return value // NANOS_PER_MILLI


def millis_to_ns(value: int) -> Nanos:
    return int(value) * NANOS_PER_MILLI


def seconds_to_ns(value: int | float) -> Nanos:
    if isinstance(value, int):
        return value * NANOS_PER_SECOND
    return round(value * NANOS_PER_SECOND)


def ns_to_datetime(value: Nanos) -> datetime:
    """Convert to an aware UTC datetime (microsecond precision)."""

    seconds, remainder = divmod(int(value), NANOS_PER_SECOND)
    return datetime.fromtimestamp(seconds, tz=timezone.utc).replace(
        microsecond=remainder // 1_000)


def datetime_to_ns(value: datetime) -> Nanos:
    """Convert a datetime to epoch nanoseconds; naive values are treated as UTC."""

    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    delta = value - datetime(1970, 1, 1, tzinfo=timezone.utc)
    return (delta.days * 86_400 + delta.seconds) * NANOS_PER_SECOND + delta.microseconds * 1_000


class Clock(Protocol):
    """Source of wall-clock and monotonic time."""

    def now_ns(self) -> Nanos:
        """Wall-clock epoch nanoseconds."""

        raise NotImplementedError

    def monotonic(self) -> float:
        """Monotonic seconds, for measuring intervals."""

        raise NotImplementedError


class SystemClock:
    def now_ns(self) -> Nanos:
        return time.time_ns()

    def monotonic(self) -> float:
        return time.monotonic()


__all__ = [
    "Clock",
    "NANOS_PER_MILLI",
    "NANOS_PER_SECOND",
    "Nanos",
    "SystemClock",
    "datetime_to_ns",
    "millis_to_ns",
    "now_ns",
    "ns_to_datetime",
    "ns_to_millis",
    "seconds_to_ns",
]
