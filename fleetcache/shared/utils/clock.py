"""
Time source for cache expiry and token checks.

Cache expiries are absolute epoch milliseconds. Anything that compares
against "now" takes a Clock so tests can move time explicitly instead
of sleeping.
"""

import time
from datetime import UTC, datetime
from typing import Protocol


class Clock(Protocol):
    """Source of the current time in epoch milliseconds."""

    def now_ms(self) -> int:
        """Return the current time as epoch milliseconds."""
        ...


class SystemClock:
    """Wall clock backed by time.time()."""

    def now_ms(self) -> int:
        return int(time.time() * 1000)


class ManualClock:
    """Clock that only moves when told to. Used by tests and simulations."""

    def __init__(self, start_ms: int = 0) -> None:
        self._now = start_ms

    def now_ms(self) -> int:
        return self._now

    def advance(self, ms: int) -> int:
        """Move time forward by ms and return the new time.

        Raises:
            ValueError: If ms is negative.
        """
        if ms < 0:
            raise ValueError(f"Cannot move clock backwards (advance by {ms})")
        self._now += ms
        return self._now

    def set(self, now_ms: int) -> None:
        """Jump to an absolute time."""
        self._now = now_ms


def to_datetime_utc(now_ms: int) -> datetime:
    """
    Create a UTC-aware datetime from a millisecond Unix timestamp.

    Args:
        now_ms: Unix timestamp in milliseconds

    Returns:
        UTC-aware datetime
    """
    return datetime.fromtimestamp(now_ms / 1000, tz=UTC)
