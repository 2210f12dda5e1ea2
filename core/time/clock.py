"""
POS Core Time - Injectable Clock
==================================
Sales and payments are timestamped through a Clock, never by
calling datetime.now() inside engine logic. Tests pin time with
FixedClock; terminals use SystemClock.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Protocol


class Clock(Protocol):
    """Injectable time source."""

    def now_utc(self) -> datetime:
        """Return current UTC time."""
        ...  # pragma: no cover


class SystemClock:
    """Terminal clock: real system time."""

    def now_utc(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """
    Test clock returning a pinned timestamp.

    Usage:
        clock = FixedClock(datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc))
        sale = Sale(clock=clock)
        clock.advance(45)   # customer pays 45 seconds later
    """

    def __init__(self, fixed_dt: datetime) -> None:
        if fixed_dt.tzinfo is None:
            raise ValueError("FixedClock requires timezone-aware datetime.")
        self._fixed_dt = fixed_dt

    def now_utc(self) -> datetime:
        return self._fixed_dt

    def advance(self, seconds: float) -> None:
        self._fixed_dt = self._fixed_dt + timedelta(seconds=seconds)


_default_clock: Clock = SystemClock()


def get_default_clock() -> Clock:
    return _default_clock
