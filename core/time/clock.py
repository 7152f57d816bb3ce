"""
MERIT Core Time — Clock and Time Counter Protocols
=====================================================
Doctrine: NO datetime.now() / time.time() inside engine logic.

Two injectable time sources exist:

- Clock        → timezone-aware datetimes for audit metadata
                 (command issued_at, outcome occurred_at, event created_at).
- TimeCounter  → the external, ever-increasing integer counter the ledger
                 validates gathering schedules against. It plays the role a
                 block height plays on a chain: only "is X in the future?"
                 is ever asked of it.
"""

from __future__ import annotations

import threading
import time
from datetime import datetime, timedelta, timezone
from typing import Protocol


# ══════════════════════════════════════════════════════════════
# CLOCK PROTOCOL
# ══════════════════════════════════════════════════════════════

class Clock(Protocol):
    """Injectable wall-clock source."""

    def now_utc(self) -> datetime:
        """Return current UTC time."""
        ...  # pragma: no cover


class SystemClock:
    """Production clock — real system time."""

    def now_utc(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """
    Test clock — returns a fixed timestamp.

    Usage:
        clock = FixedClock(datetime(2026, 1, 1, tzinfo=timezone.utc))
        assert clock.now_utc().year == 2026
    """

    def __init__(self, fixed_dt: datetime) -> None:
        if fixed_dt.tzinfo is None:
            raise ValueError("FixedClock requires timezone-aware datetime.")
        self._fixed_dt = fixed_dt

    def now_utc(self) -> datetime:
        return self._fixed_dt

    def advance(self, seconds: float) -> None:
        self._fixed_dt = self._fixed_dt + timedelta(seconds=seconds)


# ══════════════════════════════════════════════════════════════
# TIME COUNTER PROTOCOL
# ══════════════════════════════════════════════════════════════

class TimeCounter(Protocol):
    """External monotonic counter. Never decreases."""

    def current(self) -> int:
        """Return the current counter value."""
        ...  # pragma: no cover


class SystemTimeCounter:
    """
    Production counter — whole seconds since the epoch.

    Guarded so that a wall-clock step backwards never makes the
    counter go down: the last value handed out is a floor.
    """

    def __init__(self) -> None:
        self._last = 0
        self._lock = threading.Lock()

    def current(self) -> int:
        with self._lock:
            value = max(int(time.time()), self._last)
            self._last = value
            return value


class ManualTimeCounter:
    """
    Test counter — advanced explicitly.

    Usage:
        counter = ManualTimeCounter(100)
        counter.advance(5)
        assert counter.current() == 105
    """

    def __init__(self, start: int = 0) -> None:
        if not isinstance(start, int) or isinstance(start, bool) or start < 0:
            raise ValueError("start must be a non-negative integer.")
        self._value = start

    def current(self) -> int:
        return self._value

    def advance(self, ticks: int = 1) -> int:
        if not isinstance(ticks, int) or ticks < 0:
            raise ValueError("Time counter cannot move backwards.")
        self._value += ticks
        return self._value
