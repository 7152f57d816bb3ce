"""
MERIT Core Time — Public API
===============================
Explicit clock and time-counter protocols.
Doctrine: NO datetime.now() in engine logic.
"""

from core.time.clock import (
    Clock,
    FixedClock,
    ManualTimeCounter,
    SystemClock,
    SystemTimeCounter,
    TimeCounter,
)

__all__ = [
    "Clock",
    "FixedClock",
    "SystemClock",
    "TimeCounter",
    "SystemTimeCounter",
    "ManualTimeCounter",
]
