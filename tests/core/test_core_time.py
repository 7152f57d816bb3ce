"""MERIT core time tests."""

from datetime import datetime, timezone

import pytest

from core.time.clock import FixedClock, ManualTimeCounter, SystemClock, SystemTimeCounter


class TestClocks:
    def test_system_clock_is_utc(self):
        assert SystemClock().now_utc().tzinfo is not None

    def test_fixed_clock(self):
        dt = datetime(2026, 1, 1, tzinfo=timezone.utc)
        clock = FixedClock(dt)
        assert clock.now_utc() == dt
        clock.advance(60)
        assert clock.now_utc().minute == 1

    def test_fixed_clock_requires_aware_datetime(self):
        with pytest.raises(ValueError):
            FixedClock(datetime(2026, 1, 1))


class TestTimeCounters:
    def test_manual_counter(self):
        counter = ManualTimeCounter(100)
        assert counter.current() == 100
        assert counter.advance(5) == 105
        assert counter.current() == 105

    def test_manual_counter_never_moves_backwards(self):
        counter = ManualTimeCounter(10)
        with pytest.raises(ValueError):
            counter.advance(-1)
        with pytest.raises(ValueError):
            ManualTimeCounter(-1)

    def test_system_counter_is_monotonic(self):
        counter = SystemTimeCounter()
        readings = [counter.current() for _ in range(50)]
        assert readings == sorted(readings)
        assert readings[0] > 0
