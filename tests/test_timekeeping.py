"""Unit tests for the simulation clock."""

import pytest

from gps_relativity.core.config import PHYSICS_CFG
from gps_relativity.core.timekeeping import FrameTimer, SimClock


class FakeNow:
    def __init__(self, *values):
        self._values = list(values)

    def __call__(self):
        return self._values.pop(0) if len(self._values) > 1 else self._values[0]


class TestSimClock:
    """Test cases for SimClock."""

    def test_advance_scales_real_time(self):
        clock = SimClock(time_scale=1_000.0, now=FakeNow(0.0))
        simulated = clock.advance(0.05)
        assert simulated == pytest.approx(50.0)
        assert clock.simulated_timestamp == pytest.approx(50.0)

    def test_large_frame_delta_is_clamped(self):
        clock = SimClock(time_scale=1_000.0, now=FakeNow(0.0))
        simulated = clock.advance(5.0)
        assert simulated == pytest.approx(PHYSICS_CFG.max_frame_dt * 1_000.0)

    def test_negative_delta_never_moves_backwards(self):
        clock = SimClock(time_scale=10.0, now=FakeNow(100.0))
        assert clock.advance(-1.0) == 0.0
        assert clock.simulated_timestamp == 100.0

    def test_time_scale_is_clamped(self):
        clock = SimClock(now=FakeNow(0.0))
        assert clock.set_time_scale(1e9) == PHYSICS_CFG.max_time_scale
        assert clock.set_time_scale(-3.0) == PHYSICS_CFG.min_time_scale

    def test_zero_time_scale_freezes_clock(self):
        clock = SimClock(now=FakeNow(42.0))
        clock.set_time_scale(0.0)
        for _ in range(10):
            assert clock.advance(0.1) == 0.0
        assert clock.simulated_timestamp == 42.0

    def test_time_scale_applies_from_next_advance(self):
        clock = SimClock(time_scale=1.0, now=FakeNow(0.0))
        clock.advance(0.1)
        clock.set_time_scale(100.0)
        clock.advance(0.1)
        assert clock.simulated_timestamp == pytest.approx(0.1 + 10.0)

    def test_timestamp_is_monotonic(self):
        clock = SimClock(time_scale=5_000.0, now=FakeNow(0.0))
        previous = clock.simulated_timestamp
        for dt in (0.016, 0.0, 0.3, 0.02, -0.5, 0.1):
            clock.advance(dt)
            assert clock.simulated_timestamp >= previous
            previous = clock.simulated_timestamp

    def test_reset_uses_current_real_time(self):
        clock = SimClock(time_scale=1_000.0, now=FakeNow(1_000.0, 5_000.0))
        clock.advance(0.1)
        clock.reset()
        assert clock.simulated_timestamp == 5_000.0
        assert clock.frame_count == 0

    def test_simulated_datetime_is_utc(self):
        clock = SimClock(now=FakeNow(0.0))
        assert clock.simulated_datetime.year == 1970
        assert clock.simulated_datetime.utcoffset().total_seconds() == 0


def test_frame_timer_ticks_forward():
    timer = FrameTimer()
    assert timer.tick() >= 0.0
    assert timer.tick() >= 0.0
