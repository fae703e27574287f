"""Real and simulated time sources."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable

from .config import PHYSICS_CFG, PhysicsCfg

logger = logging.getLogger(__name__)


def clamp(value: float, lo: float, hi: float) -> float:
    """Clamp *value* between *lo* and *hi*."""

    return max(lo, min(hi, value))


@dataclass
class FrameTimer:
    """High resolution timer based on :func:`time.perf_counter`."""

    last_time: float = field(default_factory=time.perf_counter)

    def tick(self) -> float:
        now = time.perf_counter()
        dt = now - self.last_time
        self.last_time = now
        return dt


class SimClock:
    """Converts real frame time into simulated time.

    The simulated timestamp is expressed in unix seconds so that it can be shown
    as a calendar date. It only moves forward: the real frame delta is clamped to
    ``[0, max_frame_dt]`` before the time scale is applied, which also keeps a
    stalled host (paused debugger, minimised window) from producing one huge jump.
    """

    def __init__(
        self,
        cfg: PhysicsCfg = PHYSICS_CFG,
        *,
        time_scale: float | None = None,
        now: Callable[[], float] = time.time,
    ) -> None:
        self._cfg = cfg
        self._now = now
        self._time_scale = self._clamp_scale(
            cfg.default_time_scale if time_scale is None else time_scale
        )
        self._timestamp = float(now())
        self.frame_count = 0

    @property
    def simulated_timestamp(self) -> float:
        return self._timestamp

    @property
    def simulated_datetime(self) -> datetime:
        return datetime.fromtimestamp(self._timestamp, tz=timezone.utc)

    @property
    def time_scale(self) -> float:
        return self._time_scale

    @property
    def max_frame_dt(self) -> float:
        return self._cfg.max_frame_dt

    def _clamp_scale(self, value: float) -> float:
        return clamp(float(value), self._cfg.min_time_scale, self._cfg.max_time_scale)

    def set_time_scale(self, value: float) -> float:
        """Set the multiplier used from the next :meth:`advance` on."""

        self._time_scale = self._clamp_scale(value)
        logger.info("Time scale set to %.0fx", self._time_scale)
        return self._time_scale

    def advance(self, real_dt: float) -> float:
        """Advance by one frame and return the simulated seconds that elapsed."""

        real_dt = clamp(real_dt, 0.0, self._cfg.max_frame_dt)
        simulated_dt = real_dt * self._time_scale
        self._timestamp += simulated_dt
        self.frame_count += 1
        return simulated_dt

    def reset(self) -> None:
        """Jump the simulated timestamp back to the current real time."""

        self._timestamp = float(self._now())
        self.frame_count = 0
        logger.info("Simulation clock reset to %s", self.simulated_datetime.isoformat())

    def __repr__(self) -> str:
        return (
            f"SimClock(t={self.simulated_datetime.isoformat()}, "
            f"scale={self._time_scale:g})"
        )


__all__ = ["FrameTimer", "SimClock", "clamp"]
