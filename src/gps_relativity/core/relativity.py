"""Relativistic clock drift of orbiting satellites.

Two multiplicative corrections slow an orbiting clock relative to the
reference clock:

* special relativity, ``sqrt(1 - (v/c)^2)``, from the orbital speed;
* general relativity, ``sqrt(1 - 2GM/(r c^2))``, from the depth in the central
  body's gravitational potential.

With the reference clock infinitely far away both factors are below one and the
drift is always negative. When the reference clock sits at a finite radius (a
ground clock on the Earth's surface), the gravitational term is taken relative to
that radius and high orbits gain time: the net drift is signed.

The rate offsets are of order 1e-10, so the drift is accumulated on its own with
``log1p``/``expm1`` instead of by subtracting two large elapsed times.
"""
from __future__ import annotations

import math

from .config import PHYSICS_CFG, PhysicsCfg
from .propagator import SatelliteState
from .errors import DomainError

SECONDS_PER_DAY = 86_400.0


def _check_finite(name: str, value: float) -> None:
    if not math.isfinite(value):
        raise DomainError(f"{name} must be finite, got {value!r}")


def special_log_factor(speed: float, c: float) -> float:
    """Natural log of the velocity time-dilation factor."""

    _check_finite("speed", speed)
    if speed < 0.0:
        raise DomainError(f"speed must be non-negative, got {speed!r}")
    if speed >= c:
        raise DomainError(f"speed {speed:.6g} m/s is not below the speed of light")
    beta = speed / c
    return 0.5 * math.log1p(-beta * beta)


def general_log_factor(mu: float, radius: float, c: float) -> float:
    """Natural log of the gravitational time-dilation factor at *radius*."""

    _check_finite("radius", radius)
    schwarzschild = 2.0 * mu / (c * c)
    if radius <= schwarzschild:
        raise DomainError(
            f"radius {radius:.6g} m is inside the Schwarzschild radius {schwarzschild:.6g} m"
        )
    return 0.5 * math.log1p(-schwarzschild / radius)


def special_factor(speed: float, c: float) -> float:
    return math.exp(special_log_factor(speed, c))


def general_factor(mu: float, radius: float, c: float) -> float:
    return math.exp(general_log_factor(mu, radius, c))


class RelativityEngine:
    """Accumulates proper time of satellite clocks against a reference clock."""

    def __init__(self, cfg: PhysicsCfg = PHYSICS_CFG) -> None:
        self._cfg = cfg
        self._reference_log = 0.0
        if cfg.reference_radius is not None:
            self._reference_log = general_log_factor(
                cfg.mu, cfg.reference_radius, cfg.speed_of_light
            )

    @property
    def reference_radius(self) -> float | None:
        return self._cfg.reference_radius

    def log_rate(self, satellite: SatelliteState) -> float:
        c = self._cfg.speed_of_light
        return (
            special_log_factor(satellite.orbital_velocity, c)
            + general_log_factor(self._cfg.mu, satellite.orbital_radius_real, c)
            - self._reference_log
        )

    def clock_rate(self, satellite: SatelliteState) -> float:
        """Satellite seconds per reference second."""

        return math.exp(self.log_rate(satellite))

    def rate_offset(self, satellite: SatelliteState) -> float:
        """``clock_rate - 1`` without cancellation."""

        return math.expm1(self.log_rate(satellite))

    def accumulate(self, satellite: SatelliteState, simulated_dt: float) -> float:
        """Advance both clocks of *satellite* by one step and return the drift.

        Raises :class:`DomainError` before touching the satellite if its
        parameters fall outside the formulas' domain.
        """

        log_rate = self.log_rate(satellite)
        satellite.satellite_elapsed_time += simulated_dt * math.exp(log_rate)
        satellite.earth_elapsed_time += simulated_dt
        satellite.drift_seconds += simulated_dt * math.expm1(log_rate)
        return satellite.drift_seconds

    @staticmethod
    def drift(satellite: SatelliteState) -> float:
        """Signed ``satellite_elapsed_time - earth_elapsed_time`` in seconds."""

        return satellite.drift_seconds

    def drift_microseconds(self, satellite: SatelliteState) -> float:
        return self.drift(satellite) * 1e6

    def drift_rate_microseconds_per_day(self, satellite: SatelliteState) -> float:
        return self.rate_offset(satellite) * SECONDS_PER_DAY * 1e6


__all__ = [
    "RelativityEngine",
    "general_factor",
    "general_log_factor",
    "special_factor",
    "special_log_factor",
]
