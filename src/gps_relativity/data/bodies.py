"""Configured parameters for the Sun, Earth and Moon."""
from __future__ import annotations

import math
from dataclasses import dataclass

SECONDS_PER_DAY = 86_400.0
SIDEREAL_DAY = 86_164.0905
SIDEREAL_YEAR = 365.256363 * SECONDS_PER_DAY
SIDEREAL_MONTH = 27.321661 * SECONDS_PER_DAY
SOLAR_ROTATION_PERIOD = 25.38 * SECONDS_PER_DAY


@dataclass(frozen=True)
class BodySpec:
    """Raw body parameters as configured.

    ``rotation_rate`` must be left unset for tidally locked bodies; the registry
    derives it from the orbital rate.
    """

    name: str
    mean_radius: float
    mass: float
    host: str | None = None
    orbital_radius: float = 0.0
    visual_orbital_radius: float = 0.0
    orbital_period: float | None = None
    orbital_inclination_deg: float = 0.0
    axial_tilt_deg: float = 0.0
    rotation_period: float | None = None
    tidal_lock_ratio: float | None = None

    @property
    def orbital_angular_rate(self) -> float:
        if not self.orbital_period:
            return 0.0
        return 2.0 * math.pi / self.orbital_period

    @property
    def rotation_rate(self) -> float | None:
        if self.rotation_period is None:
            return None
        return 2.0 * math.pi / self.rotation_period


BODY_DEFINITIONS: tuple[BodySpec, ...] = (
    BodySpec(
        name="sun",
        mean_radius=696_340_000.0,
        mass=1.989e30,
        axial_tilt_deg=7.25,
        rotation_period=SOLAR_ROTATION_PERIOD,
    ),
    BodySpec(
        name="earth",
        mean_radius=6_371_000.0,
        mass=5.972e24,
        host="sun",
        orbital_radius=1.495_978_707e11,
        visual_orbital_radius=15_000.0,
        orbital_period=SIDEREAL_YEAR,
        axial_tilt_deg=23.44,
        rotation_period=SIDEREAL_DAY,
    ),
    BodySpec(
        name="moon",
        mean_radius=1_737_400.0,
        mass=7.342e22,
        host="earth",
        orbital_radius=384_400_000.0,
        visual_orbital_radius=3_000.0,
        orbital_period=SIDEREAL_MONTH,
        orbital_inclination_deg=5.145,
        axial_tilt_deg=1.54,
        tidal_lock_ratio=1.0,
    ),
)

BODY_NAMES: list[str] = [spec.name for spec in BODY_DEFINITIONS]


__all__ = [
    "BODY_DEFINITIONS",
    "BODY_NAMES",
    "BodySpec",
    "SECONDS_PER_DAY",
    "SIDEREAL_DAY",
    "SIDEREAL_MONTH",
    "SIDEREAL_YEAR",
]
