"""Celestial body parameters and the registry that validates them."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, Iterator

from gps_relativity.data.bodies import BODY_DEFINITIONS, BodySpec

from .errors import ConfigurationError, NotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CelestialBody:
    """Immutable orbital and rotational parameters of one body.

    Angles are in radians and rates in radians per simulated second. The central
    body has ``orbital_radius == 0`` and no host.
    """

    name: str
    mean_radius: float
    mass: float
    host: str | None
    orbital_radius: float
    visual_orbital_radius: float
    orbital_angular_rate: float
    orbital_inclination: float
    axial_tilt: float
    rotation_rate: float
    tidal_lock_ratio: float | None = None

    @property
    def is_central(self) -> bool:
        return self.host is None

    @property
    def tidally_locked(self) -> bool:
        return self.tidal_lock_ratio is not None

    @property
    def orbital_period(self) -> float | None:
        if self.orbital_angular_rate <= 0.0:
            return None
        return 2.0 * math.pi / self.orbital_angular_rate

    @property
    def rotation_period(self) -> float | None:
        if self.rotation_rate <= 0.0:
            return None
        return 2.0 * math.pi / self.rotation_rate


def _build_body(spec: BodySpec) -> CelestialBody:
    if not spec.name:
        raise ConfigurationError("Body name must not be empty")
    if not (math.isfinite(spec.mean_radius) and spec.mean_radius > 0.0):
        raise ConfigurationError(f"{spec.name}: mean radius must be positive")

    if spec.host is None:
        if spec.orbital_radius != 0.0:
            raise ConfigurationError(f"{spec.name}: central body cannot have an orbital radius")
    elif not (math.isfinite(spec.orbital_radius) and spec.orbital_radius > 0.0):
        raise ConfigurationError(f"{spec.name}: orbital radius must be positive")

    orbital_rate = spec.orbital_angular_rate
    if spec.tidal_lock_ratio is not None:
        if spec.host is None:
            raise ConfigurationError(f"{spec.name}: a tidally locked body needs a host")
        if spec.rotation_period is not None:
            raise ConfigurationError(
                f"{spec.name}: rotation of a tidally locked body is derived from its orbit"
            )
        if orbital_rate <= 0.0:
            raise ConfigurationError(f"{spec.name}: a tidally locked body needs an orbital period")
        rotation_rate = spec.tidal_lock_ratio * orbital_rate
    else:
        rotation_rate = spec.rotation_rate or 0.0

    return CelestialBody(
        name=spec.name,
        mean_radius=spec.mean_radius,
        mass=spec.mass,
        host=spec.host,
        orbital_radius=spec.orbital_radius,
        visual_orbital_radius=spec.visual_orbital_radius,
        orbital_angular_rate=orbital_rate,
        orbital_inclination=math.radians(spec.orbital_inclination_deg),
        axial_tilt=math.radians(spec.axial_tilt_deg),
        rotation_rate=rotation_rate,
        tidal_lock_ratio=spec.tidal_lock_ratio,
    )


class BodyRegistry:
    """Lookup of the configured bodies, ordered hosts before satellites."""

    def __init__(self, specs: Iterable[BodySpec] = BODY_DEFINITIONS) -> None:
        bodies: dict[str, CelestialBody] = {}
        for spec in specs:
            if spec.name in bodies:
                raise ConfigurationError(f"Duplicate body name: {spec.name!r}")
            bodies[spec.name] = _build_body(spec)

        central = [body for body in bodies.values() if body.is_central]
        if len(central) != 1:
            raise ConfigurationError(f"Expected exactly one central body, found {len(central)}")
        for body in bodies.values():
            if body.host is not None and body.host not in bodies:
                raise ConfigurationError(f"{body.name}: unknown host {body.host!r}")

        self._central = central[0]
        self._bodies = {body.name: body for body in self._ordered(bodies)}
        logger.debug("Body registry built: %s", ", ".join(self._bodies))

    @staticmethod
    def _ordered(bodies: dict[str, CelestialBody]) -> list[CelestialBody]:
        ordered: list[CelestialBody] = []
        placed: set[str] = set()
        pending = list(bodies.values())
        while pending:
            ready = [b for b in pending if b.host is None or b.host in placed]
            if not ready:
                names = ", ".join(b.name for b in pending)
                raise ConfigurationError(f"Host cycle between bodies: {names}")
            for body in ready:
                ordered.append(body)
                placed.add(body.name)
                pending.remove(body)
        return ordered

    def get(self, name: str) -> CelestialBody:
        try:
            return self._bodies[name]
        except KeyError:
            raise NotFoundError(f"Unknown body: {name!r}") from None

    @property
    def central(self) -> CelestialBody:
        return self._central

    @property
    def names(self) -> list[str]:
        return list(self._bodies)

    def children_of(self, name: str) -> list[CelestialBody]:
        self.get(name)
        return [body for body in self._bodies.values() if body.host == name]

    def __contains__(self, name: object) -> bool:
        return name in self._bodies

    def __iter__(self) -> Iterator[CelestialBody]:
        return iter(self._bodies.values())

    def __len__(self) -> int:
        return len(self._bodies)


__all__ = ["BodyRegistry", "CelestialBody"]
