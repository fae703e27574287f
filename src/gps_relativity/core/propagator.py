"""Circular-orbit propagation of satellites and bodies."""
from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from gps_relativity.data.satellites import SatelliteClass, SatelliteSpec

from .bodies import CelestialBody
from .config import PHYSICS_CFG, PhysicsCfg
from .errors import ConfigurationError
from .frames import (
    TAU,
    NodeRef,
    TransformGraph,
    euler_xyz,
    normalize_angle,
    prograde_rotation,
    rotation_z,
)


def orbit_point(radius: float, phase: float) -> np.ndarray:
    """Position on a circle of *radius* in the local x-z orbital plane."""

    return np.array([radius * math.cos(phase), 0.0, radius * math.sin(phase)])


@dataclass
class SatelliteState:
    """Mutable per-satellite state, updated once per simulated step."""

    id: str
    sat_class: SatelliteClass
    orbital_radius_real: float
    orbital_radius_visual: float
    inclination: float
    plane_phase_offset: float
    orbital_velocity: float
    angular_velocity: float
    phase_angle: float = 0.0
    earth_elapsed_time: float = 0.0
    satellite_elapsed_time: float = 0.0
    drift_seconds: float = 0.0
    color: tuple[int, int, int] = (255, 255, 255)
    launch_date: str = ""
    # radius of the body the orbit is measured from
    central_radius: float = PHYSICS_CFG.earth_radius
    node: int = -1
    plane_node: int = -1

    @classmethod
    def from_spec(
        cls,
        spec: SatelliteSpec,
        index: int,
        count: int,
        cfg: PhysicsCfg = PHYSICS_CFG,
        *,
        phase: float = 0.0,
    ) -> "SatelliteState":
        real_radius = cfg.earth_radius + spec.altitude
        if not math.isfinite(real_radius) or real_radius <= 0.0:
            raise ConfigurationError(
                f"{spec.id}: orbital radius must be positive, got {real_radius!r} m"
            )
        if count <= 0 or not 0 <= index < count:
            raise ConfigurationError(f"{spec.id}: index {index} outside registry of {count}")
        velocity = cfg.circular_speed(real_radius)
        return cls(
            id=spec.id,
            sat_class=spec.sat_class,
            orbital_radius_real=real_radius,
            orbital_radius_visual=real_radius * cfg.visual_scale,
            inclination=math.radians(spec.inclination_deg),
            plane_phase_offset=index * TAU / count,
            orbital_velocity=velocity,
            angular_velocity=velocity / real_radius,
            phase_angle=normalize_angle(phase),
            color=spec.color,
            launch_date=spec.launch_date,
            central_radius=cfg.earth_radius,
        )

    @property
    def period(self) -> float:
        return TAU / self.angular_velocity

    @property
    def altitude(self) -> float:
        return self.orbital_radius_real - self.central_radius


@dataclass
class BodyState:
    """Orbital phase and spin angle of a body together with its frame handles."""

    body: CelestialBody
    orbit_node: int
    node: int
    surface_node: int
    orbital_phase: float = 0.0
    spin_angle: float = 0.0


class OrbitalPropagator:
    """Advances phase angles and writes the resulting poses into the graph.

    Satellites hang under a plane pivot (plane rotation about y, then the
    inclination about z) and always face their parent's origin. Bodies hang
    under an orbit pivot tilted by their orbital inclination; the body frame
    carries the axial tilt and a surface child carries the spin.
    """

    def __init__(self, graph: TransformGraph) -> None:
        self.graph = graph

    # -- satellites ---------------------------------------------------------

    def attach_satellite(self, satellite: SatelliteState, parent: NodeRef) -> None:
        satellite.plane_node = self.graph.add_frame(
            f"{satellite.id}_plane",
            parent,
            rotation=euler_xyz(0.0, satellite.plane_phase_offset, satellite.inclination),
        )
        satellite.node = self.graph.add_frame(satellite.id, satellite.plane_node)
        self.place_satellite(satellite)

    def place_satellite(self, satellite: SatelliteState) -> None:
        self.graph.set_position(
            satellite.node,
            orbit_point(satellite.orbital_radius_visual, satellite.phase_angle),
        )
        self.graph.look_at_origin(satellite.node)

    def step(self, satellite: SatelliteState, simulated_dt: float) -> None:
        satellite.phase_angle = normalize_angle(
            satellite.phase_angle + satellite.angular_velocity * simulated_dt
        )
        self.place_satellite(satellite)

    def step_all(self, satellites: list[SatelliteState], simulated_dt: float) -> None:
        for satellite in satellites:
            self.step(satellite, simulated_dt)

    # -- bodies -------------------------------------------------------------

    def attach_body(
        self,
        body: CelestialBody,
        parent: NodeRef | None,
        *,
        orbital_phase: float = 0.0,
        spin_angle: float = 0.0,
    ) -> BodyState:
        orbit_node = self.graph.add_frame(
            f"{body.name}_orbit",
            parent,
            rotation=rotation_z(body.orbital_inclination),
        )
        node = self.graph.add_frame(body.name, orbit_node, rotation=rotation_z(body.axial_tilt))
        surface_node = self.graph.add_frame(f"{body.name}_surface", node)
        state = BodyState(
            body=body,
            orbit_node=orbit_node,
            node=node,
            surface_node=surface_node,
            orbital_phase=normalize_angle(orbital_phase),
            spin_angle=normalize_angle(spin_angle),
        )
        self.place_body(state)
        return state

    def place_body(self, state: BodyState) -> None:
        body = state.body
        self.graph.set_position(
            state.node,
            orbit_point(body.visual_orbital_radius, state.orbital_phase),
        )
        # the body frame rides the orbit without turning with it, so the spin
        # angle is measured against the orbit plane's fixed axes
        self.graph.set_rotation(state.surface_node, prograde_rotation(state.spin_angle))

    def step_body(self, state: BodyState, simulated_dt: float) -> None:
        body = state.body
        state.orbital_phase = normalize_angle(
            state.orbital_phase + body.orbital_angular_rate * simulated_dt
        )
        state.spin_angle = normalize_angle(state.spin_angle + body.rotation_rate * simulated_dt)
        self.place_body(state)


__all__ = ["BodyState", "OrbitalPropagator", "SatelliteState", "orbit_point"]
