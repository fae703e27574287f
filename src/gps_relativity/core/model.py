"""Simulation context: the single owner of all mutable simulation state."""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Iterable, Sequence

import numpy as np

from gps_relativity.data.bodies import BODY_DEFINITIONS, BodySpec
from gps_relativity.data.satellites import SATELLITE_DEFINITIONS, SatelliteSpec

from .bodies import BodyRegistry
from .config import PHYSICS_CFG, PhysicsCfg
from .errors import ConfigurationError, DomainError, NotFoundError
from .focus import FocusKind, FocusStateMachine, FocusTarget
from .frames import TAU, TransformGraph
from .logging_utils import RunLogger
from .propagator import BodyState, OrbitalPropagator, SatelliteState
from .relativity import RelativityEngine
from .timekeeping import SimClock

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SatelliteSnapshot:
    id: str
    drift_microseconds: float
    phase_angle: float
    world_position: np.ndarray


@dataclass(frozen=True)
class FrameSnapshot:
    """Everything the renderer and HUD read for one frame."""

    simulated_timestamp: float
    time_scale: float
    active_focus: FocusTarget
    focus_position: np.ndarray
    satellites: tuple[SatelliteSnapshot, ...]

    def satellite(self, satellite_id: str) -> SatelliteSnapshot:
        for snap in self.satellites:
            if snap.id == satellite_id:
                return snap
        raise NotFoundError(f"Unknown satellite: {satellite_id!r}")


class SimulationContext:
    """Owns the clock, scene graph, satellites and focus of one session.

    :meth:`step` is the only place that mutates simulation state. It advances the
    clock, then the bodies and satellites, then the relativistic clocks, and only
    then reads world positions, so a snapshot never mixes poses of two frames.
    """

    def __init__(
        self,
        cfg: PhysicsCfg = PHYSICS_CFG,
        *,
        body_specs: Iterable[BodySpec] = BODY_DEFINITIONS,
        satellite_specs: Sequence[SatelliteSpec] = SATELLITE_DEFINITIONS,
        clock: SimClock | None = None,
        rng: random.Random | None = None,
        run_logger: RunLogger | None = None,
    ) -> None:
        self.cfg = cfg
        self.registry = BodyRegistry(body_specs)
        self.clock = clock or SimClock(cfg)
        self.graph = TransformGraph()
        self.propagator = OrbitalPropagator(self.graph)
        try:
            self.relativity = RelativityEngine(cfg)
        except DomainError as err:
            raise ConfigurationError(f"Invalid reference clock: {err}") from err
        self.run_logger = run_logger
        self.elapsed = 0.0
        self._step_count = 0
        self._rng = rng or random.Random(cfg.random_seed)

        self.bodies: dict[str, BodyState] = {}
        for body in self.registry:
            parent = None if body.host is None else self.bodies[body.host].node
            self.bodies[body.name] = self.propagator.attach_body(body, parent)

        if "earth" not in self.bodies:
            raise ConfigurationError("Satellites need an 'earth' body to orbit")
        ids = [spec.id for spec in satellite_specs]
        if len(set(ids)) != len(ids):
            raise ConfigurationError("Satellite ids must be unique")
        count = len(satellite_specs)
        self.satellites: list[SatelliteState] = []
        for index, spec in enumerate(satellite_specs):
            satellite = SatelliteState.from_spec(
                spec, index, count, cfg, phase=self._rng.uniform(0.0, TAU)
            )
            try:
                self.relativity.clock_rate(satellite)
            except DomainError as err:
                raise ConfigurationError(f"{spec.id}: {err}") from err
            self.propagator.attach_satellite(satellite, self.bodies["earth"].node)
            self.satellites.append(satellite)

        self.focus = FocusStateMachine(ids)
        logger.info(
            "Simulation context ready: %d bodies, %d satellites, time scale %.0fx",
            len(self.registry),
            len(self.satellites),
            self.clock.time_scale,
        )
        if self.run_logger is not None:
            self.run_logger.write_meta(self.describe())

    # -- inputs -------------------------------------------------------------

    def set_time_scale(self, value: float) -> float:
        scale = self.clock.set_time_scale(value)
        self._log_event("time_scale", "clock", {"time_scale": scale})
        return scale

    def select_focus(self, target: FocusTarget) -> bool:
        accepted = self.focus.select(target)
        if accepted:
            self._log_event("focus", str(self.focus.active))
        return accepted

    def select_satellite_at(self, index: int | None) -> bool:
        """Apply the result of a spatial pick; ``None`` is a miss."""

        accepted = self.focus.select_picked(index)
        if accepted:
            self._log_event("focus", str(self.focus.active), {"picked": True})
        return accepted

    def reset_clock(self) -> None:
        self.clock.reset()
        self._log_event("reset", "clock")

    # -- stepping -----------------------------------------------------------

    def step(self, real_dt: float) -> FrameSnapshot:
        simulated_dt = self.clock.advance(real_dt)
        self.advance_simulated(simulated_dt)
        return self.snapshot()

    def advance_simulated(self, simulated_dt: float) -> None:
        """Propagate every entity by *simulated_dt* seconds."""

        for state in self.bodies.values():
            self.propagator.step_body(state, simulated_dt)
        for satellite in self.satellites:
            self.propagator.step(satellite, simulated_dt)
            self.relativity.accumulate(satellite, simulated_dt)
        self.elapsed += simulated_dt
        self._step_count += 1
        if self.run_logger is not None and self._step_count % max(1, self.cfg.log_every_steps) == 0:
            self._log_timeseries()

    # -- queries ------------------------------------------------------------

    def satellite(self, satellite_id: str) -> SatelliteState:
        for satellite in self.satellites:
            if satellite.id == satellite_id:
                return satellite
        raise NotFoundError(f"Unknown satellite: {satellite_id!r}")

    def focus_node(self, target: FocusTarget) -> int:
        kind = target.kind
        if kind is FocusKind.SYSTEM or kind is FocusKind.EARTH:
            return self.bodies["earth"].node
        if kind is FocusKind.SUN:
            return self.bodies[self.registry.central.name].node
        if kind is FocusKind.MOON:
            try:
                return self.bodies["moon"].node
            except KeyError:
                raise NotFoundError("No moon configured") from None
        if kind is FocusKind.SATELLITE:
            resolved = self.focus.resolve(target)
            if resolved is None or resolved.index is None:
                raise NotFoundError(f"No satellite for focus {target}")
            return self.satellites[resolved.index].node
        raise AssertionError(f"Unhandled focus kind: {kind}")

    def world_position_of(self, target: FocusTarget) -> np.ndarray:
        return self.graph.world_position_of(self.focus_node(target))

    def snapshot(self) -> FrameSnapshot:
        active = self.focus.active
        return FrameSnapshot(
            simulated_timestamp=self.clock.simulated_timestamp,
            time_scale=self.clock.time_scale,
            active_focus=active,
            focus_position=self.world_position_of(active),
            satellites=tuple(
                SatelliteSnapshot(
                    id=satellite.id,
                    drift_microseconds=self.relativity.drift_microseconds(satellite),
                    phase_angle=satellite.phase_angle,
                    world_position=self.graph.world_position_of(satellite.node),
                )
                for satellite in self.satellites
            ),
        )

    def describe(self) -> dict:
        return {
            "G": self.cfg.gravitational_constant,
            "M": self.cfg.earth_mass,
            "mu": self.cfg.mu,
            "c": self.cfg.speed_of_light,
            "reference_radius": self.cfg.reference_radius,
            "time_scale": self.clock.time_scale,
            "max_frame_dt": self.cfg.max_frame_dt,
            "satellites": [
                {
                    "id": satellite.id,
                    "class": satellite.sat_class.value,
                    "radius": satellite.orbital_radius_real,
                    "velocity": satellite.orbital_velocity,
                    "period": satellite.period,
                    "drift_us_per_day": self.relativity.drift_rate_microseconds_per_day(
                        satellite
                    ),
                }
                for satellite in self.satellites
            ],
        }

    def close(self) -> None:
        if self.run_logger is not None and not self.run_logger.closed:
            self._log_timeseries()
            self.run_logger.close()

    def _log_timeseries(self) -> None:
        assert self.run_logger is not None
        for index, satellite in enumerate(self.satellites):
            self.run_logger.log_ts(
                (
                    self.elapsed,
                    index,
                    satellite.phase_angle,
                    satellite.earth_elapsed_time,
                    satellite.satellite_elapsed_time,
                    satellite.drift_seconds * 1e6,
                )
            )

    def _log_event(self, event_type: str, target: str, details: dict | None = None) -> None:
        if self.run_logger is not None:
            self.run_logger.log_event(self.elapsed, event_type, target, details)


__all__ = ["FrameSnapshot", "SatelliteSnapshot", "SimulationContext"]
