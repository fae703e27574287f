"""Unit tests for circular-orbit propagation."""

import math
from dataclasses import replace

import numpy as np
import pytest

from gps_relativity.core.bodies import BodyRegistry
from gps_relativity.core.config import PHYSICS_CFG
from gps_relativity.core.errors import ConfigurationError
from gps_relativity.core.frames import TAU, TransformGraph
from gps_relativity.core.propagator import OrbitalPropagator, SatelliteState, orbit_point
from gps_relativity.data.bodies import SIDEREAL_DAY
from gps_relativity.data.satellites import SATELLITE_DEFINITIONS, SATELLITES


def angular_distance(a, b):
    diff = math.fmod(abs(a - b), TAU)
    return min(diff, TAU - diff)


def make_state(sat_id="CHRONOS-01", *, phase=0.0, cfg=PHYSICS_CFG):
    spec = SATELLITES[sat_id]
    index = [s.id for s in SATELLITE_DEFINITIONS].index(sat_id)
    return SatelliteState.from_spec(spec, index, len(SATELLITE_DEFINITIONS), cfg, phase=phase)


@pytest.fixture
def scene():
    graph = TransformGraph()
    earth = graph.add_frame("earth", position=(250.0, -4.0, 30.0))
    return graph, earth, OrbitalPropagator(graph)


class TestSatelliteState:
    """Test cases for the derived orbital parameters."""

    @pytest.mark.parametrize("spec", SATELLITE_DEFINITIONS, ids=lambda s: s.id)
    def test_closed_form_rates(self, spec):
        state = make_state(spec.id)
        radius = PHYSICS_CFG.earth_radius + spec.altitude
        assert state.orbital_radius_real == pytest.approx(radius)
        assert state.orbital_velocity == pytest.approx(math.sqrt(PHYSICS_CFG.mu / radius))
        assert state.angular_velocity == pytest.approx(math.sqrt(PHYSICS_CFG.mu / radius**3))
        assert state.orbital_radius_visual == pytest.approx(
            radius * PHYSICS_CFG.visual_earth_radius / PHYSICS_CFG.earth_radius
        )

    def test_gps_orbit(self):
        state = make_state("CHRONOS-01")
        assert state.orbital_velocity == pytest.approx(3873.0, abs=10.0)
        assert state.angular_velocity * SIDEREAL_DAY / TAU == pytest.approx(2.0, rel=2e-3)
        assert state.period == pytest.approx(43_100.0, rel=1e-3)
        assert state.altitude == pytest.approx(20_200_000.0)

    def test_plane_offsets_spread_evenly(self):
        count = len(SATELLITE_DEFINITIONS)
        offsets = [make_state(spec.id).plane_phase_offset for spec in SATELLITE_DEFINITIONS]
        assert offsets == pytest.approx([i * TAU / count for i in range(count)])

    def test_altitude_uses_configured_radius(self):
        cfg = replace(PHYSICS_CFG, earth_radius=3_000_000.0)
        state = make_state("CHRONOS-01", cfg=cfg)
        assert state.orbital_radius_real == pytest.approx(23_200_000.0)
        assert state.altitude == pytest.approx(20_200_000.0)

    def test_initial_phase_is_normalized(self):
        assert make_state(phase=-0.5).phase_angle == pytest.approx(TAU - 0.5)

    @pytest.mark.parametrize("altitude", [-PHYSICS_CFG.earth_radius, -7e6, math.nan])
    def test_non_positive_radius_rejected(self, altitude):
        spec = replace(SATELLITES["ISS-ALPHA"], altitude=altitude)
        with pytest.raises(ConfigurationError):
            SatelliteState.from_spec(spec, 0, 1)

    def test_bad_index_rejected(self):
        with pytest.raises(ConfigurationError):
            SatelliteState.from_spec(SATELLITES["ISS-ALPHA"], 3, 2)


class TestSatellitePropagation:
    """Test cases for stepping satellites through the graph."""

    def test_gps_returns_after_sidereal_day(self, scene):
        graph, earth, propagator = scene
        state = make_state(phase=1.0)
        propagator.attach_satellite(state, earth)
        steps = 8_616
        for _ in range(steps):
            propagator.step(state, SIDEREAL_DAY / steps)
        assert angular_distance(state.phase_angle, 1.0) < 0.02

    def test_step_size_independence(self, scene):
        _, _, propagator = scene
        fine = make_state("ISS-ALPHA", phase=0.3)
        coarse = make_state("ISS-ALPHA", phase=0.3)
        coarse.id = "ISS-COARSE"
        propagator.attach_satellite(fine, "earth")
        propagator.attach_satellite(coarse, "earth")
        for _ in range(1_000):
            propagator.step(fine, 5.0)
        propagator.step(coarse, 5_000.0)
        assert angular_distance(fine.phase_angle, coarse.phase_angle) < 1e-9

    def test_phase_stays_in_range(self, scene):
        _, earth, propagator = scene
        state = make_state("ISS-ALPHA")
        propagator.attach_satellite(state, earth)
        for _ in range(1_000):
            propagator.step(state, 1_000.0)
            assert 0.0 <= state.phase_angle < TAU

    def test_local_position_on_circle(self, scene):
        graph, earth, propagator = scene
        state = make_state(phase=0.8)
        propagator.attach_satellite(state, earth)
        propagator.step(state, 120.0)
        expected = orbit_point(state.orbital_radius_visual, state.phase_angle)
        np.testing.assert_allclose(graph.node(state.node).position, expected)
        assert expected[1] == 0.0

    def test_world_distance_and_facing(self, scene):
        graph, earth, propagator = scene
        state = make_state("SPECTER-9", phase=2.2)
        propagator.attach_satellite(state, earth)
        propagator.step(state, 3_600.0)

        earth_pos = graph.world_position_of(earth)
        sat_pos = graph.world_position_of(state.node)
        assert np.linalg.norm(sat_pos - earth_pos) == pytest.approx(state.orbital_radius_visual)

        forward = graph.world_rotation_of(state.node) @ np.array([0.0, 0.0, 1.0])
        towards = (earth_pos - sat_pos) / np.linalg.norm(earth_pos - sat_pos)
        np.testing.assert_allclose(forward, towards, atol=1e-9)

    def test_step_all(self, scene):
        _, earth, propagator = scene
        states = [make_state(spec.id) for spec in SATELLITE_DEFINITIONS]
        for state in states:
            propagator.attach_satellite(state, earth)
        propagator.step_all(states, 60.0)
        for state in states:
            assert state.phase_angle == pytest.approx(state.angular_velocity * 60.0)


class TestBodyPropagation:
    """Test cases for body orbits and spin."""

    def test_earth_spin_after_sidereal_day(self):
        registry = BodyRegistry()
        graph = TransformGraph()
        propagator = OrbitalPropagator(graph)
        sun = propagator.attach_body(registry.get("sun"), None)
        earth = propagator.attach_body(registry.get("earth"), sun.node)
        propagator.step_body(earth, SIDEREAL_DAY)
        assert angular_distance(earth.spin_angle, 0.0) < 1e-9

    def test_body_sits_on_visual_orbit(self):
        registry = BodyRegistry()
        graph = TransformGraph()
        propagator = OrbitalPropagator(graph)
        sun = propagator.attach_body(registry.get("sun"), None)
        earth = propagator.attach_body(registry.get("earth"), sun.node)
        propagator.step_body(sun, 86_400.0)
        propagator.step_body(earth, 86_400.0 * 40)
        distance = np.linalg.norm(graph.world_position_of(earth.node) - graph.world_position_of(sun.node))
        assert distance == pytest.approx(registry.get("earth").visual_orbital_radius)
        np.testing.assert_allclose(graph.world_position_of(sun.node), [0.0, 0.0, 0.0], atol=1e-12)
