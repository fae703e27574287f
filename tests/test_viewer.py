"""Tests for the viewer's keyboard time control and HUD text."""

import random
from datetime import datetime

import pytest

pytest.importorskip("pygame")

from gps_relativity.core.config import PHYSICS_CFG, RENDER_CFG
from gps_relativity.core.model import SimulationContext
from gps_relativity.viewer import TimeScaleControl, hud_lines


@pytest.fixture
def context():
    return SimulationContext(PHYSICS_CFG, rng=random.Random(1))


class TestTimeScaleControl:
    """Test cases for stepping and pausing the time scale."""

    def test_pause_and_resume(self, context):
        control = TimeScaleControl(context, 10.0)
        assert control.toggle_pause() == 0.0
        assert control.paused
        assert control.toggle_pause() == PHYSICS_CFG.default_time_scale
        assert not control.paused

    def test_stepping_while_paused_resumes(self, context):
        control = TimeScaleControl(context, 10.0)
        control.toggle_pause()
        assert control.faster() == PHYSICS_CFG.default_time_scale * 10.0
        assert not control.paused
        # the next toggle pauses again rather than restoring the old scale
        assert control.toggle_pause() == 0.0
        assert control.slower() == PHYSICS_CFG.default_time_scale
        assert context.clock.time_scale == PHYSICS_CFG.default_time_scale

    def test_scale_stays_in_range(self, context):
        control = TimeScaleControl(context, 10.0)
        for _ in range(10):
            control.faster()
        assert context.clock.time_scale == PHYSICS_CFG.max_time_scale
        for _ in range(10):
            control.slower()
        assert context.clock.time_scale == 1.0


class TestHudLines:
    """Test cases for the HUD text."""

    def test_shows_wall_clock_and_every_satellite(self, context):
        snapshot = context.step(0.05)
        lines = hud_lines(context, snapshot, RENDER_CFG, now=datetime(2024, 3, 1, 9, 5, 7))
        texts = [text for text, _ in lines]
        assert "Earth time: 09:05:07" in texts
        assert texts[0].startswith("Simulated time: ")
        for sat in context.satellites:
            assert any(text.startswith(sat.id) for text in texts)
