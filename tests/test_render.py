"""Tests for the camera and click picking."""

import numpy as np
import pytest

pytest.importorskip("pygame")

from gps_relativity.render.camera import Camera, project_top_down
from gps_relativity.render.picking import satellite_index_at


@pytest.fixture
def camera():
    return Camera((800, 600), 2.0, min_ppu=0.01, max_ppu=10.0)


class TestCamera:
    """Test cases for the top-down camera."""

    def test_projection_drops_height(self):
        assert project_top_down((3.0, 99.0, -4.0)) == (3.0, -4.0)

    def test_screen_world_round_trip(self, camera):
        camera.set_center((10.0, -20.0))
        sx, sy = camera.world_to_screen(35.0, 5.0)
        assert (sx, sy) == (450, 350)
        assert camera.screen_to_world(sx, sy) == pytest.approx((35.0, 5.0))

    def test_follow_eases_towards_target(self, camera):
        camera.follow((100.0, 7.0, 50.0))
        camera.update(0.5)
        np.testing.assert_allclose(camera.center, [50.0, 25.0])
        for _ in range(60):
            camera.update(0.5)
        np.testing.assert_allclose(camera.center, [100.0, 50.0])

    def test_zoom_is_clamped(self, camera):
        camera.set_zoom(1e6)
        assert camera.ppu == 10.0
        camera.zoom_by_factor(1e-9)
        assert camera.ppu_target == 0.01


class TestPicking:
    """Test cases for resolving clicks to satellites."""

    def test_nearest_within_radius(self, camera):
        positions = [(0.0, 0.0, 0.0), (10.0, 0.0, 0.0), (11.0, 5.0, 0.0)]
        # (10, 0) and (11, 0) are 20 and 22 pixels right of the center
        assert satellite_index_at(camera, (422, 300), positions, 12) == 2
        assert satellite_index_at(camera, (419, 300), positions, 12) == 1

    def test_miss(self, camera):
        positions = [(0.0, 0.0, 0.0)]
        assert satellite_index_at(camera, (700, 500), positions, 12) is None
        assert satellite_index_at(camera, (400, 300), [], 12) is None
