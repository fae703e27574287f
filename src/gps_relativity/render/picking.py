"""Resolve a screen click to a registered satellite."""
from __future__ import annotations

import math
from typing import Sequence

from .camera import Camera, project_top_down


def satellite_index_at(
    camera: Camera,
    screen_pos: tuple[int, int],
    world_positions: Sequence[Sequence[float]],
    radius_px: float,
) -> int | None:
    """Index of the satellite drawn closest to *screen_pos*, within *radius_px*."""

    best_index: int | None = None
    best_distance = float(radius_px)
    for index, position in enumerate(world_positions):
        sx, sy = camera.world_to_screen(*project_top_down(position))
        distance = math.hypot(sx - screen_pos[0], sy - screen_pos[1])
        if distance <= best_distance:
            best_index = index
            best_distance = distance
    return best_index


__all__ = ["satellite_index_at"]
