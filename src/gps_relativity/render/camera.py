"""Plan-view camera that eases towards whatever the focus is following."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

import numpy as np


def project_top_down(position: Sequence[float]) -> tuple[float, float]:
    """Drop the height axis: scene ``(x, y, z)`` becomes plan-view ``(x, z)``."""

    return float(position[0]), float(position[2])


@dataclass
class CameraState:
    ppu: float
    ppu_target: float
    center: np.ndarray = field(default_factory=lambda: np.zeros(2))
    target: np.ndarray = field(default_factory=lambda: np.zeros(2))


class Camera:
    """Maps plan-view ``(x, z)`` scene coordinates to pixels.

    ``ppu`` is pixels per scene unit. Screen y grows downwards, like scene z
    seen from above with +y towards the viewer. Both the center and the zoom
    ease towards their targets in :meth:`update`.
    """

    def __init__(
        self,
        size: tuple[int, int],
        ppu: float,
        *,
        min_ppu: float,
        max_ppu: float,
    ) -> None:
        if not 0.0 < min_ppu <= max_ppu:
            raise ValueError(f"invalid zoom range [{min_ppu}, {max_ppu}]")
        self._size = size
        self._zoom_range = (min_ppu, max_ppu)
        start = self._clamp_zoom(ppu)
        self._state = CameraState(ppu=start, ppu_target=start)

    def _clamp_zoom(self, ppu: float) -> float:
        low, high = self._zoom_range
        return float(np.clip(ppu, low, high))

    @property
    def size(self) -> tuple[int, int]:
        return self._size

    def update_size(self, size: tuple[int, int]) -> None:
        self._size = size

    @property
    def ppu(self) -> float:
        return self._state.ppu

    @property
    def ppu_target(self) -> float:
        return self._state.ppu_target

    @property
    def center(self) -> np.ndarray:
        return self._state.center

    @property
    def target(self) -> np.ndarray:
        return self._state.target

    def set_center(self, position: Sequence[float]) -> None:
        """Jump straight to *position* without easing."""

        self._state.center[:] = position
        self._state.target[:] = position

    def set_target(self, position: Sequence[float]) -> None:
        self._state.target[:] = position

    def follow(self, world_position: Sequence[float]) -> None:
        """Aim at a scene-space position read after this frame's step."""

        self.set_target(project_top_down(world_position))

    def set_zoom(self, ppu: float) -> None:
        self._state.ppu = self._state.ppu_target = self._clamp_zoom(ppu)

    def set_zoom_target(self, ppu: float) -> None:
        self._state.ppu_target = self._clamp_zoom(ppu)

    def zoom_by_factor(self, factor: float) -> None:
        self.set_zoom_target(self._state.ppu_target * factor)

    def update(self, smoothing: float = 0.1) -> None:
        """Move a *smoothing* fraction of the way towards the targets."""

        state = self._state
        state.center += (state.target - state.center) * smoothing
        state.ppu = self._clamp_zoom(state.ppu + (state.ppu_target - state.ppu) * smoothing)

    def world_to_screen(self, x: float, z: float) -> tuple[int, int]:
        width, height = self._size
        offset = (np.array([x, z]) - self._state.center) * self._state.ppu
        return width // 2 + int(offset[0]), height // 2 + int(offset[1])

    def screen_to_world(self, sx: float, sy: float) -> tuple[float, float]:
        width, height = self._size
        pixels = np.array([sx - width / 2.0, sy - height / 2.0])
        x, z = pixels / self._state.ppu + self._state.center
        return float(x), float(z)


__all__ = ["Camera", "CameraState", "project_top_down"]
