"""Drawing primitives for the plan view: orbits, bodies, satellites, labels and stars."""
from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Iterable, Sequence, TYPE_CHECKING

import numpy as np
import pygame

from .assets import Color, get_text_surface
from .camera import Camera, project_top_down

if TYPE_CHECKING:  # pragma: no cover
    from gps_relativity.core.config import RenderCfg
    from gps_relativity.core.frames import NodeRef, TransformGraph


def circle_points(radius: float, samples: int) -> np.ndarray:
    """``(samples + 1, 3)`` closed circle in the local x-z plane."""

    theta = np.linspace(0.0, 2.0 * math.pi, samples + 1)
    return np.column_stack((radius * np.cos(theta), np.zeros_like(theta), radius * np.sin(theta)))


def orbit_screen_points(
    graph: TransformGraph,
    plane: NodeRef,
    radius: float,
    camera: Camera,
    *,
    samples: int,
) -> list[tuple[int, int]]:
    """Screen polyline of a circular orbit lying in *plane*'s local x-z plane."""

    world = graph.to_world(plane, circle_points(radius, samples))
    return [camera.world_to_screen(*project_top_down(point)) for point in world]


def draw_orbit_line(
    surface: pygame.Surface,
    color: Color,
    points: Sequence[tuple[int, int]],
    width: int,
) -> None:
    if len(points) < 2:
        return
    if width <= 1:
        pygame.draw.aalines(surface, color, False, points)
    else:
        pygame.draw.lines(surface, color, False, points, width)
        pygame.draw.aalines(surface, color, False, points)


def draw_body(
    surface: pygame.Surface,
    position: tuple[int, int],
    radius: int,
    *,
    color: tuple[int, int, int],
    spin_angle: float | None = None,
) -> None:
    if radius <= 0:
        return
    pygame.draw.circle(surface, color, position, radius)
    if spin_angle is not None and radius >= 6:
        # meridian marker so the spin (and tidal lock) is visible from above
        end = (
            int(position[0] + radius * math.cos(spin_angle)),
            int(position[1] + radius * math.sin(spin_angle)),
        )
        pygame.draw.line(surface, (20, 20, 30), position, end, 2)


def draw_satellite(
    surface: pygame.Surface,
    position: tuple[int, int],
    radius: int,
    *,
    color: tuple[int, int, int],
    highlighted: bool = False,
) -> None:
    if radius <= 0:
        return
    pygame.draw.circle(surface, color, position, radius)
    if highlighted:
        pygame.draw.circle(surface, color, position, radius + 5, 1)


def draw_label(
    surface: pygame.Surface,
    font: pygame.font.Font,
    text: str,
    position: tuple[int, int],
    *,
    color: tuple[int, int, int],
    offset: tuple[int, int] = (8, -18),
) -> None:
    label = get_text_surface(font, text, color)
    surface.blit(label, (position[0] + offset[0], position[1] + offset[1]))


@dataclass(frozen=True)
class Star:
    x: float
    y: float
    radius: int
    sprite: pygame.Surface


def generate_starfield(
    num_stars: int,
    *,
    size: tuple[int, int],
    rng: random.Random | None = None,
) -> list[Star]:
    """Faint bluish-white dots scattered over one screen, pre-rendered."""

    rng = rng or random.Random()
    width, height = size
    stars: list[Star] = []
    for _ in range(num_stars):
        radius = 2 if rng.random() < 0.25 else 1
        blue = rng.randint(200, 240)
        color = (blue - rng.randint(10, 25), blue - rng.randint(5, 15), blue, rng.randint(80, 150))
        sprite = pygame.Surface((radius * 2, radius * 2), pygame.SRCALPHA)
        pygame.draw.circle(sprite, color, (radius, radius), radius)
        stars.append(Star(rng.uniform(0, width), rng.uniform(0, height), radius, sprite))
    return stars


def draw_starfield(
    surface: pygame.Surface,
    starfield: Iterable[Star],
    camera_center: np.ndarray,
    ppu: float,
    *,
    render_cfg: RenderCfg,
) -> None:
    """Blit the stars with a slow parallax drift, wrapping at the screen edges."""

    width, height = surface.get_size()
    shift = np.asarray(camera_center, dtype=float) * ppu * render_cfg.starfield_parallax
    for star in starfield:
        sx = int((star.x - shift[0]) % width) - star.radius
        sy = int((star.y - shift[1]) % height) - star.radius
        surface.blit(star.sprite, (sx, sy))
