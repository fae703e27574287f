"""Configuration dataclasses for the relativity simulation."""
from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class PhysicsCfg:
    gravitational_constant: float = 6.674e-11
    earth_mass: float = 5.972e24
    earth_radius: float = 6_371_000.0
    speed_of_light: float = 299_792_458.0
    # scene units per Earth radius
    visual_earth_radius: float = 100.0
    max_frame_dt: float = 0.1
    default_time_scale: float = 1_000.0
    min_time_scale: float = 0.0
    max_time_scale: float = 100_000.0
    # None keeps the reference clock infinitely far from the Earth
    reference_radius: float | None = None
    log_every_steps: int = 20
    random_seed: int | None = None

    @property
    def mu(self) -> float:
        return self.gravitational_constant * self.earth_mass

    @property
    def visual_scale(self) -> float:
        """Scene units per meter."""

        return self.visual_earth_radius / self.earth_radius

    @property
    def schwarzschild_radius(self) -> float:
        return 2.0 * self.mu / (self.speed_of_light**2)

    def circular_speed(self, radius: float) -> float:
        return math.sqrt(self.mu / radius)


@dataclass(frozen=True)
class RenderCfg:
    width: int = 1200
    height: int = 800
    background_color: tuple[int, int, int] = (4, 6, 14)
    sun_color: tuple[int, int, int] = (255, 204, 80)
    earth_color: tuple[int, int, int] = (74, 134, 247)
    moon_color: tuple[int, int, int] = (196, 196, 204)
    orbit_alpha: int = 80
    orbit_line_width: int = 1
    orbit_samples: int = 128
    satellite_pixel_radius: int = 4
    min_body_pixel_radius: int = 3
    pick_radius_pixels: int = 12
    hud_text_color: tuple[int, int, int] = (234, 241, 255)
    hud_accent_color: tuple[int, int, int] = (0, 242, 255)
    hud_positive_color: tuple[int, int, int] = (148, 216, 45)
    hud_negative_color: tuple[int, int, int] = (255, 140, 90)
    panel_background_color: tuple[int, int, int, int] = (10, 10, 15, 204)
    button_color: tuple[int, int, int, int] = (8, 32, 64, int(255 * 0.78))
    button_hover_color: tuple[int, int, int, int] = (18, 52, 94, int(255 * 0.88))
    button_text_color: tuple[int, int, int] = (234, 241, 255)
    button_border_color: tuple[int, int, int, int] = (0, 242, 255, int(255 * 0.55))
    button_radius: int = 14
    starfield_count: int = 260
    starfield_parallax: float = 0.05
    initial_ppu: float = 0.02
    min_ppu: float = 1e-3
    max_ppu: float = 50.0
    system_ppu: float = 0.02
    body_ppu: float = 0.6
    sun_visual_radius: float = 1_000.0
    satellite_ppu: float = 2.5
    zoom_step: float = 1.2
    time_scale_step: float = 10.0


PHYSICS_CFG = PhysicsCfg()
RENDER_CFG = RenderCfg()


__all__ = ["PHYSICS_CFG", "RENDER_CFG", "PhysicsCfg", "RenderCfg"]
