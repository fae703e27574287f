"""Rendering helpers for the relativity visualizer."""

from .camera import Camera, project_top_down
from .assets import get_text_surface, load_font
from .draw import (
    circle_points,
    draw_body,
    draw_label,
    draw_orbit_line,
    draw_satellite,
    draw_starfield,
    generate_starfield,
    orbit_screen_points,
)
from .picking import satellite_index_at
from .ui import Button, ButtonVisualStyle, build_text_panel

__all__ = [
    "Button",
    "ButtonVisualStyle",
    "Camera",
    "build_text_panel",
    "circle_points",
    "draw_body",
    "draw_label",
    "draw_orbit_line",
    "draw_satellite",
    "draw_starfield",
    "generate_starfield",
    "get_text_surface",
    "load_font",
    "orbit_screen_points",
    "project_top_down",
    "satellite_index_at",
]
