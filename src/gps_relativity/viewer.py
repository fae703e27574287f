"""
GPS Relativity Lab - interactive orbit and clock-drift viewer
==============================================================

Top-down view of the Sun, Earth, Moon and five satellites. The frame loop
feeds real frame time into the simulation context and draws what it reports.

Controls:
    0-4          focus system / sun / earth / moon / satellite
    TAB          next satellite
    UP / DOWN    time scale x10 / /10
    SPACE        pause (time scale 0) and resume
    R            reset the clock to the current date
    + / - wheel  zoom
    click        pick a satellite
"""
from __future__ import annotations

import argparse
import logging
import math
import random
import sys
from datetime import datetime
from dataclasses import replace

import numpy as np
import pygame

from gps_relativity.core.config import PHYSICS_CFG, RENDER_CFG, PhysicsCfg, RenderCfg
from gps_relativity.core.errors import ConfigurationError
from gps_relativity.core.focus import FocusKind, FocusTarget
from gps_relativity.core.logging_utils import RunLogger
from gps_relativity.core.model import FrameSnapshot, SimulationContext
from gps_relativity.core.timekeeping import FrameTimer
from gps_relativity.render import (
    Button,
    ButtonVisualStyle,
    Camera,
    build_text_panel,
    draw_body,
    draw_label,
    draw_orbit_line,
    draw_satellite,
    draw_starfield,
    generate_starfield,
    load_font,
    orbit_screen_points,
    project_top_down,
    satellite_index_at,
)

logger = logging.getLogger(__name__)

FOCUS_KEYS = {
    pygame.K_0: FocusTarget.system(),
    pygame.K_1: FocusTarget.sun(),
    pygame.K_2: FocusTarget.earth(),
    pygame.K_3: FocusTarget.moon(),
    pygame.K_4: FocusTarget.satellite(),
}

BODY_COLORS = {
    "sun": RENDER_CFG.sun_color,
    "earth": RENDER_CFG.earth_color,
    "moon": RENDER_CFG.moon_color,
}


def focus_zoom(kind: FocusKind, render_cfg: RenderCfg = RENDER_CFG) -> float:
    if kind is FocusKind.SYSTEM:
        return render_cfg.system_ppu
    if kind is FocusKind.SATELLITE:
        return render_cfg.satellite_ppu
    return render_cfg.body_ppu


def body_visual_radius(context: SimulationContext, name: str, render_cfg: RenderCfg) -> float:
    if name == context.registry.central.name:
        return render_cfg.sun_visual_radius
    return context.registry.get(name).mean_radius * context.cfg.visual_scale


def format_drift(drift_us: float) -> str:
    return f"{drift_us:+,.3f} us"


def hud_lines(
    context: SimulationContext,
    snapshot: FrameSnapshot,
    render_cfg: RenderCfg,
    *,
    now: datetime | None = None,
) -> list[tuple[str, tuple[int, int, int]]]:
    """HUD rows: simulated date, wall clock, time scale, reference and per-satellite drift."""

    now = now or datetime.now()
    text = render_cfg.hud_text_color
    accent = render_cfg.hud_accent_color
    stamp = context.clock.simulated_datetime.strftime("%Y-%m-%d %H:%M:%S UTC")
    reference = (
        "distant clock"
        if context.cfg.reference_radius is None
        else f"clock at r = {context.cfg.reference_radius / 1000:,.0f} km"
    )
    lines: list[tuple[str, tuple[int, int, int]]] = [
        (f"Simulated time: {stamp}", accent),
        (f"Earth time: {now:%H:%M:%S}", text),
        (f"Time scale: {snapshot.time_scale:,.0f}x", text),
        (f"Reference: {reference}", text),
        ("", text),
    ]
    for satellite, snap in zip(context.satellites, snapshot.satellites):
        rate = context.relativity.drift_rate_microseconds_per_day(satellite)
        color = render_cfg.hud_positive_color if snap.drift_microseconds >= 0 else render_cfg.hud_negative_color
        lines.append(
            (
                f"{snap.id:<11} {format_drift(snap.drift_microseconds):>16}   {rate:+7.2f} us/day",
                color,
            )
        )
    return lines


def focus_label(context: SimulationContext) -> str:
    satellite_id = context.focus.active_satellite_id
    if satellite_id is not None:
        return satellite_id
    return context.focus.active.kind.name


class TimeScaleControl:
    """Keyboard time-scale stepping with a pause that remembers the running scale.

    Stepping while paused resumes at the stepped scale, so the next pause
    toggle pauses again instead of restoring the scale from before the pause.
    """

    def __init__(self, context: SimulationContext, step: float) -> None:
        self._context = context
        self._step = step
        self._paused_scale: float | None = None

    @property
    def paused(self) -> bool:
        return self._paused_scale is not None

    def _base_scale(self) -> float:
        scale = self._context.clock.time_scale
        if self._paused_scale is not None:
            scale = self._paused_scale
            self._paused_scale = None
        return max(1.0, scale)

    def faster(self) -> float:
        return self._context.set_time_scale(self._base_scale() * self._step)

    def slower(self) -> float:
        return self._context.set_time_scale(max(1.0, self._base_scale() / self._step))

    def toggle_pause(self) -> float:
        if self._paused_scale is None:
            self._paused_scale = self._context.clock.time_scale
            return self._context.set_time_scale(0.0)
        scale, self._paused_scale = self._paused_scale, None
        return self._context.set_time_scale(scale)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Interactive GPS relativity orbit viewer.")
    parser.add_argument("--time-scale", type=float, default=PHYSICS_CFG.default_time_scale)
    parser.add_argument(
        "--ground-reference",
        action="store_true",
        help="measure drift against a clock on the Earth's surface",
    )
    parser.add_argument("--seed", type=int, default=None, help="seed for initial phases")
    parser.add_argument("--record", action="store_true", help="record the session to data/runs")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def build_physics_cfg(args: argparse.Namespace) -> PhysicsCfg:
    cfg = replace(PHYSICS_CFG, default_time_scale=args.time_scale, random_seed=args.seed)
    if args.ground_reference:
        cfg = replace(cfg, reference_radius=cfg.earth_radius)
    return cfg


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    cfg = build_physics_cfg(args)
    render_cfg = RENDER_CFG

    run_logger = RunLogger() if args.record else None
    try:
        context = SimulationContext(cfg, run_logger=run_logger)
    except ConfigurationError as err:
        logger.error("Refusing to start: %s", err)
        if run_logger is not None:
            run_logger.close()
        return 1

    pygame.init()
    pygame.display.set_caption("GPS Relativity Lab")
    screen = pygame.display.set_mode((render_cfg.width, render_cfg.height), pygame.RESIZABLE)
    clock = pygame.time.Clock()
    hud_font = load_font(15)
    label_font = load_font(13)
    button_font = load_font(13, bold=True)

    camera = Camera(
        screen.get_size(),
        render_cfg.initial_ppu,
        min_ppu=render_cfg.min_ppu,
        max_ppu=render_cfg.max_ppu,
    )
    starfield = generate_starfield(
        render_cfg.starfield_count, size=screen.get_size(), rng=random.Random(7)
    )
    button_style = ButtonVisualStyle(
        base_color=render_cfg.button_color,
        hover_color=render_cfg.button_hover_color,
        text_color=render_cfg.button_text_color,
        radius=render_cfg.button_radius,
        border_color=render_cfg.button_border_color,
        border_width=1,
    )

    def change_focus(target: FocusTarget) -> None:
        if context.select_focus(target):
            camera.set_zoom_target(focus_zoom(context.focus.active.kind, render_cfg))

    def make_focus_callback(target: FocusTarget):
        return lambda: change_focus(target)

    def make_active_check(kind: FocusKind):
        return lambda: context.focus.active.kind is kind

    buttons: list[Button] = []
    for idx, (text, target) in enumerate(
        (
            ("SYSTEM", FocusTarget.system()),
            ("SUN", FocusTarget.sun()),
            ("EARTH", FocusTarget.earth()),
            ("MOON", FocusTarget.moon()),
            ("SATELLITE", FocusTarget.satellite()),
        )
    ):
        buttons.append(
            Button(
                (20 + idx * 112, 20, 104, 34),
                text,
                make_focus_callback(target),
                style=button_style,
                is_active=make_active_check(target.kind),
            )
        )

    time_control = TimeScaleControl(context, render_cfg.time_scale_step)
    frame_timer = FrameTimer()
    running = True
    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.VIDEORESIZE:
                camera.update_size(screen.get_size())
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key in FOCUS_KEYS:
                    change_focus(FOCUS_KEYS[event.key])
                elif event.key == pygame.K_TAB:
                    active = context.focus.active
                    next_index = 0 if active.index is None else (active.index + 1) % len(context.satellites)
                    change_focus(FocusTarget.satellite(next_index))
                elif event.key == pygame.K_UP:
                    time_control.faster()
                elif event.key == pygame.K_DOWN:
                    time_control.slower()
                elif event.key == pygame.K_SPACE:
                    time_control.toggle_pause()
                elif event.key == pygame.K_r:
                    context.reset_clock()
                elif event.key in (pygame.K_EQUALS, pygame.K_PLUS):
                    camera.zoom_by_factor(render_cfg.zoom_step)
                elif event.key == pygame.K_MINUS:
                    camera.zoom_by_factor(1.0 / render_cfg.zoom_step)
            elif event.type == pygame.MOUSEWHEEL:
                camera.zoom_by_factor(render_cfg.zoom_step ** event.y)
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                if any(button.handle_event(event) for button in buttons):
                    continue
                positions = [snap.world_position for snap in context.snapshot().satellites]
                picked = satellite_index_at(camera, event.pos, positions, render_cfg.pick_radius_pixels)
                if context.select_satellite_at(picked):
                    camera.set_zoom_target(focus_zoom(FocusKind.SATELLITE, render_cfg))

        snapshot = context.step(frame_timer.tick())
        camera.follow(snapshot.focus_position)
        camera.update(context.focus.follow_smoothing)

        screen.fill(render_cfg.background_color)
        draw_starfield(screen, starfield, camera.center, camera.ppu, render_cfg=render_cfg)
        orbit_layer = pygame.Surface(screen.get_size(), pygame.SRCALPHA)

        for name, state in context.bodies.items():
            body = state.body
            if body.host is not None:
                points = orbit_screen_points(
                    context.graph,
                    state.orbit_node,
                    body.visual_orbital_radius,
                    camera,
                    samples=render_cfg.orbit_samples * 2,
                )
                draw_orbit_line(
                    orbit_layer,
                    (*BODY_COLORS.get(name, render_cfg.hud_text_color), render_cfg.orbit_alpha),
                    points,
                    render_cfg.orbit_line_width,
                )
        for satellite in context.satellites:
            points = orbit_screen_points(
                context.graph,
                satellite.plane_node,
                satellite.orbital_radius_visual,
                camera,
                samples=render_cfg.orbit_samples,
            )
            draw_orbit_line(
                orbit_layer,
                (*satellite.color, render_cfg.orbit_alpha),
                points,
                render_cfg.orbit_line_width,
            )
        screen.blit(orbit_layer, (0, 0))

        for name, state in context.bodies.items():
            position = camera.world_to_screen(*project_top_down(context.graph.world_position_of(state.node)))
            radius = max(
                render_cfg.min_body_pixel_radius,
                int(body_visual_radius(context, name, render_cfg) * camera.ppu),
            )
            meridian = context.graph.world_rotation_of(state.surface_node) @ np.array([1.0, 0.0, 0.0])
            draw_body(
                screen,
                position,
                radius,
                color=BODY_COLORS.get(name, render_cfg.hud_text_color),
                spin_angle=math.atan2(meridian[2], meridian[0]),
            )
        active_id = context.focus.active_satellite_id
        for satellite, snap in zip(context.satellites, snapshot.satellites):
            position = camera.world_to_screen(*project_top_down(snap.world_position))
            highlighted = satellite.id == active_id
            draw_satellite(
                screen,
                position,
                render_cfg.satellite_pixel_radius,
                color=satellite.color,
                highlighted=highlighted,
            )
            if highlighted or camera.ppu >= render_cfg.body_ppu:
                draw_label(screen, label_font, satellite.id, position, color=satellite.color)

        for button in buttons:
            button.draw(screen, button_font)
        panel = build_text_panel(
            hud_font,
            hud_lines(context, snapshot, render_cfg),
            background_color=render_cfg.panel_background_color,
        )
        screen.blit(panel, (20, screen.get_height() - panel.get_height() - 20))
        if context.focus.is_tracking:
            bar = build_text_panel(
                button_font,
                [(f"TRACKING: {focus_label(context)}   (0 returns to system)", render_cfg.hud_accent_color)],
                background_color=render_cfg.panel_background_color,
                padding=(24, 10),
            )
            screen.blit(bar, bar.get_rect(midbottom=(screen.get_width() // 2, screen.get_height() - 24)))

        pygame.display.flip()
        clock.tick(60)

    context.close()
    pygame.quit()
    return 0


if __name__ == "__main__":
    sys.exit(main())
