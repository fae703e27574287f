"""HUD widgets: focus buttons and text panels."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

import pygame

from .assets import Color, get_text_surface


@dataclass(frozen=True)
class ButtonVisualStyle:
    base_color: Color
    hover_color: Color
    text_color: tuple[int, int, int]
    radius: int
    border_color: Color | None = None
    border_width: int = 0
    # outline used while the button's target is the active focus
    active_border_width: int = 2


class Button:
    """Rounded translucent button that runs *callback* on a left click.

    ``is_active`` is polled on every draw so the outline follows focus changes
    made from the keyboard or by picking, not only by this button.
    """

    def __init__(
        self,
        rect: tuple[int, int, int, int],
        text: str,
        callback: Callable[[], None],
        *,
        style: ButtonVisualStyle,
        is_active: Callable[[], bool] | None = None,
    ) -> None:
        self.rect = pygame.Rect(rect)
        self.text = text
        self._callback = callback
        self._style = style
        self._is_active = is_active or (lambda: False)

    def _border_width(self) -> int:
        if self._is_active():
            return max(self._style.border_width, self._style.active_border_width)
        return self._style.border_width

    def draw(
        self,
        surface: pygame.Surface,
        font: pygame.font.Font,
        mouse_pos: tuple[int, int] | None = None,
    ) -> None:
        style = self._style
        hovered = self.rect.collidepoint(mouse_pos or pygame.mouse.get_pos())
        face = pygame.Surface(self.rect.size, pygame.SRCALPHA)
        bounds = face.get_rect()
        fill = style.hover_color if hovered else style.base_color
        pygame.draw.rect(face, fill, bounds, border_radius=style.radius)
        border = self._border_width()
        if style.border_color is not None and border > 0:
            pygame.draw.rect(face, style.border_color, bounds, border, border_radius=style.radius)
        label = get_text_surface(font, self.text, style.text_color)
        face.blit(label, label.get_rect(center=bounds.center))
        surface.blit(face, self.rect.topleft)

    def handle_event(self, event: pygame.event.Event) -> bool:
        """Run the callback for a left click inside the button; report whether it did."""

        clicked = (
            event.type == pygame.MOUSEBUTTONDOWN
            and event.button == 1
            and self.rect.collidepoint(event.pos)
        )
        if clicked:
            self._callback()
        return clicked


def build_text_panel(
    font: pygame.font.Font,
    lines: Sequence[tuple[str, tuple[int, int, int]]],
    *,
    background_color: Color,
    padding: tuple[int, int] = (14, 14),
) -> pygame.Surface:
    """Render colored *lines* onto a rounded translucent panel; empty strings leave a gap."""

    if not lines:
        raise ValueError("lines must not be empty")
    pad_x, pad_y = padding
    step = font.get_linesize()
    width = max(font.size(text)[0] for text, _ in lines) + 2 * pad_x
    panel = pygame.Surface((width, step * len(lines) + 2 * pad_y), pygame.SRCALPHA)
    pygame.draw.rect(panel, background_color, panel.get_rect(), border_radius=12)
    for row, (text, color) in enumerate(lines):
        if text:
            panel.blit(get_text_surface(font, text, color), (pad_x, pad_y + row * step))
    return panel


__all__ = ["Button", "ButtonVisualStyle", "build_text_panel"]
