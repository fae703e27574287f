"""Fonts and rendered text for the HUD."""
from __future__ import annotations

from collections import OrderedDict
from typing import Iterable

import pygame


Color = tuple[int, int, int] | tuple[int, int, int, int]

FONT_PREFERENCES = ("Inter", "Segoe UI", "Helvetica Neue", "DejaVu Sans", "Arial")


class TextCache:
    """Least-recently-used store of rendered text surfaces.

    The HUD redraws the same labels every frame, while the drift readouts
    change each frame; a bounded cache keeps the former cheap without growing
    with the latter.
    """

    def __init__(self, capacity: int = 256) -> None:
        self.capacity = max(1, capacity)
        self._surfaces: OrderedDict[tuple[int, str, Color], pygame.Surface] = OrderedDict()

    def __len__(self) -> int:
        return len(self._surfaces)

    def render(self, font: pygame.font.Font, text: str, color: Color) -> pygame.Surface:
        key = (id(font), text, color)
        surface = self._surfaces.get(key)
        if surface is None:
            surface = font.render(text, True, color)
            self._surfaces[key] = surface
            while len(self._surfaces) > self.capacity:
                self._surfaces.popitem(last=False)
        else:
            self._surfaces.move_to_end(key)
        return surface


_TEXT_CACHE = TextCache()


def get_text_surface(font: pygame.font.Font, text: str, color: Color) -> pygame.Surface:
    return _TEXT_CACHE.render(font, text, color)


def load_font(
    size: int,
    preferred_names: Iterable[str] = FONT_PREFERENCES,
    *,
    bold: bool = False,
) -> pygame.font.Font:
    """First installed font from *preferred_names*, else pygame's default match."""

    if not pygame.font.get_init():
        pygame.font.init()
    names = list(preferred_names)
    for name in names:
        path = pygame.font.match_font(name, bold=bold)
        if path:
            return pygame.font.Font(path, size)
    return pygame.font.SysFont(names[0] if names else None, size, bold=bold)
