"""Which entity the camera and HUD are following."""
from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum, auto
from typing import Sequence

from .errors import NotFoundError

logger = logging.getLogger(__name__)


class FocusKind(Enum):
    SYSTEM = auto()
    SUN = auto()
    EARTH = auto()
    MOON = auto()
    SATELLITE = auto()


@dataclass(frozen=True)
class FocusTarget:
    """Closed focus variant; ``index`` is only meaningful for satellites.

    ``FocusTarget(FocusKind.SATELLITE)`` without an index asks for the first
    satellite and is resolved by :class:`FocusStateMachine`.
    """

    kind: FocusKind
    index: int | None = None

    def __post_init__(self) -> None:
        if self.kind is not FocusKind.SATELLITE and self.index is not None:
            raise ValueError(f"{self.kind.name} focus does not take an index")

    @classmethod
    def system(cls) -> "FocusTarget":
        return cls(FocusKind.SYSTEM)

    @classmethod
    def sun(cls) -> "FocusTarget":
        return cls(FocusKind.SUN)

    @classmethod
    def earth(cls) -> "FocusTarget":
        return cls(FocusKind.EARTH)

    @classmethod
    def moon(cls) -> "FocusTarget":
        return cls(FocusKind.MOON)

    @classmethod
    def satellite(cls, index: int | None = None) -> "FocusTarget":
        return cls(FocusKind.SATELLITE, index)

    @property
    def is_satellite(self) -> bool:
        return self.kind is FocusKind.SATELLITE

    def __str__(self) -> str:
        if self.is_satellite:
            return f"SATELLITE[{self.index}]"
        return self.kind.name


SYSTEM_FOCUS = FocusTarget.system()


class FocusStateMachine:
    """Tracks the active focus; every transition is legal if the target is valid."""

    SATELLITE_FOLLOW_SMOOTHING = 0.4
    DEFAULT_FOLLOW_SMOOTHING = 0.1
    HISTORY_LENGTH = 64

    def __init__(self, satellite_ids: Sequence[str]) -> None:
        self._satellite_ids = list(satellite_ids)
        self._active = SYSTEM_FOCUS
        self._history: deque[FocusTarget] = deque([SYSTEM_FOCUS], maxlen=self.HISTORY_LENGTH)

    @property
    def active(self) -> FocusTarget:
        return self._active

    @property
    def history(self) -> tuple[FocusTarget, ...]:
        return tuple(self._history)

    @property
    def satellite_count(self) -> int:
        return len(self._satellite_ids)

    @property
    def active_satellite_id(self) -> str | None:
        if self._active.is_satellite and self._active.index is not None:
            return self._satellite_ids[self._active.index]
        return None

    @property
    def follow_smoothing(self) -> float:
        if self._active.is_satellite:
            return self.SATELLITE_FOLLOW_SMOOTHING
        return self.DEFAULT_FOLLOW_SMOOTHING

    @property
    def is_tracking(self) -> bool:
        """Whether the HUD should show the tracking bar."""

        return self._active.kind not in (FocusKind.SYSTEM, FocusKind.EARTH)

    def resolve(self, target: FocusTarget) -> FocusTarget | None:
        """Return the concrete target for *target*, or ``None`` if it is invalid."""

        if not target.is_satellite:
            return target
        index = 0 if target.index is None else target.index
        if not 0 <= index < len(self._satellite_ids):
            return None
        return FocusTarget.satellite(index)

    def select(self, target: FocusTarget) -> bool:
        resolved = self.resolve(target)
        if resolved is None:
            logger.warning(
                "Rejected focus %s: %d satellites registered", target, len(self._satellite_ids)
            )
            return False
        if resolved != self._active:
            logger.debug("Focus %s -> %s", self._active, resolved)
            self._active = resolved
            self._history.append(resolved)
        return True

    def select_satellite(self, index: int | None = None) -> bool:
        return self.select(FocusTarget.satellite(index))

    def select_satellite_id(self, satellite_id: str) -> bool:
        try:
            index = self.index_of(satellite_id)
        except NotFoundError:
            logger.debug("Ignoring focus request for unknown satellite %r", satellite_id)
            return False
        return self.select_satellite(index)

    def select_picked(self, index: int | None) -> bool:
        """Follow a satellite resolved by a spatial pick; misses change nothing."""

        if index is None or not 0 <= index < len(self._satellite_ids):
            return False
        return self.select_satellite(index)

    def back_to_system(self) -> None:
        self.select(SYSTEM_FOCUS)

    def index_of(self, satellite_id: str) -> int:
        try:
            return self._satellite_ids.index(satellite_id)
        except ValueError:
            raise NotFoundError(f"Unknown satellite: {satellite_id!r}") from None


__all__ = ["FocusKind", "FocusStateMachine", "FocusTarget", "SYSTEM_FOCUS"]
