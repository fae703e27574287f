"""Exception types raised by the simulation core."""
from __future__ import annotations


class SimulationError(Exception):
    """Base class for errors raised by the simulation core."""


class ConfigurationError(SimulationError, ValueError):
    """Invalid body or satellite parameters; the simulation must not start."""


class DomainError(SimulationError, ArithmeticError):
    """A relativity formula was evaluated outside its physical domain."""


class NotFoundError(SimulationError, LookupError):
    """Unknown body, satellite or frame identifier."""


__all__ = ["ConfigurationError", "DomainError", "NotFoundError", "SimulationError"]
