"""Generation error hierarchy.

Only ``ConfigError`` ever reaches callers of the generator; it is raised
before any randomness is consumed. ``RoutingInfeasible`` is recovered inside
the hallway router and ``OverlapViolation`` is raised by the invariant checks
when debug checks are enabled.
"""

from __future__ import annotations

from typing import Optional


class GenerationError(Exception):
    """Base class for dungeon generation failures."""


class ConfigError(GenerationError, ValueError):
    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field

    def to_dict(self):
        return {"error": str(self), "field": self.field}


class RoutingInfeasible(GenerationError):
    """No buffer-respecting exit/jog combination exists for an edge."""

    def __init__(self, edge, buffer: int):
        super().__init__(f"no hallway route for edge {edge} with buffer={buffer}")
        self.edge = edge
        self.buffer = buffer


class OverlapViolation(GenerationError):
    """A structural invariant failed; indicates a generator bug."""


__all__ = ["GenerationError", "ConfigError", "RoutingInfeasible", "OverlapViolation"]
