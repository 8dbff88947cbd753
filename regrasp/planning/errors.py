"""Exceptions raised when a configuration cannot be projected or classified."""

from __future__ import annotations


class ProjectionError(RuntimeError):
    """A configuration could not be projected within the iteration/error bounds."""


class StateClassificationError(ProjectionError):
    """A configuration satisfies the constraints of no state of the graph."""


__all__ = ["ProjectionError", "StateClassificationError"]
