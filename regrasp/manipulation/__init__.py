"""Manipulation-specific entities: grasp handles on movable objects."""

from .handle import Handle

__all__ = ["Handle"]
