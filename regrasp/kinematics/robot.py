"""Minimal robot model: joints whose world placement is a function of the configuration."""

from __future__ import annotations

import weakref
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence

import numpy as np

from .transforms import Transform

Array = np.ndarray
PlacementFn = Callable[[Array], Transform]


class Joint:
    """A joint of the (composite) robot.

    ``placement(q)`` returns the world placement of the joint frame for the
    configuration ``q``. ``config_indices`` lists the configuration entries the
    joint depends on.
    """

    def __init__(self, name: str, placement_fn: PlacementFn, config_indices: Sequence[int] = ()) -> None:
        self.name = name
        self._placement_fn = placement_fn
        self.config_indices: List[int] = list(config_indices)
        self._robot_ref: Optional["weakref.ReferenceType[Robot]"] = None

    @property
    def robot(self) -> "Robot":
        robot = self._robot_ref() if self._robot_ref is not None else None
        if robot is None:
            raise RuntimeError(f"Joint {self.name} is not attached to a robot")
        return robot

    def placement(self, q: Array) -> Transform:
        return self._placement_fn(np.asarray(q, dtype=float))

    @classmethod
    def fixed(cls, name: str, transform: Optional[Transform] = None) -> "Joint":
        placement = transform or Transform.identity()
        return cls(name, lambda q: placement, ())

    @classmethod
    def translation(cls, name: str, index: int) -> "Joint":
        """Three prismatic axes reading q[index:index + 3]."""

        def placement(q: Array) -> Transform:
            return Transform.from_translation(q[index : index + 3])

        return cls(name, placement, range(index, index + 3))

    @classmethod
    def free_flyer(cls, name: str, index: int) -> "Joint":
        """Free-floating joint reading (x, y, z, qx, qy, qz, qw) from q[index:index + 7]."""

        def placement(q: Array) -> Transform:
            return Transform.from_xyz_quat(q[index : index + 7])

        return cls(name, placement, range(index, index + 7))

    def __repr__(self) -> str:
        return f"Joint({self.name!r}, indices={self.config_indices})"


@dataclass
class Gripper:
    """End-effector frame attached to a robot joint."""

    name: str
    joint: Joint
    local_position: Transform = field(default_factory=Transform.identity)
    clearance: float = 0.0

    def placement(self, q: Array) -> Transform:
        return self.joint.placement(q) * self.local_position


class Robot:
    """Composite robot (robot bodies plus movable objects) being planned for."""

    def __init__(self, name: str, config_size: int, neutral: Optional[Sequence[float]] = None) -> None:
        if config_size <= 0:
            raise ValueError(f"config_size must be positive, got {config_size}")
        self.name = name
        self.config_size = config_size
        self._joints: Dict[str, Joint] = {}
        self._neutral = np.zeros(config_size) if neutral is None else np.asarray(neutral, dtype=float)
        if self._neutral.shape != (config_size,):
            raise ValueError(f"Neutral configuration must have {config_size} entries")

    def add_joint(self, joint: Joint) -> Joint:
        if joint.name in self._joints:
            raise ValueError(f"Joint {joint.name} already exists in robot {self.name}")
        if any(i >= self.config_size for i in joint.config_indices):
            raise ValueError(f"Joint {joint.name} reads outside of the configuration of {self.name}")
        self._joints[joint.name] = joint
        joint._robot_ref = weakref.ref(self)
        return joint

    def joint(self, name: str) -> Joint:
        try:
            return self._joints[name]
        except KeyError as exc:
            raise KeyError(f"Robot {self.name} has no joint {name}") from exc

    @property
    def joints(self) -> List[Joint]:
        return list(self._joints.values())

    def neutral_configuration(self) -> Array:
        return self._neutral.copy()

    def check_configuration(self, q: Sequence[float]) -> Array:
        config = np.asarray(q, dtype=float)
        if config.shape != (self.config_size,):
            raise ValueError(
                f"Robot {self.name} expects configurations of size {self.config_size}, got shape {config.shape}"
            )
        return config


__all__ = ["Gripper", "Joint", "Robot"]
