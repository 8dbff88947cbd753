"""Handles: parts of movable objects that are aimed at being grasped."""

from __future__ import annotations

from typing import Optional, Sequence

from regrasp.kinematics.robot import Gripper, Joint
from regrasp.kinematics.transforms import Transform
from regrasp.planning.constraints.functions import FULL_MASK, RelativeTransformation

PRE_GRASP_MASK = (False, True, True, True, True, True)
PRE_GRASP_COMPLEMENT_MASK = (True, False, False, False, False, False)


class Handle:
    """Part of an object that is aimed at being grasped.

    ``local_position`` is the handle frame expressed in the frame of ``joint``,
    the joint that moves the object. It is fixed at construction; name and
    joint can be rebound.
    """

    def __init__(self, name: str, local_position: Transform, joint: Joint) -> None:
        self._name = name
        self._local_position = local_position
        self._joint = joint

    @classmethod
    def create(cls, name: str, local_position: Transform, joint: Joint) -> "Handle":
        return cls(name, local_position, joint)

    def clone(self) -> "Handle":
        return type(self)(self._name, self._local_position, self._joint)

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, name: str) -> None:
        self._name = name

    @property
    def joint(self) -> Joint:
        """Joint to which the handle is linked."""
        return self._joint

    @joint.setter
    def joint(self, joint: Joint) -> None:
        self._joint = joint

    @property
    def local_position(self) -> Transform:
        """Position of the handle in the joint frame."""
        return self._local_position

    def _relative_transformation(
        self,
        gripper: Gripper,
        label: str,
        mask: Sequence[bool],
        reference: Optional[Sequence[float]] = None,
    ) -> RelativeTransformation:
        return RelativeTransformation(
            f"{gripper.name}_{label}_{self._name}",
            gripper.joint.robot,
            gripper.joint,
            self._joint,
            gripper.local_position,
            self._local_position,
            mask=mask,
            reference=reference,
        )

    def create_grasp(self, gripper: Gripper) -> RelativeTransformation:
        """Constraint of a gripper grasping this handle; the 6 DOFs of the relative transform are constrained."""
        return self._relative_transformation(gripper, "grasps", FULL_MASK)

    def create_pre_grasp(self, gripper: Gripper) -> RelativeTransformation:
        """Like ``create_grasp`` with the translation along x left free (approach axis)."""
        return self._relative_transformation(gripper, "pregrasps", PRE_GRASP_MASK)

    def create_pre_grasp_complement(self, gripper: Gripper, shift: float) -> RelativeTransformation:
        """Constrains only the axis left free by ``create_pre_grasp``, to the value ``shift``."""
        return self._relative_transformation(gripper, "pregrasps_complement", PRE_GRASP_COMPLEMENT_MASK, [shift])

    def __str__(self) -> str:
        return f"Handle {self._name} on joint {self._joint.name}, local position {self._local_position}"

    def __repr__(self) -> str:
        return f"Handle({self._name!r}, joint={self._joint.name!r})"


__all__ = ["Handle", "PRE_GRASP_COMPLEMENT_MASK", "PRE_GRASP_MASK"]
