"""Kinematic collaborators of the planner: transforms, joints, robots and grippers."""

from .robot import Gripper, Joint, Robot
from .transforms import Transform

__all__ = ["Gripper", "Joint", "Robot", "Transform"]
