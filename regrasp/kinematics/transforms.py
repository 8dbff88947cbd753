"""Rigid transforms used for joint placements, grippers and handles."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

import numpy as np
from scipy.spatial.transform import Rotation

Array = np.ndarray


@dataclass(frozen=True, eq=False)
class Transform:
    """Element of SE(3) stored as a rotation matrix and a translation.

    Poses given as sequences follow the (x, y, z, qx, qy, qz, qw) convention.
    """

    rotation: Array = field(default_factory=lambda: np.eye(3))
    translation: Array = field(default_factory=lambda: np.zeros(3))

    @classmethod
    def identity(cls) -> "Transform":
        return cls()

    @classmethod
    def from_translation(cls, translation: Sequence[float]) -> "Transform":
        return cls(rotation=np.eye(3), translation=np.asarray(translation, dtype=float))

    @classmethod
    def from_xyz_quat(cls, pose: Sequence[float]) -> "Transform":
        if len(pose) != 7:
            raise ValueError("Pose must contain 7 elements (x, y, z, qx, qy, qz, qw)")
        values = np.asarray(pose, dtype=float)
        quat = values[3:]
        norm = np.linalg.norm(quat)
        if norm < 1e-12:
            raise ValueError("Quaternion of a pose cannot be zero")
        rotation = Rotation.from_quat(quat / norm).as_matrix()
        return cls(rotation=rotation, translation=values[:3].copy())

    @classmethod
    def from_rotvec(cls, rotvec: Sequence[float], translation: Sequence[float] = (0.0, 0.0, 0.0)) -> "Transform":
        rotation = Rotation.from_rotvec(np.asarray(rotvec, dtype=float)).as_matrix()
        return cls(rotation=rotation, translation=np.asarray(translation, dtype=float))

    def __mul__(self, other: "Transform") -> "Transform":
        return Transform(
            rotation=self.rotation @ other.rotation,
            translation=self.rotation @ other.translation + self.translation,
        )

    def inverse(self) -> "Transform":
        rot_t = self.rotation.T
        return Transform(rotation=rot_t, translation=-rot_t @ self.translation)

    def act(self, point: Sequence[float]) -> Array:
        """Applies the transform to a point."""
        return self.rotation @ np.asarray(point, dtype=float) + self.translation

    def log6(self) -> Array:
        """Returns [translation, rotation vector], the error vector used by grasp constraints."""
        rotvec = Rotation.from_matrix(self.rotation).as_rotvec()
        return np.concatenate([self.translation, rotvec])

    def as_xyz_quat(self) -> list[float]:
        quat = Rotation.from_matrix(self.rotation).as_quat()
        return list(self.translation) + list(quat)

    def is_close(self, other: "Transform", atol: float = 1e-9) -> bool:
        return bool(
            np.allclose(self.rotation, other.rotation, atol=atol)
            and np.allclose(self.translation, other.translation, atol=atol)
        )

    def __str__(self) -> str:
        xyz = ", ".join(f"{v:.4g}" for v in self.translation)
        rotvec = ", ".join(f"{v:.4g}" for v in Rotation.from_matrix(self.rotation).as_rotvec())
        return f"Transform(xyz=[{xyz}], rotvec=[{rotvec}])"


__all__ = ["Transform"]
