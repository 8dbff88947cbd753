"""Differentiable functions of the configuration used to build numerical constraints."""

from __future__ import annotations

from typing import Callable, Optional, Sequence

import numpy as np

from regrasp.kinematics.robot import Joint, Robot
from regrasp.kinematics.transforms import Transform

Array = np.ndarray

FULL_MASK = (True, True, True, True, True, True)


class DifferentiableFunction:
    """Vector valued function f(q) with a Jacobian.

    Subclasses implement ``_compute``. The default Jacobian uses central finite
    differences, which is enough for the smooth functions used by grasps and
    object locks.
    """

    fd_eps: float = 1e-6

    def __init__(self, name: str, input_size: int, output_size: int) -> None:
        self.name = name
        self.input_size = input_size
        self.output_size = output_size

    def __call__(self, q: Array) -> Array:
        value = np.asarray(self._compute(np.asarray(q, dtype=float)), dtype=float).reshape(-1)
        if value.shape != (self.output_size,):
            raise ValueError(f"{self.name} returned {value.shape[0]} values, expected {self.output_size}")
        return value

    def _compute(self, q: Array) -> Array:
        raise NotImplementedError

    def jacobian(self, q: Array) -> Array:
        q = np.asarray(q, dtype=float)
        jac = np.zeros((self.output_size, self.input_size))
        for j in range(self.input_size):
            q_plus = q.copy()
            q_minus = q.copy()
            q_plus[j] += self.fd_eps
            q_minus[j] -= self.fd_eps
            jac[:, j] = (self(q_plus) - self(q_minus)) / (2 * self.fd_eps)
        return jac

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r}, {self.input_size} -> {self.output_size})"


class FunctionFromCallable(DifferentiableFunction):
    """Wraps a plain callable, optionally with an analytic Jacobian."""

    def __init__(
        self,
        name: str,
        input_size: int,
        output_size: int,
        fn: Callable[[Array], Sequence[float]],
        jacobian_fn: Optional[Callable[[Array], Array]] = None,
    ) -> None:
        super().__init__(name, input_size, output_size)
        self._fn = fn
        self._jacobian_fn = jacobian_fn

    def _compute(self, q: Array) -> Array:
        return np.asarray(self._fn(q), dtype=float)

    def jacobian(self, q: Array) -> Array:
        if self._jacobian_fn is None:
            return super().jacobian(q)
        return np.asarray(self._jacobian_fn(np.asarray(q, dtype=float)), dtype=float)


class ConfigurationComponent(DifferentiableFunction):
    """Selects entries of the configuration; the building block of joint and object locks."""

    def __init__(self, name: str, input_size: int, indices: Sequence[int]) -> None:
        super().__init__(name, input_size, len(indices))
        self.indices = list(indices)

    def _compute(self, q: Array) -> Array:
        return q[self.indices]

    def jacobian(self, q: Array) -> Array:
        jac = np.zeros((self.output_size, self.input_size))
        jac[np.arange(self.output_size), self.indices] = 1.0
        return jac


class RelativeTransformation(DifferentiableFunction):
    """Masked log of the transform between two joint frames.

    The value is ``log6((joint1(q) * frame1)^-1 * joint2(q) * frame2)`` restricted
    to the entries selected by ``mask`` (3 translations then 3 rotations), minus
    ``reference``.
    """

    def __init__(
        self,
        name: str,
        robot: Robot,
        joint1: Joint,
        joint2: Joint,
        frame1: Transform,
        frame2: Transform,
        mask: Sequence[bool] = FULL_MASK,
        reference: Optional[Sequence[float]] = None,
    ) -> None:
        if len(mask) != 6:
            raise ValueError("Relative transformation mask must have 6 entries")
        self.mask = tuple(bool(m) for m in mask)
        super().__init__(name, robot.config_size, sum(self.mask))
        self.joint1 = joint1
        self.joint2 = joint2
        self.frame1 = frame1
        self.frame2 = frame2
        self.reference = (
            np.zeros(self.output_size) if reference is None else np.asarray(reference, dtype=float)
        )
        if self.reference.shape != (self.output_size,):
            raise ValueError(f"Reference of {name} must have {self.output_size} entries")

    def relative_transform(self, q: Array) -> Transform:
        placement1 = self.joint1.placement(q) * self.frame1
        placement2 = self.joint2.placement(q) * self.frame2
        return placement1.inverse() * placement2

    def _compute(self, q: Array) -> Array:
        error = self.relative_transform(q).log6()
        return error[np.array(self.mask)] - self.reference


__all__ = [
    "ConfigurationComponent",
    "DifferentiableFunction",
    "FULL_MASK",
    "FunctionFromCallable",
    "RelativeTransformation",
]
