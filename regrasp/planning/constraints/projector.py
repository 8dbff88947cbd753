"""Numerical constraints and the Newton projector that enforces them."""

from __future__ import annotations

import logging
import weakref
from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple

import numpy as np

from regrasp.kinematics.robot import Robot
from .functions import DifferentiableFunction

if TYPE_CHECKING:
    from regrasp.planning.graph.edge import Edge

logger = logging.getLogger(__name__)

Array = np.ndarray


class NumericalConstraint:
    """Equality constraint ``function(q) == right_hand_side``.

    A parametric constraint defines a foliation: its right-hand side is not fixed
    but read from a reference configuration (see ``with_right_hand_side_from``).
    """

    def __init__(
        self,
        function: DifferentiableFunction,
        parametric: bool = False,
        right_hand_side: Optional[Sequence[float]] = None,
    ) -> None:
        self.function = function
        self.parametric = parametric
        self.right_hand_side = (
            np.zeros(function.output_size)
            if right_hand_side is None
            else np.asarray(right_hand_side, dtype=float)
        )
        if self.right_hand_side.shape != (function.output_size,):
            raise ValueError(f"Right hand side of {function.name} must have {function.output_size} entries")

    @property
    def name(self) -> str:
        return self.function.name

    @property
    def size(self) -> int:
        return self.function.output_size

    def value(self, q: Array) -> Array:
        return self.function(q) - self.right_hand_side

    def jacobian(self, q: Array) -> Array:
        return self.function.jacobian(q)

    def with_right_hand_side_from(self, q: Array) -> "NumericalConstraint":
        """Returns the constraint selecting the leaf that passes through ``q``."""
        if not self.parametric:
            return self
        return NumericalConstraint(self.function, parametric=True, right_hand_side=self.function(q))

    def __repr__(self) -> str:
        kind = "parametric" if self.parametric else "fixed"
        return f"NumericalConstraint({self.name!r}, {kind})"


class ConfigProjector:
    """Projects configurations onto a set of numerical constraints.

    Gauss-Newton iterations with a least-squares step, stopped after
    ``max_iterations`` or once the residual norm drops below ``error_threshold``.
    """

    def __init__(
        self,
        robot: Robot,
        name: str,
        constraints: Sequence[NumericalConstraint],
        max_iterations: int,
        error_threshold: float,
    ) -> None:
        self.robot = robot
        self.name = name
        self.constraints: List[NumericalConstraint] = list(constraints)
        self.max_iterations = max_iterations
        self.error_threshold = error_threshold

    def residual(self, q: Array) -> Array:
        q = self.robot.check_configuration(q)
        if not self.constraints:
            return np.zeros(0)
        return np.concatenate([c.value(q) for c in self.constraints])

    def jacobian(self, q: Array) -> Array:
        return np.vstack([c.jacobian(q) for c in self.constraints])

    def is_satisfied(self, q: Array) -> bool:
        residual = self.residual(q)
        return bool(residual.size == 0 or np.linalg.norm(residual) < self.error_threshold)

    def apply(self, q: Array) -> Tuple[bool, Array]:
        """Returns (success, projected configuration); never raises on non-convergence."""
        config = self.robot.check_configuration(q).copy()
        if not self.constraints:
            return True, config
        for it in range(self.max_iterations):
            residual = self.residual(config)
            error = float(np.linalg.norm(residual))
            if error < self.error_threshold:
                logger.debug("%s converged at iter=%d error=%.3g", self.name, it, error)
                return True, config
            step, *_ = np.linalg.lstsq(self.jacobian(config), residual, rcond=None)
            config = config - step
        error = float(np.linalg.norm(self.residual(config)))
        success = error < self.error_threshold
        if not success:
            logger.debug("%s failed to converge after %d iterations, error=%.3g", self.name, self.max_iterations, error)
        return success, config

    def __repr__(self) -> str:
        names = ", ".join(c.name for c in self.constraints)
        return f"ConfigProjector({self.name!r}, [{names}])"


class ConstraintSet:
    """Projector attached to a path, optionally bound to the graph edge it was built for.

    The edge is held through a weak reference: a constraint set never keeps a
    graph component alive.
    """

    def __init__(self, name: str, projector: ConfigProjector, edge: Optional["Edge"] = None) -> None:
        self.name = name
        self.projector = projector
        self._edge_ref = weakref.ref(edge) if edge is not None else None

    @property
    def edge(self) -> Optional["Edge"]:
        return self._edge_ref() if self._edge_ref is not None else None

    def apply(self, q: Array) -> Tuple[bool, Array]:
        return self.projector.apply(q)

    def is_satisfied(self, q: Array) -> bool:
        return self.projector.is_satisfied(q)

    def residual(self, q: Array) -> Array:
        return self.projector.residual(q)

    def __repr__(self) -> str:
        edge = self.edge
        suffix = f", edge={edge.name!r}" if edge is not None else ""
        return f"ConstraintSet({self.name!r}{suffix})"


__all__ = ["ConfigProjector", "ConstraintSet", "NumericalConstraint"]
