"""Transitions between states of the constraint graph."""

from __future__ import annotations

import weakref
from typing import TYPE_CHECKING, List, Optional, Tuple

import numpy as np

from regrasp.planning.constraints.projector import ConstraintSet, NumericalConstraint
from regrasp.planning.paths.path import StraightPath, TimeRange
from regrasp.planning.paths.validation import PathValidation
from .component import GraphComponent

if TYPE_CHECKING:
    from .state import State


class Edge(GraphComponent):
    """Directed transition between two states.

    An edge owns nothing: source and target are weak references, so a state
    and its outgoing edges never form a reference cycle.

    Leaf constraints are usually parametric (an object that stays where it is
    during the transition): their right-hand side is read from the
    configuration at which the transition starts.
    """

    def __init__(
        self,
        name: str,
        source: "State",
        target: "State",
        weight: float = 1.0,
        in_source_state: bool = True,
    ) -> None:
        super().__init__(name)
        self._source_ref = weakref.ref(source)
        self._target_ref = weakref.ref(target)
        self._constraints: List[NumericalConstraint] = []
        self.weight = weight
        self.in_source_state = in_source_state
        self.path_validation: Optional[PathValidation] = None

    @staticmethod
    def _deref(ref: "weakref.ReferenceType[State]", role: str, name: str) -> "State":
        state = ref()
        if state is None:
            raise RuntimeError(f"{role} state of edge {name} no longer exists")
        return state

    @property
    def source(self) -> "State":
        return self._deref(self._source_ref, "Source", self.name)

    @property
    def target(self) -> "State":
        return self._deref(self._target_ref, "Target", self.name)

    @property
    def state(self) -> "State":
        """State in which paths along this edge live."""
        return self.source if self.in_source_state else self.target

    @property
    def weight(self) -> float:
        return self._weight

    @weight.setter
    def weight(self, value: float) -> None:
        if value < 0:
            raise ValueError(f"Edge weight must be non-negative, got {value}")
        self._weight = float(value)

    @property
    def constraints(self) -> Tuple[NumericalConstraint, ...]:
        return tuple(self._constraints)

    def add_numerical_constraint(self, constraint: NumericalConstraint) -> None:
        self._constraints.append(constraint)

    def config_constraint(self, q: np.ndarray) -> ConstraintSet:
        return self.graph.edge_config_constraint([self], q)

    def path_constraint(self, q: np.ndarray) -> ConstraintSet:
        return self.graph.path_constraint([self], q)

    def build_path(self, q_start: np.ndarray, q_end: np.ndarray, time_range: Optional[TimeRange] = None) -> StraightPath:
        """Straight path from ``q_start`` to ``q_end`` constrained to the leaf of ``q_start``."""
        return StraightPath(q_start, q_end, time_range, constraints=self.path_constraint(q_start))

    def __str__(self) -> str:
        return f"Edge {self.name} (id {self.id}): {self.source.name} -> {self.target.name}"


__all__ = ["Edge"]
