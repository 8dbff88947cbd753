"""States of the constraint graph."""

from __future__ import annotations

import weakref
from typing import TYPE_CHECKING, List, Optional, Tuple

import numpy as np

from regrasp.planning.constraints.projector import ConstraintSet, NumericalConstraint
from .component import GraphComponent
from .edge import Edge

if TYPE_CHECKING:
    from .selector import StateSelector


class State(GraphComponent):
    """A discrete mode of the system (e.g. "object placed", "object in gripper").

    Configurations belonging to the state satisfy its numerical constraints
    (together with the global constraints of the graph). Paths that live in the
    state are constrained by its path constraints, which may be weaker.
    A state owns its outgoing edges.
    """

    def __init__(self, name: str, selector: "StateSelector") -> None:
        super().__init__(name)
        self._selector_ref = weakref.ref(selector)
        self._constraints: List[NumericalConstraint] = []
        self._path_constraints: List[NumericalConstraint] = []
        self._edges: List[Edge] = []

    @property
    def selector(self) -> "StateSelector":
        selector = self._selector_ref()
        if selector is None:
            raise RuntimeError(f"State {self.name} outlived its selector")
        return selector

    @property
    def constraints(self) -> Tuple[NumericalConstraint, ...]:
        return tuple(self._constraints)

    @property
    def path_constraints(self) -> Tuple[NumericalConstraint, ...]:
        return tuple(self._path_constraints)

    @property
    def edges(self) -> Tuple[Edge, ...]:
        return tuple(self._edges)

    def add_numerical_constraint(self, constraint: NumericalConstraint, for_path: bool = True) -> None:
        """Adds a constraint on configurations of the state, by default also enforced along its paths."""
        self._constraints.append(constraint)
        if for_path:
            self._path_constraints.append(constraint)

    def add_numerical_constraint_for_path(self, constraint: NumericalConstraint) -> None:
        self._path_constraints.append(constraint)

    def create_edge(
        self,
        target: "State",
        name: Optional[str] = None,
        weight: float = 1.0,
        in_source_state: bool = True,
    ) -> Edge:
        """Creates an outgoing edge owned by this state."""
        if target.graph is not self.graph:
            raise ValueError(f"Cannot connect {self.name} to {target.name}: states belong to different graphs")
        edge = Edge(name or f"{self.name} -> {target.name}", self, target, weight, in_source_state)
        edge._attach(self.graph)
        self._edges.append(edge)
        return edge

    def get_edge(self, name: str) -> Optional[Edge]:
        for edge in self._edges:
            if edge.name == name:
                return edge
        return None

    def config_constraint(self) -> ConstraintSet:
        return self.graph.config_constraint([self])

    def contains(self, q: np.ndarray) -> bool:
        return self.config_constraint().is_satisfied(q)

    def __str__(self) -> str:
        names = ", ".join(c.name for c in self._constraints) or "-"
        return f"State {self.name} (id {self.id}) constraints: {names}"


__all__ = ["State"]
