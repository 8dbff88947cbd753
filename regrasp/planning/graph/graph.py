"""The constraint graph: selectors, states, edges and global constraints."""

from __future__ import annotations

import logging
import weakref
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from regrasp.kinematics.robot import Robot
from regrasp.planning.constraints.projector import ConfigProjector, ConstraintSet, NumericalConstraint
from regrasp.planning.errors import StateClassificationError
from .component import GraphComponent
from .configs import GraphParameters
from .edge import Edge
from .selector import StateSelector
from .state import State

logger = logging.getLogger(__name__)


def _unique(constraints: Iterable[NumericalConstraint]) -> List[NumericalConstraint]:
    seen = set()
    result: List[NumericalConstraint] = []
    for constraint in constraints:
        if id(constraint) not in seen:
            seen.add(id(constraint))
            result.append(constraint)
    return result


class Graph(GraphComponent):
    """Description of the constraint graph of a robot with several end-effectors.

    Ownership is acyclic: the graph owns its state selectors, a selector owns
    its states, a state owns its outgoing edges and an edge owns nothing. Every
    upward reference is a weak reference, so releasing the graph releases the
    whole structure.

    ``max_iterations`` and ``error_threshold`` parameterize every projector the
    graph builds.
    """

    def __init__(self, name: str, robot: Robot, parameters: Optional[GraphParameters] = None) -> None:
        super().__init__(name)
        params = parameters or GraphParameters()
        self._robot = robot
        self._selectors: List[StateSelector] = []
        self._global_constraints: List[NumericalConstraint] = []
        self._components: List["weakref.ReferenceType[GraphComponent]"] = []
        self.max_iterations = params.max_iterations
        self.error_threshold = params.error_threshold
        self._attach(self)

    @classmethod
    def create(cls, robot: Robot, name: str = "graph", parameters: Optional[GraphParameters] = None) -> "Graph":
        return cls(name, robot, parameters)

    def _register(self, component: GraphComponent) -> int:
        self._components.append(weakref.ref(component))
        return len(self._components) - 1

    def get(self, component_id: int) -> Optional[GraphComponent]:
        """Component with the given id, or None when it does not exist (anymore)."""
        if not 0 <= component_id < len(self._components):
            return None
        return self._components[component_id]()

    @property
    def robot(self) -> Robot:
        return self._robot

    @property
    def max_iterations(self) -> int:
        return self._max_iterations

    @max_iterations.setter
    def max_iterations(self, iterations: int) -> None:
        if iterations <= 0:
            raise ValueError(f"max_iterations must be positive, got {iterations}")
        self._max_iterations = int(iterations)

    @property
    def error_threshold(self) -> float:
        return self._error_threshold

    @error_threshold.setter
    def error_threshold(self, threshold: float) -> None:
        if threshold <= 0:
            raise ValueError(f"error_threshold must be positive, got {threshold}")
        self._error_threshold = float(threshold)

    @property
    def parameters(self) -> GraphParameters:
        return GraphParameters(max_iterations=self._max_iterations, error_threshold=self._error_threshold)

    @property
    def selectors(self) -> Tuple[StateSelector, ...]:
        return tuple(self._selectors)

    @property
    def states(self) -> Tuple[State, ...]:
        """All states in classification order."""
        return tuple(state for selector in self._selectors for state in selector.states)

    @property
    def global_constraints(self) -> Tuple[NumericalConstraint, ...]:
        return tuple(self._global_constraints)

    def add_global_constraint(self, constraint: NumericalConstraint) -> None:
        """Adds a constraint enforced in every state and along every path (e.g. stability)."""
        self._global_constraints.append(constraint)

    def create_state_selector(self, name: Optional[str] = None) -> StateSelector:
        selector = StateSelector(name or f"{self.name}_selector_{len(self._selectors)}")
        selector._attach(self)
        self._selectors.append(selector)
        return selector

    def get_state_selector_by_name(self, name: str) -> Optional[StateSelector]:
        for selector in self._selectors:
            if selector.name == name:
                return selector
        return None

    def classify(self, q: np.ndarray) -> List[State]:
        """Every state containing ``q``, in selector then state declaration order."""
        q = self._robot.check_configuration(q)
        return [state for state in self.states if self.config_constraint([state]).is_satisfied(q)]

    def get_state(self, q: np.ndarray) -> State:
        """The state of ``q``: the first match of ``classify``."""
        states = self.classify(q)
        if not states:
            raise StateClassificationError(
                f"Configuration {np.array2string(np.asarray(q), precision=4)} belongs to no state of graph {self.name}"
            )
        if len(states) > 1:
            logger.debug("Configuration matches %d states, using %s", len(states), states[0].name)
        return states[0]

    def choose_edges(self, states: Sequence[State], rng: Optional[np.random.Generator] = None) -> List[Edge]:
        """Draws one outgoing edge per state, following the policy of the owning selector."""
        rng = rng or np.random.default_rng()
        return [state.selector.choose_edge(state, rng) for state in states]

    select_edges = choose_edges

    def _projector(self, name: str, constraints: Iterable[NumericalConstraint]) -> ConfigProjector:
        return ConfigProjector(
            self._robot,
            name,
            constraints,
            max_iterations=self._max_iterations,
            error_threshold=self._error_threshold,
        )

    def config_constraint(self, states: Sequence[State]) -> ConstraintSet:
        """Projector onto the intersection of ``states``."""
        name = " : ".join(state.name for state in states)
        constraints = _unique(
            list(self._global_constraints) + [c for state in states for c in state.constraints]
        )
        return ConstraintSet(name, self._projector(name, constraints))

    def _leaf_constraints(self, edges: Sequence[Edge], q: np.ndarray) -> List[NumericalConstraint]:
        q = self._robot.check_configuration(q)
        leaf = _unique(c for edge in edges for c in edge.constraints)
        return [c.with_right_hand_side_from(q) for c in leaf]

    def edge_config_constraint(self, edges: Sequence[Edge], q: np.ndarray) -> ConstraintSet:
        """Projector onto the leaf of the foliation defined by ``edges`` that passes through ``q``."""
        name = " : ".join(edge.name for edge in edges)
        fixed = _unique(list(self._global_constraints) + [c for edge in edges for c in edge.target.constraints])
        projector = self._projector(name, fixed + self._leaf_constraints(edges, q))
        return ConstraintSet(name, projector, edges[0] if len(edges) == 1 else None)

    def path_constraint(self, edges: Sequence[Edge], q: np.ndarray) -> ConstraintSet:
        """Constraint of paths moving along the leaf through ``q``."""
        name = " : ".join(edge.name for edge in edges)
        fixed = _unique(list(self._global_constraints) + [c for edge in edges for c in edge.state.path_constraints])
        projector = self._projector(name, fixed + self._leaf_constraints(edges, q))
        return ConstraintSet(name, projector, edges[0] if len(edges) == 1 else None)

    def __str__(self) -> str:
        lines = [f"Graph {self.name} (max_iterations={self._max_iterations}, error_threshold={self._error_threshold:g})"]
        for selector in self._selectors:
            lines.append(f"  {selector}")
            for state in selector.states:
                lines.append(f"    {state}")
                for edge in state.edges:
                    lines.append(f"      {edge}")
        return "\n".join(lines)


__all__ = ["Graph"]
