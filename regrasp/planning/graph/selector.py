"""Groups of states attached to one end-effector."""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

import numpy as np

from .component import GraphComponent
from .edge import Edge
from .state import State

logger = logging.getLogger(__name__)


class StateSelector(GraphComponent):
    """Owns the states related to one gripper and picks outgoing edges for planning."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self._states: List[State] = []

    @property
    def states(self) -> Tuple[State, ...]:
        return tuple(self._states)

    def create_state(self, name: str) -> State:
        """Creates a state; declaration order is the classification priority."""
        if self.get_state_by_name(name) is not None:
            raise ValueError(f"State {name} already exists in selector {self.name}")
        state = State(name, self)
        state._attach(self.graph)
        self._states.append(state)
        return state

    def get_state_by_name(self, name: str) -> Optional[State]:
        for state in self._states:
            if state.name == name:
                return state
        return None

    def get_state(self, q: np.ndarray) -> Optional[State]:
        """First state of this selector containing ``q``, if any."""
        for state in self._states:
            if state.contains(q):
                return state
        return None

    def choose_edge(self, state: State, rng: Optional[np.random.Generator] = None) -> Edge:
        """Draws one outgoing edge of ``state`` with probability proportional to its weight."""
        if state.selector is not self:
            raise ValueError(f"State {state.name} does not belong to selector {self.name}")
        edges = [edge for edge in state.edges if edge.weight > 0]
        if not edges:
            raise ValueError(f"State {state.name} has no outgoing edge with positive weight")
        rng = rng or np.random.default_rng()
        weights = np.array([edge.weight for edge in edges])
        edge = edges[int(rng.choice(len(edges), p=weights / weights.sum()))]
        logger.debug("Selector %s chose edge %s from state %s", self.name, edge.name, state.name)
        return edge

    def __str__(self) -> str:
        return f"StateSelector {self.name} (id {self.id}) with {len(self._states)} states"


__all__ = ["StateSelector"]
