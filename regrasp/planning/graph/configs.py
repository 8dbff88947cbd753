"""Configuration objects for constraint graphs and their path validation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class GraphParameters:
    """Bounds applied to every projection performed through a graph."""

    max_iterations: int = 40
    error_threshold: float = 1e-4

    def as_dict(self) -> Dict[str, float]:
        return {
            "max_iterations": self.max_iterations,
            "error_threshold": self.error_threshold,
        }


@dataclass
class PathValidationParameters:
    """Discretization of the continuous collision validator."""

    step: float = 0.01  # time units between checked configurations

    def as_dict(self) -> Dict[str, float]:
        return {"step": self.step}


@dataclass
class StateDescription:
    """A state and the names of its constraints.

    ``path_constraints`` defaults to ``constraints`` when left unset.
    """

    name: str
    constraints: List[str] = field(default_factory=list)
    path_constraints: Optional[List[str]] = None

    def as_dict(self) -> Dict[str, object]:
        return {
            "name": self.name,
            "constraints": list(self.constraints),
            "path_constraints": (
                list(self.path_constraints) if self.path_constraints is not None else None
            ),
        }


@dataclass
class SelectorDescription:
    name: str
    states: List[StateDescription] = field(default_factory=list)

    def as_dict(self) -> Dict[str, object]:
        return {"name": self.name, "states": [s.as_dict() for s in self.states]}


@dataclass
class EdgeDescription:
    """A transition; ``constraints`` are the leaf constraints of the edge."""

    name: str
    source: str
    target: str
    weight: float = 1.0
    constraints: List[str] = field(default_factory=list)
    in_source_state: bool = True

    def as_dict(self) -> Dict[str, object]:
        return {
            "name": self.name,
            "source": self.source,
            "target": self.target,
            "weight": self.weight,
            "constraints": list(self.constraints),
            "in_source_state": self.in_source_state,
        }


@dataclass
class GraphDescription:
    """Top-level description of a constraint graph."""

    name: str = "graph"
    parameters: GraphParameters = field(default_factory=GraphParameters)
    validation: PathValidationParameters = field(default_factory=PathValidationParameters)
    global_constraints: List[str] = field(default_factory=list)
    selectors: List[SelectorDescription] = field(default_factory=list)
    edges: List[EdgeDescription] = field(default_factory=list)

    def state_names(self) -> List[str]:
        """Returns state names in classification order."""
        return [state.name for selector in self.selectors for state in selector.states]

    def as_dict(self) -> Dict[str, object]:
        return {
            "name": self.name,
            "parameters": self.parameters.as_dict(),
            "validation": self.validation.as_dict(),
            "global_constraints": list(self.global_constraints),
            "selectors": [s.as_dict() for s in self.selectors],
            "edges": [e.as_dict() for e in self.edges],
        }
