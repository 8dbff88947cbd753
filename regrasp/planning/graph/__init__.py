"""Constraint graph: states, transitions and the selectors that own them."""

from .component import GraphComponent
from .configs import (
    EdgeDescription,
    GraphDescription,
    GraphParameters,
    PathValidationParameters,
    SelectorDescription,
    StateDescription,
)
from .config_loader import load_graph_description
from .edge import Edge
from .graph import Graph
from .selector import StateSelector
from .state import State
from .builder import build_graph, build_path_validation

__all__ = [
    "Edge",
    "EdgeDescription",
    "Graph",
    "GraphComponent",
    "GraphDescription",
    "GraphParameters",
    "PathValidationParameters",
    "SelectorDescription",
    "State",
    "StateDescription",
    "StateSelector",
    "build_graph",
    "build_path_validation",
    "load_graph_description",
]
