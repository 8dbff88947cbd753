"""Builds graphs and their path validation from descriptions."""

from __future__ import annotations

import logging
from typing import Dict, Mapping

from regrasp.kinematics.robot import Robot
from regrasp.planning.constraints.projector import NumericalConstraint
from regrasp.planning.graph_path_validation import GraphPathValidation
from regrasp.planning.paths.validation import ConfigValidation, DiscretizedPathValidation
from .configs import GraphDescription
from .graph import Graph
from .state import State

logger = logging.getLogger(__name__)


def _resolve(constraints: Mapping[str, NumericalConstraint], name: str, owner: str) -> NumericalConstraint:
    try:
        return constraints[name]
    except KeyError as exc:
        raise KeyError(f"Unknown constraint {name!r} referenced by {owner}") from exc


def build_graph(
    description: GraphDescription,
    robot: Robot,
    constraints: Mapping[str, NumericalConstraint],
) -> Graph:
    """Instantiate a Graph, resolving constraint names against ``constraints``."""
    graph = Graph.create(robot, description.name, description.parameters)
    for name in description.global_constraints:
        graph.add_global_constraint(_resolve(constraints, name, f"graph {description.name}"))

    states: Dict[str, State] = {}
    for selector_desc in description.selectors:
        selector = graph.create_state_selector(selector_desc.name)
        for state_desc in selector_desc.states:
            if state_desc.name in states:
                raise ValueError(f"State {state_desc.name} is declared twice")
            state = selector.create_state(state_desc.name)
            for_path = state_desc.path_constraints is None
            for name in state_desc.constraints:
                state.add_numerical_constraint(_resolve(constraints, name, f"state {state.name}"), for_path=for_path)
            for name in state_desc.path_constraints or []:
                state.add_numerical_constraint_for_path(_resolve(constraints, name, f"state {state.name}"))
            states[state.name] = state

    for edge_desc in description.edges:
        try:
            source, target = states[edge_desc.source], states[edge_desc.target]
        except KeyError as exc:
            raise KeyError(f"Edge {edge_desc.name} connects unknown state {exc.args[0]!r}") from exc
        edge = source.create_edge(target, edge_desc.name, edge_desc.weight, edge_desc.in_source_state)
        for name in edge_desc.constraints:
            edge.add_numerical_constraint(_resolve(constraints, name, f"edge {edge.name}"))

    logger.info(
        "Built graph %s: %d selectors, %d states, %d edges",
        graph.name,
        len(description.selectors),
        len(states),
        len(description.edges),
    )
    return graph


def build_path_validation(
    description: GraphDescription,
    graph: Graph,
    config_validation: ConfigValidation,
) -> GraphPathValidation:
    """Graph-aware validation wrapping a discretized collision validator."""
    continuous = DiscretizedPathValidation(config_validation, step=description.validation.step)
    validation = GraphPathValidation.create(continuous)
    validation.constraint_graph = graph
    return validation


__all__ = ["build_graph", "build_path_validation"]
