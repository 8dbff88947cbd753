"""YAML loader for constraint graph descriptions."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml  # type: ignore[import-untyped]

from .configs import (
    EdgeDescription,
    GraphDescription,
    GraphParameters,
    PathValidationParameters,
    SelectorDescription,
    StateDescription,
)


def _load_parameters(data: Mapping[str, Any] | None) -> GraphParameters:
    data = data or {}
    return GraphParameters(
        max_iterations=int(data.get("max_iterations", 40)),
        error_threshold=float(data.get("error_threshold", 1e-4)),
    )


def _load_validation(data: Mapping[str, Any] | None) -> PathValidationParameters:
    data = data or {}
    return PathValidationParameters(step=float(data.get("step", 0.01)))


def _names(data: Optional[Sequence[Any]]) -> List[str]:
    return [str(name) for name in (data or [])]


def _load_state(data: Mapping[str, Any]) -> StateDescription:
    path_constraints = data.get("path_constraints")
    return StateDescription(
        name=str(data["name"]),
        constraints=_names(data.get("constraints")),
        path_constraints=_names(path_constraints) if path_constraints is not None else None,
    )


def _load_selector(data: Mapping[str, Any]) -> SelectorDescription:
    return SelectorDescription(
        name=str(data["name"]),
        states=[_load_state(s) for s in data.get("states", [])],
    )


def _load_edge(data: Mapping[str, Any]) -> EdgeDescription:
    return EdgeDescription(
        name=str(data["name"]),
        source=str(data["source"]),
        target=str(data["target"]),
        weight=float(data.get("weight", 1.0)),
        constraints=_names(data.get("constraints")),
        in_source_state=bool(data.get("in_source_state", True)),
    )


def load_graph_description(path: Path) -> GraphDescription:
    """Load a GraphDescription from a YAML file."""
    with Path(path).open("r", encoding="utf-8") as fp:
        raw: Dict[str, Any] = yaml.safe_load(fp) or {}
    return GraphDescription(
        name=str(raw.get("name", "graph")),
        parameters=_load_parameters(raw.get("parameters")),
        validation=_load_validation(raw.get("validation")),
        global_constraints=_names(raw.get("global_constraints")),
        selectors=[_load_selector(s) for s in raw.get("selectors", [])],
        edges=[_load_edge(e) for e in raw.get("edges", [])],
    )


__all__ = ["load_graph_description"]
