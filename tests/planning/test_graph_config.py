from pathlib import Path

import numpy as np
import pytest

from regrasp.planning.graph import (
    GraphDescription,
    build_graph,
    build_path_validation,
    load_graph_description,
)
from regrasp.planning.graph_path_validation import ValidationFailure

GRAPH_YAML = """
name: pick_and_place
parameters:
  max_iterations: 25
  error_threshold: 1.0e-6
validation:
  step: 0.01
selectors:
  - name: gripper
    states:
      - name: grasped
        constraints: [grasp]
      - name: placement
        constraints: [box_on_table]
        path_constraints: []
edges:
  - name: transit
    source: placement
    target: placement
    constraints: [box_lock]
  - name: grasp
    source: placement
    target: grasped
    weight: 2
    constraints: [box_lock]
  - name: release
    source: grasped
    target: placement
    in_source_state: false
    constraints: [box_lock]
"""


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "graph.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def _registry(scenario):
    return {
        "grasp": scenario.grasp_constraint,
        "box_on_table": scenario.placement_constraint,
        "box_lock": scenario.box_lock,
    }


def test_load_graph_description(tmp_path: Path) -> None:
    description = load_graph_description(_write(tmp_path, GRAPH_YAML))

    assert description.name == "pick_and_place"
    assert description.parameters.max_iterations == 25
    assert description.parameters.error_threshold == 1e-6
    assert description.validation.step == 0.01
    assert description.state_names() == ["grasped", "placement"]
    placement = description.selectors[0].states[1]
    assert placement.path_constraints == []
    assert description.selectors[0].states[0].path_constraints is None
    assert description.edges[1].weight == 2.0
    assert description.edges[2].in_source_state is False
    payload = description.as_dict()
    assert payload["edges"][0]["constraints"] == ["box_lock"]


def test_empty_file_gives_defaults(tmp_path: Path) -> None:
    description = load_graph_description(_write(tmp_path, ""))

    assert description.as_dict() == GraphDescription().as_dict()


def test_build_graph_from_description(tmp_path: Path, scenario) -> None:
    description = load_graph_description(_write(tmp_path, GRAPH_YAML))

    graph = build_graph(description, scenario.robot, _registry(scenario))

    assert graph.max_iterations == 25
    assert [s.name for s in graph.states] == ["grasped", "placement"]
    placement = graph.get_state_selector_by_name("gripper").get_state_by_name("placement")
    assert [c.name for c in placement.constraints] == ["box_on_table"]
    assert placement.path_constraints == ()
    assert [e.name for e in placement.edges] == ["transit", "grasp"]
    assert placement.get_edge("grasp").weight == 2.0
    q = np.array([2.0, 0.0, 0.1, 2.0, 0.0, 0.0])
    assert [s.name for s in graph.classify(q)] == ["grasped", "placement"]


def test_unknown_constraint_is_rejected(tmp_path: Path, scenario) -> None:
    description = load_graph_description(_write(tmp_path, GRAPH_YAML))
    registry = _registry(scenario)
    del registry["box_lock"]

    with pytest.raises(KeyError, match="box_lock"):
        build_graph(description, scenario.robot, registry)


def test_edge_with_unknown_state_is_rejected(tmp_path: Path, scenario) -> None:
    text = GRAPH_YAML + """  - name: broken
    source: placement
    target: nowhere
"""
    description = load_graph_description(_write(tmp_path, text))

    with pytest.raises(KeyError, match="nowhere"):
        build_graph(description, scenario.robot, _registry(scenario))


def test_build_path_validation(tmp_path: Path, scenario, make_wall) -> None:
    description = load_graph_description(_write(tmp_path, GRAPH_YAML))
    graph = build_graph(description, scenario.robot, _registry(scenario))
    validation = build_path_validation(description, graph, make_wall(0.455, 0.555))
    transit = graph.states[1].get_edge("transit")
    path = transit.build_path(
        np.array([0.0, 0.0, 1.0, 2.0, 0.0, 0.0]), np.array([1.0, 0.0, 1.0, 2.0, 0.0, 0.0])
    )

    success, valid_part, report = validation.validate(path)

    assert validation.constraint_graph is graph
    assert validation.path_validation.step == 0.01
    assert not success
    assert report.kind is ValidationFailure.COLLISION
    assert valid_part.time_range == pytest.approx((0.0, 0.45))
