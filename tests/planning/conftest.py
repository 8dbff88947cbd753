"""Gripper + box scenario shared by the planning tests.

Configuration: q[0:3] gripper position, q[3:6] box position. The box handle
sits 0.1 above the box origin. States, in classification order:
``grasped`` (gripper on the handle) then ``placement`` (box on the table).
"""

from dataclasses import dataclass
from typing import Callable

import numpy as np
import pytest

from regrasp.kinematics import Gripper, Joint, Robot, Transform
from regrasp.manipulation import Handle
from regrasp.planning.constraints import ConfigurationComponent, FunctionFromCallable, NumericalConstraint
from regrasp.planning.graph import Edge, Graph, GraphParameters, State


@dataclass
class Scenario:
    robot: Robot
    graph: Graph
    grasped: State
    placement: State
    transit: Edge
    grasp: Edge
    transfer: Edge
    release: Edge
    grasp_constraint: NumericalConstraint
    placement_constraint: NumericalConstraint
    box_lock: NumericalConstraint


def make_robot() -> Robot:
    robot = Robot("gripper_and_box", 6)
    robot.add_joint(Joint.translation("gripper_joint", 0))
    robot.add_joint(Joint.translation("box_joint", 3))
    return robot


def make_scenario(placement_for_path: bool = True) -> Scenario:
    robot = make_robot()
    gripper = Gripper("gripper", robot.joint("gripper_joint"))
    handle = Handle("box/handle", Transform.from_translation([0.0, 0.0, 0.1]), robot.joint("box_joint"))

    grasp_constraint = NumericalConstraint(handle.create_grasp(gripper))
    placement_constraint = NumericalConstraint(
        FunctionFromCallable("box_on_table", 6, 1, lambda q: [q[5]])
    )
    box_lock = NumericalConstraint(ConfigurationComponent("box_lock", 6, [3, 4, 5]), parametric=True)

    graph = Graph.create(robot, "pick_and_place", GraphParameters(max_iterations=20, error_threshold=1e-6))
    selector = graph.create_state_selector("gripper")
    grasped = selector.create_state("grasped")
    grasped.add_numerical_constraint(grasp_constraint)
    placement = selector.create_state("placement")
    placement.add_numerical_constraint(placement_constraint, for_path=placement_for_path)

    transit = placement.create_edge(placement, "transit")
    transit.add_numerical_constraint(box_lock)
    grasp = placement.create_edge(grasped, "grasp")
    grasp.add_numerical_constraint(box_lock)
    transfer = grasped.create_edge(grasped, "transfer")
    release = grasped.create_edge(placement, "release", in_source_state=False)
    release.add_numerical_constraint(box_lock)

    return Scenario(
        robot=robot,
        graph=graph,
        grasped=grasped,
        placement=placement,
        transit=transit,
        grasp=grasp,
        transfer=transfer,
        release=release,
        grasp_constraint=grasp_constraint,
        placement_constraint=placement_constraint,
        box_lock=box_lock,
    )


def wall(lower: float, upper: float) -> Callable[[np.ndarray], bool]:
    """Configuration validity: the gripper must stay out of lower < x < upper."""

    def is_valid(q: np.ndarray) -> bool:
        return not (lower < q[0] < upper)

    return is_valid


@pytest.fixture
def scenario() -> Scenario:
    return make_scenario()


@pytest.fixture
def relaxed_scenario() -> Scenario:
    """Placement is not enforced along paths of the placement state."""
    return make_scenario(placement_for_path=False)


@pytest.fixture
def make_wall() -> Callable[[float, float], Callable[[np.ndarray], bool]]:
    return wall


@pytest.fixture
def scenario_factory() -> Callable[..., Scenario]:
    return make_scenario
