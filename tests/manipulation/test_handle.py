import math

import numpy as np
import pytest

from regrasp.kinematics import Gripper, Joint, Robot, Transform
from regrasp.manipulation import Handle

QUARTER_TURN = Transform.from_rotvec([0.0, 0.0, math.pi / 2])


def _setup():
    robot = Robot("gripper_and_box", 6)
    gripper_joint = robot.add_joint(Joint.translation("gripper_joint", 0))
    box_joint = robot.add_joint(Joint.translation("box_joint", 3))
    gripper = Gripper("gripper", gripper_joint, QUARTER_TURN)
    handle_position = Transform.from_rotvec([0.0, 0.0, math.pi / 2], [0.0, 0.0, 0.1])
    handle = Handle.create("box/handle", handle_position, box_joint)
    return robot, gripper, handle


def test_grasp_is_zero_when_frames_coincide() -> None:
    _, gripper, handle = _setup()
    grasp = handle.create_grasp(gripper)
    q = np.array([1.0, 2.0, 0.6, 1.0, 2.0, 0.5])

    assert grasp.output_size == 6
    assert grasp.name == "gripper_grasps_box/handle"
    np.testing.assert_allclose(grasp(q), np.zeros(6), atol=1e-12)
    q[1] += 0.2
    assert np.linalg.norm(grasp(q)) == pytest.approx(0.2)


def test_pre_grasp_leaves_approach_axis_free() -> None:
    _, gripper, handle = _setup()
    pre_grasp = handle.create_pre_grasp(gripper)
    grasp = handle.create_grasp(gripper)
    # The handle x axis points along world y: back off 5 cm along it.
    q = np.array([1.0, 1.95, 0.6, 1.0, 2.0, 0.5])

    assert pre_grasp.output_size == 5
    np.testing.assert_allclose(pre_grasp(q), np.zeros(5), atol=1e-12)
    np.testing.assert_allclose(grasp(q)[:3], [0.05, 0.0, 0.0], atol=1e-12)


def test_pre_grasp_complement_targets_shift() -> None:
    _, gripper, handle = _setup()
    complement = handle.create_pre_grasp_complement(gripper, 0.05)
    q = np.array([1.0, 1.95, 0.6, 1.0, 2.0, 0.5])

    assert complement.output_size == 1
    np.testing.assert_allclose(complement(q), [0.0], atol=1e-12)
    q[1] = 2.0
    np.testing.assert_allclose(complement(q), [-0.05], atol=1e-12)


def test_constraint_jacobian_matches_geometry() -> None:
    _, gripper, handle = _setup()
    grasp = handle.create_grasp(gripper)

    jac = grasp.jacobian(np.array([1.0, 2.0, 0.6, 1.0, 2.0, 0.5]))

    # Translation error is expressed in the rotated gripper frame.
    rotation_t = QUARTER_TURN.rotation.T
    np.testing.assert_allclose(jac[:3, :3], -rotation_t, atol=1e-6)
    np.testing.assert_allclose(jac[:3, 3:], rotation_t, atol=1e-6)
    np.testing.assert_allclose(jac[3:], np.zeros((3, 6)), atol=1e-6)


def test_factories_do_not_mutate_handle() -> None:
    _, gripper, handle = _setup()
    before = handle.local_position

    handle.create_grasp(gripper)
    handle.create_pre_grasp_complement(gripper, 0.1)

    assert handle.local_position is before
    with pytest.raises(AttributeError):
        handle.local_position = Transform.identity()


def test_clone_and_rebinding() -> None:
    robot, gripper, handle = _setup()
    other_joint = robot.add_joint(Joint.fixed("table"))

    clone = handle.clone()
    clone.name = "box/other_handle"
    clone.joint = other_joint

    assert handle.name == "box/handle"
    assert handle.joint.name == "box_joint"
    assert clone.local_position is handle.local_position
    assert "box/other_handle" in str(clone)
    assert clone.create_grasp(gripper).joint2 is other_joint


def test_gripper_joint_must_belong_to_robot() -> None:
    _, _, handle = _setup()
    loose = Gripper("loose", Joint.translation("loose_joint", 0))

    with pytest.raises(RuntimeError):
        handle.create_grasp(loose)
