import numpy as np
import pytest

from regrasp.kinematics import Robot
from regrasp.planning.constraints import ConfigProjector, ConstraintSet, FunctionFromCallable, NumericalConstraint
from regrasp.planning.paths import DiscretizedPathValidation, PathVector, StraightPath


def test_straight_path_interpolates_in_absolute_time() -> None:
    path = StraightPath([0.0, 0.0], [2.0, 0.0], (1.0, 3.0))

    q, success = path(2.0)

    assert success
    np.testing.assert_allclose(q, [1.0, 0.0])
    assert path.length == 2.0
    with pytest.raises(ValueError):
        path(3.5)


def test_default_time_range_is_distance() -> None:
    path = StraightPath([0.0, 0.0], [3.0, 4.0])

    assert path.time_range == (0.0, 5.0)


def test_extract_keeps_time_parameterization() -> None:
    path = StraightPath([0.0, 0.0], [2.0, 0.0], (1.0, 3.0))

    sub = path.extract(1.5, 2.5)
    empty = path.extract(1.0, 1.0)

    assert sub.time_range == (1.5, 2.5)
    np.testing.assert_allclose(sub.initial(), [0.5, 0.0])
    np.testing.assert_allclose(sub.end(), [1.5, 0.0])
    np.testing.assert_allclose(sub(2.0)[0], path(2.0)[0])
    assert empty.length == 0.0
    np.testing.assert_allclose(empty(1.0)[0], [0.0, 0.0])
    with pytest.raises(ValueError):
        path.extract(2.5, 1.5)


def test_projection_failure_is_a_flag() -> None:
    robot = Robot("planar_point", 2)
    never = NumericalConstraint(FunctionFromCallable("never", 2, 1, lambda q: [1.0]))
    constraints = ConstraintSet("never", ConfigProjector(robot, "never", [never], 2, 1e-6))
    path = StraightPath([0.0, 0.0], [1.0, 0.0], constraints=constraints)

    _, success = path(0.5)

    assert not success


def test_path_vector_concatenates_sub_paths() -> None:
    first = StraightPath([0.0, 0.0], [1.0, 0.0], (0.0, 1.0))
    second = StraightPath([1.0, 0.0], [1.0, 2.0], (5.0, 7.0))
    vector = PathVector.from_paths([first, second])

    assert vector.time_range == (0.0, 3.0)
    assert vector.number_paths == 2
    np.testing.assert_allclose(vector(0.5)[0], [0.5, 0.0])
    np.testing.assert_allclose(vector(2.0)[0], [1.0, 1.0])
    np.testing.assert_allclose(vector.end(), [1.0, 2.0])
    assert list(vector) == [first, second]


def test_path_vector_extract_spans_sub_paths() -> None:
    first = StraightPath([0.0, 0.0], [1.0, 0.0], (0.0, 1.0))
    second = StraightPath([1.0, 0.0], [1.0, 2.0], (5.0, 7.0))
    vector = PathVector.from_paths([first, second])

    sub = vector.extract(0.5, 2.0)

    assert sub.number_paths == 2
    assert sub.length == pytest.approx(1.5)
    assert sub.path_at_rank(1).time_range == (5.0, 6.0)
    np.testing.assert_allclose(sub.initial(), [0.5, 0.0])
    np.testing.assert_allclose(sub.end(), [1.0, 1.0])


def test_path_vector_rejects_size_mismatch() -> None:
    vector = PathVector(2)

    with pytest.raises(ValueError):
        vector.append_path(StraightPath([0.0], [1.0]))


def test_discretized_validation_returns_prefix() -> None:
    path = StraightPath([0.0], [1.0])
    validation = DiscretizedPathValidation(lambda q: q[0] < 0.305, step=0.1)

    success, valid_part, report = validation.validate(path)

    assert not success
    assert valid_part.time_range == pytest.approx((0.0, 0.3))
    assert report.parameter == pytest.approx(0.4)
    assert "collision" in report.message


def test_discretized_validation_reverse_returns_suffix() -> None:
    path = StraightPath([0.0], [1.0])
    validation = DiscretizedPathValidation(lambda q: q[0] > 0.705, step=0.1)

    success, valid_part, report = validation.validate(path, reverse=True)

    assert not success
    assert valid_part.time_range == pytest.approx((0.8, 1.0))
    assert report.parameter == pytest.approx(0.7)


def test_discretized_validation_accepts_valid_path() -> None:
    path = StraightPath([0.0], [1.0])

    success, valid_part, report = DiscretizedPathValidation(lambda q: True, 0.1).validate(path)

    assert success
    assert valid_part is path
    assert report is None


def test_discretized_validation_rejects_bad_step() -> None:
    with pytest.raises(ValueError):
        DiscretizedPathValidation(lambda q: True, 0.0)
