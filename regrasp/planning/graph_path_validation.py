"""Path validation that keeps validated sub-paths consistent with the constraint graph.

The continuous validator truncates a path at the first collision. The
truncated part is then checked against the constraint graph: the states of its
end points are compared with those of the original path. The recursion over
path vectors is as deep as their nesting, one level for a path made of
segments.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional

import numpy as np

from regrasp.planning.constraints.projector import ConstraintSet
from regrasp.planning.errors import ProjectionError
from regrasp.planning.paths.path import Path, PathVector
from regrasp.planning.paths.validation import PathValidation, PathValidationReport, ValidationResult

if TYPE_CHECKING:
    from regrasp.planning.graph.graph import Graph
    from regrasp.planning.graph.state import State

logger = logging.getLogger(__name__)


class ValidationFailure(Enum):
    """Why graph-aware validation rejected a path."""

    COLLISION = "collision"
    GRAPH_INCONSISTENT = "graph_inconsistent"
    PROJECTION = "projection"


@dataclass
class GraphValidationReport(PathValidationReport):
    """Report of the continuous validator enriched with the graph check outcome."""

    kind: ValidationFailure = ValidationFailure.COLLISION
    cause: Optional[PathValidationReport] = None

    def __str__(self) -> str:
        return f"{self.kind.value} at t={self.parameter:.4g}: {self.message}"


def _format(values: np.ndarray) -> str:
    return np.array2string(np.asarray(values), precision=4, separator=", ")


class GraphPathValidation(PathValidation):
    """Wraps a continuous path validator and checks its output against the constraint graph.

    ``constraint_graph`` must be set before ``validate`` is called. Validation
    only reads the graph and the wrapped validator; a single planning thread
    is expected to use them.
    """

    def __init__(self, path_validation: PathValidation) -> None:
        self._path_validation = path_validation
        self._constraint_graph: Optional["Graph"] = None

    @classmethod
    def create(cls, path_validation: PathValidation) -> "GraphPathValidation":
        return cls(path_validation)

    @property
    def path_validation(self) -> PathValidation:
        return self._path_validation

    @property
    def constraint_graph(self) -> Optional["Graph"]:
        return self._constraint_graph

    @constraint_graph.setter
    def constraint_graph(self, graph: "Graph") -> None:
        self._constraint_graph = graph

    def validate(self, path: Path, reverse: bool = False) -> ValidationResult:
        """Returns (success, valid part, report).

        On failure the valid part is the longest prefix accepted by the
        continuous validator; a zero-length path at the start of ``path`` when an
        end point could not be projected onto the graph.
        """
        if path is None:
            raise ValueError("Cannot validate a null path")
        if self._constraint_graph is None:
            raise RuntimeError("The constraint graph must be set before validating paths")
        if isinstance(path, PathVector):
            return self._validate_path_vector(path, reverse)
        return self._validate_path(path, reverse)

    def _validate_path_vector(self, path: PathVector, reverse: bool) -> ValidationResult:
        if reverse:
            raise NotImplementedError("Reverse validation of path vectors is not supported")
        for rank in range(path.number_paths):
            success, valid_sub_part, report = self.validate(path.path_at_rank(rank), False)
            # Stop at the first invalid sub-path.
            if not success:
                valid_part = PathVector(path.output_size)
                for previous in range(rank):
                    valid_part.append_path(path.path_at_rank(previous).copy())
                valid_part.append_path(valid_sub_part)
                return False, valid_part, report
        return True, path, None

    def _select_validation(self, path: Path) -> PathValidation:
        constraints = path.constraints
        edge = constraints.edge if isinstance(constraints, ConstraintSet) else None
        if edge is not None and edge.path_validation is not None:
            logger.debug("Using path validation of edge %s", edge.name)
            return edge.path_validation
        logger.debug("Using default path validation")
        return self._path_validation

    def _state_at(self, path: Path, t: float, description: str) -> "State":
        q, success = path(t)
        if not success:
            residual = path.constraints.residual(q) if path.constraints is not None else np.zeros(0)
            raise ProjectionError(
                f"{description} failed to be projected. After maximal number of iterations, "
                f"q={_format(q)}; error={_format(residual)}."
            )
        return self._constraint_graph.get_state(q)

    def _projection_failure_message(self, path: Path, exc: ProjectionError) -> str:
        edge = path.constraints.edge if isinstance(path.constraints, ConstraintSet) else None
        if edge is None:
            return f"Path without graph edge generated an error: {exc}"
        return (
            f"Edge {edge.name} generated an error: {exc} Likely, the constraints for paths are "
            f"relaxed. If this problem occurs often, you may want to use the same constraints "
            f"for state and paths in {edge.state.name}."
        )

    def _validate_path(self, path: Path, reverse: bool) -> ValidationResult:
        success, path_no_collision, report = self._select_validation(path).validate(path, reverse)
        if success:
            return True, path, None

        new_range = path_no_collision.time_range
        old_range = path.time_range
        parameter = report.parameter if report is not None else new_range[1]
        try:
            orig_state = self._state_at(path_no_collision, new_range[0], "Initial configuration of the valid part")
            dest_state = self._state_at(path_no_collision, new_range[1], "End configuration of the valid part")
            old_orig_state = self._state_at(path, old_range[0], "Initial configuration of the path to be validated")
            old_dest_state = self._state_at(path, old_range[1], "End configuration of the path to be validated")
        except ProjectionError as exc:
            message = self._projection_failure_message(path, exc)
            logger.error("%s", message)
            return (
                False,
                path.extract(old_range[0], old_range[0]),
                GraphValidationReport(
                    parameter=old_range[0],
                    message=message,
                    kind=ValidationFailure.PROJECTION,
                    cause=report,
                ),
            )

        if orig_state is old_orig_state and dest_state is old_dest_state:
            return (
                False,
                path_no_collision,
                GraphValidationReport(
                    parameter=parameter,
                    configuration=report.configuration if report is not None else None,
                    message=report.message if report is not None else "collision",
                    kind=ValidationFailure.COLLISION,
                    cause=report,
                ),
            )

        # The valid part does not follow the same graph transition as the
        # original path. It is returned as is; rebuilding a consistent path is
        # left to the planner.
        message = (
            f"valid part goes from {orig_state.name} to {dest_state.name} "
            f"instead of {old_orig_state.name} to {old_dest_state.name}"
        )
        logger.info("Truncated path is not consistent with the constraint graph: %s", message)
        return (
            False,
            path_no_collision,
            GraphValidationReport(
                parameter=parameter,
                configuration=report.configuration if report is not None else None,
                message=message,
                kind=ValidationFailure.GRAPH_INCONSISTENT,
                cause=report,
            ),
        )


__all__ = ["GraphPathValidation", "GraphValidationReport", "ValidationFailure"]
