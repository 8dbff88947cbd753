"""Planning modules for regrasp."""

from .constraints import ConfigProjector, ConstraintSet, NumericalConstraint
from .errors import ProjectionError, StateClassificationError
from .graph import Edge, Graph, GraphParameters, State, StateSelector
from .graph_path_validation import GraphPathValidation, GraphValidationReport, ValidationFailure
from .paths import DiscretizedPathValidation, Path, PathValidation, PathValidationReport, PathVector, StraightPath

__all__ = [
    "ConfigProjector",
    "ConstraintSet",
    "DiscretizedPathValidation",
    "Edge",
    "Graph",
    "GraphParameters",
    "GraphPathValidation",
    "GraphValidationReport",
    "NumericalConstraint",
    "Path",
    "PathValidation",
    "PathValidationReport",
    "PathVector",
    "ProjectionError",
    "State",
    "StateClassificationError",
    "StateSelector",
    "StraightPath",
    "ValidationFailure",
]
