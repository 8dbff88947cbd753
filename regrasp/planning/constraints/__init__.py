"""Numerical constraints, projectors and the differentiable functions they are made of."""

from .functions import (
    FULL_MASK,
    ConfigurationComponent,
    DifferentiableFunction,
    FunctionFromCallable,
    RelativeTransformation,
)
from .projector import ConfigProjector, ConstraintSet, NumericalConstraint

__all__ = [
    "ConfigProjector",
    "ConfigurationComponent",
    "ConstraintSet",
    "DifferentiableFunction",
    "FULL_MASK",
    "FunctionFromCallable",
    "NumericalConstraint",
    "RelativeTransformation",
]
