"""Paths in configuration space and their continuous validation."""

from .path import Path, PathVector, StraightPath
from .validation import (
    DiscretizedPathValidation,
    PathValidation,
    PathValidationReport,
    ValidationResult,
)

__all__ = [
    "DiscretizedPathValidation",
    "Path",
    "PathValidation",
    "PathValidationReport",
    "PathVector",
    "StraightPath",
    "ValidationResult",
]
