"""Continuous path validation: the collision-level validator wrapped by the graph-aware one."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

import numpy as np

from .path import Path

logger = logging.getLogger(__name__)

Array = np.ndarray
ConfigValidation = Callable[[Array], bool]


@dataclass
class PathValidationReport:
    """Describes why a path is not valid at parameter ``parameter``."""

    parameter: float
    configuration: Optional[Array] = None
    message: str = ""

    def __str__(self) -> str:
        return f"invalid at t={self.parameter:.4g}: {self.message}"


ValidationResult = Tuple[bool, Path, Optional[PathValidationReport]]


class PathValidation(ABC):
    """Interface of path validators.

    ``validate`` returns (success, valid part, report). When ``reverse`` is false
    the valid part is a prefix of ``path``; otherwise it is a suffix.
    """

    @abstractmethod
    def validate(self, path: Path, reverse: bool = False) -> ValidationResult:
        raise NotImplementedError


class DiscretizedPathValidation(PathValidation):
    """Checks configurations sampled every ``step`` along the path.

    ``config_validation`` is the collision checker of the problem: it returns
    whether a single configuration is valid.
    """

    def __init__(self, config_validation: ConfigValidation, step: float = 0.01) -> None:
        if step <= 0:
            raise ValueError(f"Discretization step must be positive, got {step}")
        self.config_validation = config_validation
        self.step = step

    def _samples(self, path: Path, reverse: bool) -> List[float]:
        t0, t1 = path.time_range
        count = int(np.ceil((t1 - t0) / self.step)) if t1 > t0 else 0
        samples = [min(t0 + i * self.step, t1) for i in range(count)] + [t1]
        return samples[::-1] if reverse else samples

    def validate(self, path: Path, reverse: bool = False) -> ValidationResult:
        t0, t1 = path.time_range
        last_valid: Optional[float] = None
        for t in self._samples(path, reverse):
            q, success = path(t)
            if not success:
                report = PathValidationReport(t, q, "configuration could not be projected")
            elif not self.config_validation(q):
                report = PathValidationReport(t, q, "configuration in collision")
            else:
                last_valid = t
                continue
            logger.debug("Path %r %s", path, report)
            if reverse:
                start = t1 if last_valid is None else last_valid
                return False, path.extract(start, t1), report
            stop = t0 if last_valid is None else last_valid
            return False, path.extract(t0, stop), report
        return True, path, None


__all__ = [
    "DiscretizedPathValidation",
    "PathValidation",
    "PathValidationReport",
    "ValidationResult",
]
