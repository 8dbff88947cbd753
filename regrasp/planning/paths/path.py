"""Continuous paths in configuration space: straight segments and path vectors."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterator, List, Optional, Tuple

import numpy as np

from regrasp.planning.constraints.projector import ConstraintSet

Array = np.ndarray
TimeRange = Tuple[float, float]


class Path(ABC):
    """Base class of paths q(t) for t in ``time_range``.

    When ``constraints`` is set, evaluation projects the interpolated
    configuration; failure to project is reported by the returned flag.
    """

    def __init__(self, time_range: TimeRange, output_size: int, constraints: Optional[ConstraintSet] = None) -> None:
        t0, t1 = float(time_range[0]), float(time_range[1])
        if t1 < t0:
            raise ValueError(f"Invalid time range ({t0}, {t1})")
        self._time_range: TimeRange = (t0, t1)
        self.output_size = output_size
        self.constraints = constraints

    @property
    def time_range(self) -> TimeRange:
        return self._time_range

    @property
    def length(self) -> float:
        return self._time_range[1] - self._time_range[0]

    def __call__(self, t: float) -> Tuple[Array, bool]:
        """Evaluates the path; returns (configuration, success)."""
        q = self._compute(self._check_time(t))
        if self.constraints is None:
            return q, True
        success, q = self.constraints.apply(q)
        return q, success

    def initial(self) -> Array:
        return self._compute(self._time_range[0])

    def end(self) -> Array:
        return self._compute(self._time_range[1])

    def _check_time(self, t: float) -> float:
        t0, t1 = self._time_range
        eps = 1e-12 * max(1.0, abs(t0), abs(t1))
        if t < t0 - eps or t > t1 + eps:
            raise ValueError(f"Parameter {t} is outside of time range ({t0}, {t1})")
        return min(max(t, t0), t1)

    @abstractmethod
    def _compute(self, t: float) -> Array:
        """Configuration at ``t`` before projection."""

    @abstractmethod
    def extract(self, t0: float, t1: float) -> "Path":
        """Sub-path restricted to [t0, t1]."""

    @abstractmethod
    def copy(self) -> "Path":
        ...


class StraightPath(Path):
    """Linear interpolation between two configurations, keeping absolute time."""

    def __init__(
        self,
        start: Array,
        end: Array,
        time_range: Optional[TimeRange] = None,
        constraints: Optional[ConstraintSet] = None,
    ) -> None:
        start = np.asarray(start, dtype=float)
        end = np.asarray(end, dtype=float)
        if start.shape != end.shape or start.ndim != 1:
            raise ValueError("Start and end configurations must be vectors of the same size")
        if time_range is None:
            time_range = (0.0, float(np.linalg.norm(end - start)))
        super().__init__(time_range, start.shape[0], constraints)
        self._start = start.copy()
        self._end = end.copy()

    def _compute(self, t: float) -> Array:
        t0, t1 = self.time_range
        if t1 == t0:
            return self._start.copy()
        alpha = (t - t0) / (t1 - t0)
        return self._start + alpha * (self._end - self._start)

    def extract(self, t0: float, t1: float) -> "StraightPath":
        if t1 < t0:
            raise ValueError(f"Cannot extract reversed interval ({t0}, {t1})")
        t0 = self._check_time(t0)
        t1 = self._check_time(t1)
        return StraightPath(self._compute(t0), self._compute(t1), (t0, t1), self.constraints)

    def copy(self) -> "StraightPath":
        return StraightPath(self._start, self._end, self.time_range, self.constraints)

    def __repr__(self) -> str:
        t0, t1 = self.time_range
        return f"StraightPath([{t0:.4g}, {t1:.4g}])"


class PathVector(Path):
    """Concatenation of paths. Its time range starts at 0 and spans the sum of the sub-path lengths."""

    def __init__(self, output_size: int) -> None:
        super().__init__((0.0, 0.0), output_size, None)
        self._paths: List[Path] = []

    @classmethod
    def from_paths(cls, paths: List[Path]) -> "PathVector":
        if not paths:
            raise ValueError("A path vector needs at least one path to infer its output size")
        vector = cls(paths[0].output_size)
        for path in paths:
            vector.append_path(path)
        return vector

    def append_path(self, path: Path) -> None:
        if path.output_size != self.output_size:
            raise ValueError(f"Cannot append a path of size {path.output_size} to a vector of size {self.output_size}")
        self._paths.append(path)
        self._time_range = (0.0, self._time_range[1] + path.length)

    @property
    def number_paths(self) -> int:
        return len(self._paths)

    def path_at_rank(self, rank: int) -> Path:
        return self._paths[rank]

    def __iter__(self) -> Iterator[Path]:
        return iter(self._paths)

    def _locate(self, t: float) -> Tuple[int, float]:
        """Maps a vector parameter to (rank, local parameter)."""
        if not self._paths:
            raise ValueError("Cannot evaluate an empty path vector")
        offset = 0.0
        last = len(self._paths) - 1
        for rank, path in enumerate(self._paths):
            if t <= offset + path.length or rank == last:
                break
            offset += path.length
        local = path.time_range[0] + min(max(t - offset, 0.0), path.length)
        return rank, local

    def __call__(self, t: float) -> Tuple[Array, bool]:
        rank, local = self._locate(self._check_time(t))
        return self._paths[rank](local)

    def _compute(self, t: float) -> Array:
        rank, local = self._locate(t)
        return self._paths[rank]._compute(local)

    def extract(self, t0: float, t1: float) -> "PathVector":
        if t1 < t0:
            raise ValueError(f"Cannot extract reversed interval ({t0}, {t1})")
        t0 = self._check_time(t0)
        t1 = self._check_time(t1)
        result = PathVector(self.output_size)
        offset = 0.0
        for path in self._paths:
            start, stop = offset, offset + path.length
            offset = stop
            lo, hi = max(t0, start), min(t1, stop)
            if hi < lo or (hi == lo and (t1 > t0 or result.number_paths > 0)):
                continue
            base = path.time_range[0] - start
            result.append_path(path.extract(lo + base, hi + base))
        return result

    def copy(self) -> "PathVector":
        return PathVector.from_paths([p.copy() for p in self._paths]) if self._paths else PathVector(self.output_size)

    def __repr__(self) -> str:
        return f"PathVector({self.number_paths} paths, length={self.length:.4g})"


__all__ = ["Path", "PathVector", "StraightPath"]
