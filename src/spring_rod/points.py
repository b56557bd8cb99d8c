"""Point store for the mass-spring rod.

Points are kept as parallel numpy arrays (structure of arrays) so the
integrator can work on whole columns at once. A point is identified by its
row index, assigned at construction and never reused or reordered.
`MassPoint` is the per-point construction and snapshot view.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Iterable, Sequence

import numpy as np

from .errors import ConstructionError, PointIndexError


class Boundary(enum.IntEnum):
    """Boundary condition of a point."""

    FREE = 0
    FIXED = 1
    DRIVEN = 2


@dataclass(slots=True)
class MassPoint:
    """One point mass of the chain."""

    position: tuple[float, float, float]
    mass: float
    velocity: tuple[float, float, float] = (0.0, 0.0, 0.0)
    boundary: Boundary = Boundary.FREE


@dataclass(slots=True)
class PointStore:
    """Ordered, fixed-size collection of mass points."""

    positions: np.ndarray
    velocities: np.ndarray
    masses: np.ndarray
    boundaries: np.ndarray
    external_forces: np.ndarray = field(init=False)

    def __post_init__(self) -> None:
        n = len(self.masses)
        if self.positions.shape != (n, 3) or self.velocities.shape != (n, 3):
            raise ConstructionError("positions and velocities must have shape (N, 3)")
        if self.boundaries.shape != (n,):
            raise ConstructionError("boundaries must have shape (N,)")
        if not np.all(np.isfinite(self.masses)) or np.any(self.masses <= 0.0):
            raise ConstructionError("every point mass must be > 0")
        if not (np.all(np.isfinite(self.positions)) and np.all(np.isfinite(self.velocities))):
            raise ConstructionError("point positions and velocities must be finite")
        self.external_forces = np.zeros((n, 3), dtype=np.float64)

    @classmethod
    def from_points(cls, points: Iterable[MassPoint]) -> PointStore:
        """Pack a sequence of `MassPoint` records into a store."""
        points = list(points)
        if not points:
            raise ConstructionError("a point store needs at least one point")
        return cls(
            positions=np.array([p.position for p in points], dtype=np.float64).reshape(-1, 3),
            velocities=np.array([p.velocity for p in points], dtype=np.float64).reshape(-1, 3),
            masses=np.array([p.mass for p in points], dtype=np.float64),
            boundaries=np.array([Boundary(p.boundary) for p in points], dtype=np.int8),
        )

    def __len__(self) -> int:
        return len(self.masses)

    def check_index(self, index: int) -> int:
        """Return `index` as an int, raising `PointIndexError` if it is out of range."""
        n = len(self)
        try:
            i = int(index)
        except (TypeError, ValueError):
            raise PointIndexError(index, n) from None
        if i != index or not 0 <= i < n:
            raise PointIndexError(index, n)
        return i

    def point(self, index: int) -> MassPoint:
        """Return a snapshot of one point."""
        i = self.check_index(index)
        return MassPoint(
            position=_as_tuple(self.positions[i]),
            mass=float(self.masses[i]),
            velocity=_as_tuple(self.velocities[i]),
            boundary=Boundary(int(self.boundaries[i])),
        )

    def free_mask(self) -> np.ndarray:
        """Boolean mask of points whose constructed boundary is `FREE`."""
        return self.boundaries == Boundary.FREE


def as_vector(value: Sequence[float], name: str = "vector") -> np.ndarray:
    """Convert a 3-sequence to a finite float64 array, raising `ValueError` otherwise."""
    v = np.asarray(value, dtype=np.float64)
    if v.shape != (3,):
        raise ValueError(f"{name} must have exactly 3 components, got shape {v.shape}")
    if not np.all(np.isfinite(v)):
        raise ValueError(f"{name} must be finite")
    return v


def _as_tuple(v: np.ndarray) -> tuple[float, float, float]:
    return (float(v[0]), float(v[1]), float(v[2]))
