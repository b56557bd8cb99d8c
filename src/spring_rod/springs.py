"""Spring store for the mass-spring rod.

Springs reference points by index into the point store and never own them.
Several springs may share a point.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

import numpy as np

from .errors import ConstructionError


@dataclass(slots=True, frozen=True)
class Spring:
    """A damped elastic connector between two points."""

    point_a: int
    point_b: int
    rest_length: float
    stiffness: float
    damping: float


@dataclass(slots=True)
class SpringStore:
    """Ordered, fixed-size collection of springs as parallel arrays."""

    index_a: np.ndarray
    index_b: np.ndarray
    rest_lengths: np.ndarray
    stiffness: np.ndarray
    damping: np.ndarray

    @classmethod
    def from_springs(cls, springs: Iterable[Spring], point_count: int) -> SpringStore:
        """Validate springs against `point_count` and pack them into a store."""
        springs = list(springs)
        for i, s in enumerate(springs):
            if not (0 <= s.point_a < point_count and 0 <= s.point_b < point_count):
                raise ConstructionError(
                    f"spring {i} references a point outside 0..{point_count - 1}"
                )
            if s.point_a == s.point_b:
                raise ConstructionError(f"spring {i} connects point {s.point_a} to itself")
            if not s.rest_length >= 0.0:
                raise ConstructionError(f"spring {i} has negative rest length {s.rest_length}")
            if not s.stiffness >= 0.0:
                raise ConstructionError(f"spring {i} has negative stiffness {s.stiffness}")
            if not s.damping >= 0.0:
                raise ConstructionError(f"spring {i} has negative damping {s.damping}")

        return cls(
            index_a=np.array([s.point_a for s in springs], dtype=np.intp),
            index_b=np.array([s.point_b for s in springs], dtype=np.intp),
            rest_lengths=np.array([s.rest_length for s in springs], dtype=np.float64),
            stiffness=np.array([s.stiffness for s in springs], dtype=np.float64),
            damping=np.array([s.damping for s in springs], dtype=np.float64),
        )

    def __len__(self) -> int:
        return len(self.index_a)

    def spring(self, index: int) -> Spring:
        """Return a snapshot of one spring."""
        return Spring(
            point_a=int(self.index_a[index]),
            point_b=int(self.index_b[index]),
            rest_length=float(self.rest_lengths[index]),
            stiffness=float(self.stiffness[index]),
            damping=float(self.damping[index]),
        )

    def lengths(self, positions: np.ndarray) -> np.ndarray:
        """Return the current length of every spring for the given positions."""
        return np.linalg.norm(positions[self.index_b] - positions[self.index_a], axis=1)
