"""Exception types raised by the rod simulation core."""

from __future__ import annotations


class SpringRodError(Exception):
    """Base class for all errors raised by `spring_rod`."""


class ConstructionError(SpringRodError, ValueError):
    """The rod or one of its stores cannot be built from the given parameters."""


class PointIndexError(SpringRodError, IndexError):
    """A point index passed to a boundary or force call is out of range."""

    def __init__(self, index: int, point_count: int) -> None:
        super().__init__(f"point index {index} out of range for {point_count} points")
        self.index = index
        self.point_count = point_count
