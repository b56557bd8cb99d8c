"""Per-frame boundary control for grip points.

A grip is a point whose position is dictated from outside every frame. The
controller records a target for each point the caller drives, applies it to
the point store immediately, and hands the integrator a mask of driven points
for exactly one `advance` call. Targets are then released, so a skipped
frame never leaves a point pinned by a stale flag. Points built as `DRIVEN`
are excluded from integration every frame regardless.
"""

from __future__ import annotations

import logging

import numpy as np

from .points import Boundary, PointStore, as_vector

logger = logging.getLogger(__name__)


class BoundaryController:
    """Owns the authoritative position of driven points between steps."""

    def __init__(self, points: PointStore) -> None:
        self._points = points
        self._targets: dict[int, np.ndarray] = {}

    def set_driven(self, index: int, position) -> None:
        """Move point `index` to `position`, zero its velocity and drive it next step.

        Raises:
            PointIndexError: `index` is out of range. Nothing is changed.
            ValueError: `position` is not a finite 3-vector. Nothing is changed.
        """
        i = self._points.check_index(index)
        p = as_vector(position, "position")
        self._points.positions[i] = p
        self._points.velocities[i] = 0.0
        self._targets[i] = p

    def release(self, index: int) -> None:
        """Drop the pending target of point `index`, if any.

        The point keeps its overwritten position and is integrated again on the
        next step unless it was built as fixed or driven.
        """
        i = self._points.check_index(index)
        self._targets.pop(i, None)

    def driven_indices(self) -> list[int]:
        """Indices with a target pending for the next step, in ascending order."""
        return sorted(self._targets)

    def boundary_of(self, index: int) -> Boundary:
        """Effective boundary of point `index` for the next step."""
        i = self._points.check_index(index)
        if i in self._targets:
            return Boundary.DRIVEN
        return Boundary(int(self._points.boundaries[i]))

    def begin_step(self) -> np.ndarray:
        """Pin every target in place and return the driven mask for the coming step."""
        mask = np.zeros(len(self._points), dtype=bool)
        for i, p in self._targets.items():
            self._points.positions[i] = p
            self._points.velocities[i] = 0.0
            mask[i] = True
        return mask

    def end_step(self) -> None:
        """Release every target after a completed step."""
        if self._targets:
            logger.debug("releasing %d driven target(s)", len(self._targets))
        self._targets.clear()
