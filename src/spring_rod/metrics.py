"""Simple metrics for rod simulations."""

from __future__ import annotations

import numpy as np


def tip_position(rod) -> tuple[float, float, float]:
    """Return the tip point position as a tuple."""
    return rod.positions()[-1]


def max_sag(rod, reference_y: float) -> float:
    """Return the maximum downward sag from `reference_y` across all rod points."""
    max_drop = 0.0
    for _, y, _ in rod.positions():
        max_drop = max(max_drop, reference_y - y)
    return max_drop


def max_speed(rod) -> float:
    """Return the largest point speed in the rod."""
    v = rod.system.points.velocities
    if len(v) == 0:
        return 0.0
    return float(np.max(np.linalg.norm(v, axis=1)))


def max_segment_strain(rod) -> float:
    """Return the largest relative stretch or compression over all springs.

    Strain is `|length - rest| / rest` per spring. Zero-rest springs are
    ignored.
    """
    springs = rod.system.springs
    if len(springs) == 0:
        return 0.0
    lengths = springs.lengths(rod.system.points.positions)
    rest = springs.rest_lengths
    ok = rest > 0.0
    if not np.any(ok):
        return 0.0
    return float(np.max(np.abs(lengths[ok] - rest[ok]) / rest[ok]))


def kinetic_energy(rod) -> float:
    """Return the total kinetic energy of the rod in joules."""
    return rod.system.kinetic_energy()
