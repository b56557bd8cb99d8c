"""Sub-stepped semi-implicit Euler integrator for mass-spring chains.

`MassSpringSystem.advance` splits a frame into equal sub-steps. Each sub-step
accumulates spring forces (Hooke's law plus damping along the spring axis),
adds gravity and, on the first sub-step only, the external force
accumulator, then updates velocity before position for every free point.
Velocities are clamped to a hard ceiling after each update.

Points that are fixed, or driven for the current frame, are never touched by
the integrator. Their state belongs to whoever set it.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np

from .points import PointStore, as_vector
from .springs import SpringStore

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Diagnostics:
    """Per-point state captured at the last sub-step of an `advance` call.

    Arrays are copies and have one row per point. `accelerations` is zero for
    points that were not integrated. `clamped` marks points whose velocity hit
    the ceiling on that sub-step.
    """

    time: float
    positions: np.ndarray
    velocities: np.ndarray
    accelerations: np.ndarray
    total_forces: np.ndarray
    clamped: np.ndarray


def compute_spring_forces(
    positions: np.ndarray,
    velocities: np.ndarray,
    springs: SpringStore,
    min_length: float = 1e-4,
) -> tuple[np.ndarray, np.ndarray]:
    """Return `(per_spring, per_point)` spring forces.

    `per_spring[s]` is the force applied to point A of spring `s`; point B
    receives its negation. Springs no longer than `min_length` contribute
    zero for this evaluation.
    """
    per_point = np.zeros_like(positions)
    if len(springs) == 0:
        return np.zeros((0, 3)), per_point

    a = springs.index_a
    b = springs.index_b
    delta = positions[b] - positions[a]
    distance = np.linalg.norm(delta, axis=1)
    active = distance > min_length

    direction = np.zeros_like(delta)
    direction[active] = delta[active] / distance[active, None]

    stretch = np.where(active, distance - springs.rest_lengths, 0.0)
    relative_velocity = velocities[b] - velocities[a]
    axial_speed = np.einsum("ij,ij->i", relative_velocity, direction)

    magnitude = springs.stiffness * stretch + springs.damping * axial_speed
    per_spring = direction * magnitude[:, None]

    np.add.at(per_point, a, per_spring)
    np.add.at(per_point, b, -per_spring)
    return per_spring, per_point


def clamp_velocities(velocities: np.ndarray, max_velocity: float) -> np.ndarray:
    """Rescale rows whose magnitude exceeds `max_velocity`, in place.

    Returns the boolean mask of rows that were rescaled. Direction is kept and
    the new magnitude is exactly `max_velocity`.
    """
    speed = np.linalg.norm(velocities, axis=1)
    over = speed > max_velocity
    if np.any(over):
        velocities[over] *= (max_velocity / speed[over])[:, None]
    return over


def check_step(dt: float, substeps: int) -> int:
    """Validate `advance` arguments and return `substeps` as an int.

    Raises:
        ValueError: `dt` is not finite and > 0, or `substeps` is not an
            integer >= 1.
    """
    if isinstance(dt, bool) or not (math.isfinite(dt) and dt > 0.0):
        raise ValueError(f"dt must be a finite number > 0, got {dt!r}")
    if isinstance(substeps, bool) or int(substeps) != substeps or substeps < 1:
        raise ValueError(f"substeps must be an integer >= 1, got {substeps!r}")
    return int(substeps)


class MassSpringSystem:
    """A point store and spring store advanced together in time."""

    def __init__(
        self,
        points: PointStore,
        springs: SpringStore,
        gravity=(0.0, -9.81, 0.0),
        max_velocity: float = 20.0,
        min_spring_length: float = 1e-4,
    ) -> None:
        n = len(points)
        if springs.index_a.shape != springs.index_b.shape:
            raise ValueError("spring store index arrays differ in length")
        if len(springs) and (
            min(springs.index_a.min(), springs.index_b.min()) < 0
            or max(springs.index_a.max(), springs.index_b.max()) >= n
        ):
            raise ValueError("spring store references points outside the point store")
        if not max_velocity > 0.0:
            raise ValueError("max_velocity must be > 0")
        if not (math.isfinite(min_spring_length) and min_spring_length > 0.0):
            raise ValueError("min_spring_length must be a finite number > 0")

        self.points = points
        self.springs = springs
        self.gravity = as_vector(gravity, "gravity")
        self.max_velocity = float(max_velocity)
        self.min_spring_length = float(min_spring_length)
        self.time = 0.0
        self.step_count = 0

        self._last = Diagnostics(
            time=0.0,
            positions=points.positions.copy(),
            velocities=points.velocities.copy(),
            accelerations=np.zeros((n, 3)),
            total_forces=np.zeros((n, 3)),
            clamped=np.zeros(n, dtype=bool),
        )

    def __len__(self) -> int:
        return len(self.points)

    def apply_force(self, index: int, force) -> None:
        """Add `force` to the external accumulator of point `index`.

        Forces superpose until the next `advance`, which consumes them once.
        """
        i = self.points.check_index(index)
        f = as_vector(force, "force")
        self.points.external_forces[i] += f

    def advance(self, dt: float, substeps: int = 1, driven: np.ndarray | None = None) -> None:
        """Advance the system by `dt` seconds using `substeps` equal sub-steps.

        Args:
            dt: Frame duration in seconds, finite and > 0.
            substeps: Number of sub-steps, an integer >= 1.
            driven: Optional boolean mask of points that are externally driven
                for this call. They are excluded from integration like fixed
                points.
        """
        substeps = check_step(dt, substeps)

        pts = self.points
        integrated = pts.free_mask()
        if driven is not None:
            driven = np.asarray(driven, dtype=bool)
            if driven.shape != integrated.shape:
                raise ValueError(
                    f"driven mask must have shape {integrated.shape}, got {driven.shape}"
                )
            integrated &= ~driven

        masses = pts.masses[integrated, None]
        weight = self.gravity[None, :] * masses
        external = pts.external_forces[integrated].copy()
        sub_dt = dt / substeps

        accelerations = np.zeros_like(pts.positions)
        clamped = np.zeros(len(pts), dtype=bool)
        forces = np.zeros_like(pts.positions)
        for k in range(substeps):
            _, forces = compute_spring_forces(
                pts.positions, pts.velocities, self.springs, self.min_spring_length
            )
            forces[integrated] += weight
            if k == 0:
                forces[integrated] += external

            acc = forces[integrated] / masses
            vel = pts.velocities[integrated] + acc * sub_dt
            over = clamp_velocities(vel, self.max_velocity)
            pts.velocities[integrated] = vel
            pts.positions[integrated] += vel * sub_dt

            accelerations[integrated] = acc
            clamped[:] = False
            clamped[integrated] = over

        # Consumed once per call, including forces on points that were not integrated.
        pts.external_forces[:] = 0.0

        self.time += dt
        self.step_count += 1
        if clamped.any():
            logger.debug(
                "velocity clamp hit on %d point(s) at t=%.4f", int(clamped.sum()), self.time
            )

        self._last = Diagnostics(
            time=self.time,
            positions=pts.positions.copy(),
            velocities=pts.velocities.copy(),
            accelerations=accelerations,
            total_forces=forces,
            clamped=clamped,
        )

    def diagnostics(self) -> Diagnostics:
        """Return the state captured at the last sub-step of the latest `advance`."""
        return self._last

    def kinetic_energy(self) -> float:
        v = self.points.velocities
        return float(0.5 * np.sum(self.points.masses * np.einsum("ij,ij->i", v, v)))
