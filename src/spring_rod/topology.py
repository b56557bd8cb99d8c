"""Rod topology construction.

This module builds the points and springs of a straight rod from a
`RodConfig`. The rod runs along +Y from its base, and each spring takes its
coefficients from the zone its fractional position falls into.
"""

from __future__ import annotations

import logging
import math
from typing import Sequence

from .config import RodConfig, ZoneSpec
from .errors import ConstructionError
from .points import Boundary, MassPoint
from .springs import Spring

logger = logging.getLogger(__name__)

_ZONE_END_TOLERANCE = 1e-9


def validate_zones(zones: Sequence[ZoneSpec]) -> None:
    """Raise `ConstructionError` unless `zones` partition [0, 1] in increasing order."""
    if not zones:
        raise ConstructionError("zone profile must contain at least one zone")

    previous = 0.0
    for k, zone in enumerate(zones):
        if not math.isfinite(zone.end) or zone.end <= previous:
            raise ConstructionError(
                f"zone {k} ends at {zone.end}, which does not follow {previous}"
            )
        if zone.end > 1.0 + _ZONE_END_TOLERANCE:
            raise ConstructionError(f"zone {k} ends at {zone.end}, beyond 1")
        if not zone.stiffness >= 0.0 or not zone.damping >= 0.0:
            raise ConstructionError(f"zone {k} has negative stiffness or damping")
        previous = zone.end

    if abs(previous - 1.0) > _ZONE_END_TOLERANCE:
        raise ConstructionError(f"zone profile ends at {previous}, must end at 1")


def zone_for_fraction(zones: Sequence[ZoneSpec], fraction: float) -> ZoneSpec:
    """Return the zone whose half-open interval contains `fraction`.

    The last zone also takes `fraction == 1`.
    """
    for zone in zones:
        if fraction < zone.end:
            return zone
    return zones[-1]


def grip_indices_for(cfg: RodConfig) -> tuple[int, ...]:
    """Return the indices of the driven grip points for `cfg.grip_scheme`."""
    if cfg.grip_scheme == "fixed":
        return ()
    if cfg.grip_scheme == "single":
        return (0,)
    if cfg.grip_scheme == "double":
        if not 0.0 < cfg.second_grip_fraction <= 1.0:
            raise ConstructionError("second_grip_fraction must be in (0, 1]")
        second = int(cfg.segment_count * cfg.second_grip_fraction)
        if second == 0:
            raise ConstructionError(
                f"rod with {cfg.segment_count} segment(s) is too short for a second grip"
            )
        return (0, second)
    raise ConstructionError(f"Unsupported grip scheme: {cfg.grip_scheme}")


def _validate_rod(cfg: RodConfig) -> None:
    if isinstance(cfg.segment_count, bool) or int(cfg.segment_count) != cfg.segment_count:
        raise ConstructionError("segment_count must be an integer")
    if cfg.segment_count < 1:
        raise ConstructionError("segment_count must be >= 1")
    if not (math.isfinite(cfg.length) and cfg.length > 0.0):
        raise ConstructionError("length must be > 0")
    if not (math.isfinite(cfg.point_mass) and cfg.point_mass > 0.0):
        raise ConstructionError("point_mass must be > 0")
    if len(cfg.base_position) != 3:
        raise ConstructionError("base_position must have 3 components")
    validate_zones(cfg.zones)


def build_rod_points(cfg: RodConfig) -> list[MassPoint]:
    """Lay out `segment_count + 1` points from the base to the tip."""
    _validate_rod(cfg)
    x0, y0, z0 = map(float, cfg.base_position)
    n = int(cfg.segment_count)
    grips = set(grip_indices_for(cfg))

    points: list[MassPoint] = []
    for i in range(n + 1):
        if i in grips:
            boundary = Boundary.DRIVEN
        elif i == 0:
            boundary = Boundary.FIXED
        else:
            boundary = Boundary.FREE
        y = y0 + cfg.length * i / n
        points.append(MassPoint(position=(x0, y, z0), mass=cfg.point_mass, boundary=boundary))
    return points


def build_rod_springs(cfg: RodConfig) -> list[Spring]:
    """Connect consecutive points with springs coefficiented by zone."""
    _validate_rod(cfg)
    n = int(cfg.segment_count)
    rest = cfg.segment_length

    springs: list[Spring] = []
    for i in range(n):
        zone = zone_for_fraction(cfg.zones, i / n)
        springs.append(
            Spring(
                point_a=i,
                point_b=i + 1,
                rest_length=rest,
                stiffness=zone.stiffness,
                damping=zone.damping,
            )
        )
    logger.debug(
        "built rod topology: %d points, %d springs, grips=%s",
        n + 1,
        n,
        grip_indices_for(cfg),
    )
    return springs
