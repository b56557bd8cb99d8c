from .config import DEFAULT_ZONES, RodConfig, SimulationConfig, ZoneSpec
from .errors import ConstructionError, PointIndexError, SpringRodError
from .integrator import Diagnostics, MassSpringSystem
from .points import Boundary, MassPoint, PointStore
from .rod import Rod, build
from .springs import Spring, SpringStore

__all__ = [
    "DEFAULT_ZONES",
    "RodConfig",
    "SimulationConfig",
    "ZoneSpec",
    "ConstructionError",
    "PointIndexError",
    "SpringRodError",
    "Diagnostics",
    "MassSpringSystem",
    "Boundary",
    "MassPoint",
    "PointStore",
    "Rod",
    "build",
    "Spring",
    "SpringStore",
]
