"""Ready-made rod scenarios."""

from .fishing_rod import FishingRodScene, GripScript, WindDriver, run_fishing_rod

__all__ = ["FishingRodScene", "GripScript", "WindDriver", "run_fishing_rod"]
