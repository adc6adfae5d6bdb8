"""Geological data synthesizer: district baselines plus bounded jitter."""

from typing import Optional

import numpy as np
from loguru import logger

from georisk.core.catalog import District, GeoCatalog, catalog
from georisk.core.models import GeologicalSnapshot
from georisk.utils.numeric import round_half_up, round_int

ELEVATION_JITTER_M = 40
SLOPE_JITTER_DEG = 4
PRECIPITATION_JITTER_MM = 75


class GeologicalSynthesizer:
    """Produce a snapshot for a district.

    Jitter comes from ``rng`` (anything with a numpy-style ``uniform``). Pass a
    seed for reproducible snapshots; by default the generator draws from
    system entropy.
    """

    def __init__(
        self,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
        geo_catalog: Optional[GeoCatalog] = None,
    ):
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.catalog = geo_catalog or catalog

    def _jitter(self, bound: float) -> float:
        return float(self.rng.uniform(-bound, bound))

    def synthesize(self, district: District) -> GeologicalSnapshot:
        elevation = round_int(district.base_elevation + self._jitter(ELEVATION_JITTER_M))
        slope = round_half_up(max(0.0, district.base_slope + self._jitter(SLOPE_JITTER_DEG)), 1)
        precipitation = round_int(district.base_precipitation + self._jitter(PRECIPITATION_JITTER_MM))

        # Banded on the reported elevation so formation and elevation always agree
        formation = self.catalog.formation_for_elevation(elevation)

        snapshot = GeologicalSnapshot(
            elevation=elevation,
            slope=slope,
            precipitation=precipitation,
            soil_type=district.soil_type,
            geological_formation=formation,
        )
        logger.debug(f"Synthesized {district.name}: {snapshot}")
        return snapshot
