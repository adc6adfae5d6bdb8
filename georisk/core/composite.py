"""Collapse risk and the combined dashboard risk."""

from typing import Optional

import numpy as np

from georisk.core.models import CompositeRisk, GeologicalSnapshot, RiskAssessment
from georisk.utils.constants import (
    COLLAPSE_WEIGHT,
    COMPOSITE_BOTTOM_TIER,
    COMPOSITE_TIERS,
    LANDSLIDE_WEIGHT,
)
from georisk.utils.numeric import clamp, round_int

COLLAPSE_JITTER_MAX = 10


def composite_tier(score: float) -> str:
    for lower, label in COMPOSITE_TIERS:
        if score >= lower:
            return label
    return COMPOSITE_BOTTOM_TIER


class CompositeRiskCalculator:
    """Combine a weighted-factor landslide score with a heuristic collapse score."""

    def __init__(self, rng: Optional[np.random.Generator] = None, seed: Optional[int] = None):
        self.rng = rng if rng is not None else np.random.default_rng(seed)

    def collapse_risk(self, snapshot: GeologicalSnapshot) -> float:
        raw = (
            snapshot.slope * 1.2
            + (snapshot.precipitation - 1500) / 30
            + (15 if snapshot.elevation > 2300 else 5)
            + float(self.rng.uniform(0, COLLAPSE_JITTER_MAX))
        )
        return clamp(raw)

    def combine(self, snapshot: GeologicalSnapshot, landslide: RiskAssessment) -> CompositeRisk:
        collapse = self.collapse_risk(snapshot)
        overall = landslide.overall_score * LANDSLIDE_WEIGHT + collapse * COLLAPSE_WEIGHT

        return CompositeRisk(
            landslide_risk=landslide.overall_score,
            collapse_risk=round_int(collapse),
            collapse_tier=composite_tier(collapse),
            overall_risk=round_int(overall),
            tier=composite_tier(overall),
            recommendations=list(landslide.recommendations),
        )
