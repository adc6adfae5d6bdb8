"""Landslide risk models.

Two scoring formulas coexist and are kept as separate named strategies:

* ``weighted_factor``: five factor risks normalized to 0-1, weighted sum as a
  percentage. Feeds the composite dashboard (combined 60/40 with collapse risk).
* ``additive_points``: a point budget per band, summed and capped at 100. Used
  by report exports and by the simulation engine.

Their tier thresholds and labels differ on purpose; do not merge them.
"""

from abc import ABC, abstractmethod
from typing import Optional

from georisk.core.catalog import GeoCatalog, catalog
from georisk.core.errors import NotFoundError
from georisk.core.models import GeologicalSnapshot, RiskAssessment
from georisk.utils.constants import (
    ADDITIVE_POINTS_TIERS,
    ADDITIVE_POINTS_TOP_TIER,
    FACTOR_WEIGHTS,
    WEIGHTED_FACTOR_TIERS,
    WEIGHTED_FACTOR_TOP_TIER,
)
from georisk.utils.numeric import clamp, round_half_up, round_int

UNKNOWN_FACTOR_RISK = 0.5


def tier_for(score: float, bands: list, top: str) -> str:
    for upper, label in bands:
        if score < upper:
            return label
    return top


class RiskModel(ABC):
    """Scores a snapshot into a new RiskAssessment."""

    name = ""

    def __init__(self, geo_catalog: Optional[GeoCatalog] = None):
        self.catalog = geo_catalog or catalog

    @abstractmethod
    def score(self, snapshot: GeologicalSnapshot) -> RiskAssessment:
        ...


class WeightedFactorModel(RiskModel):
    name = "weighted_factor"

    def factor_risks(self, snapshot: GeologicalSnapshot) -> dict:
        """Individual factor risks on a 0-1 scale."""
        slope_risk = min(1.0, snapshot.slope / 45)

        if snapshot.elevation > 2500:
            elevation_risk = 0.7
        elif snapshot.elevation < 2000:
            elevation_risk = 0.6
        else:
            elevation_risk = 0.3

        soil = self.catalog.soil(snapshot.soil_type)
        soil_risk = (1 - soil.cohesion) * soil.permeability if soil else UNKNOWN_FACTOR_RISK

        precipitation_risk = clamp((snapshot.precipitation - 1500) / 1000, 0.0, 1.0)

        formation = self.catalog.formation(snapshot.geological_formation)
        geological_risk = 1 - formation.stability if formation else UNKNOWN_FACTOR_RISK

        return {
            "slope": slope_risk,
            "elevation": elevation_risk,
            "soil": soil_risk,
            "precipitation": precipitation_risk,
            "geological": geological_risk,
        }

    def score(self, snapshot: GeologicalSnapshot) -> RiskAssessment:
        risks = self.factor_risks(snapshot)
        weighted = sum(risks[name] * weight for name, weight in FACTOR_WEIGHTS.items())
        overall = int(clamp(round_int(weighted * 100)))

        return RiskAssessment(
            model=self.name,
            overall_score=overall,
            tier=tier_for(overall, WEIGHTED_FACTOR_TIERS, WEIGHTED_FACTOR_TOP_TIER),
            factor_breakdown={name: round_int(risk * 100) for name, risk in risks.items()},
            recommendations=self._recommendations(risks, overall),
        )

    def _recommendations(self, risks: dict, overall: int) -> list:
        advice = self.catalog.advisories
        recs = [advice[name] for name in ("slope", "precipitation", "soil", "geological") if risks[name] > 0.6]
        if overall > 60:
            recs.append(advice["overall"])
        if not recs:
            recs.append(advice["favorable"])
        return recs


class AdditivePointsModel(RiskModel):
    name = "additive_points"

    SLOPE_BANDS = [
        (35, 40, "Pendiente muy pronunciada (>35°)"),
        (25, 30, "Pendiente pronunciada (25-35°)"),
        (15, 20, "Pendiente moderada (15-25°)"),
        (8, 10, "Pendiente suave (8-15°)"),
    ]
    PRECIPITATION_BANDS = [
        (2500, 25, "Precipitación muy alta (>2500mm)"),
        (2000, 20, "Precipitación alta (2000-2500mm)"),
        (1500, 15, "Precipitación moderada (1500-2000mm)"),
        (1000, 10, "Precipitación baja-moderada (1000-1500mm)"),
    ]
    ELEVATION_BANDS = [
        (2400, 5, "Elevación muy alta con condiciones climáticas extremas"),
        (2200, 3, "Elevación alta"),
    ]

    @staticmethod
    def _band(value: float, bands: list) -> tuple:
        for threshold, points, label in bands:
            if value > threshold:
                return points, label
        return 0, None

    def score(self, snapshot: GeologicalSnapshot) -> RiskAssessment:
        factors = []
        points = {}

        points["slope"], label = self._band(snapshot.slope, self.SLOPE_BANDS)
        if label:
            factors.append(label)

        points["precipitation"], label = self._band(snapshot.precipitation, self.PRECIPITATION_BANDS)
        if label:
            factors.append(label)

        points["geological"] = 0.0
        formation = self.catalog.formation(snapshot.geological_formation)
        if formation:
            points["geological"] = (1 - formation.stability) * 20
            if points["geological"] > 15:
                factors.append(f"Formación geológica inestable ({snapshot.geological_formation})")
            elif points["geological"] > 10:
                factors.append(f"Formación geológica moderadamente estable ({snapshot.geological_formation})")

        points["soil"] = 0.0
        soil = self.catalog.soil(snapshot.soil_type)
        if soil:
            points["soil"] = (soil.permeability * 0.6 + (1 - soil.cohesion) * 0.4) * 15
            if points["soil"] > 10:
                factors.append(f"Tipo de suelo con alta permeabilidad ({snapshot.soil_type})")

        points["elevation"], label = self._band(snapshot.elevation, self.ELEVATION_BANDS)
        if label:
            factors.append(label)

        overall = int(min(100, max(0, round_int(sum(points.values())))))
        tier = tier_for(overall, ADDITIVE_POINTS_TIERS, ADDITIVE_POINTS_TOP_TIER)
        guidance = self.catalog.guidance[tier]

        return RiskAssessment(
            model=self.name,
            overall_score=overall,
            tier=tier,
            factor_breakdown={name: round_half_up(value, 2) for name, value in points.items()},
            recommendations=list(guidance.recommendations),
            factors=factors,
            description=guidance.description,
        )


RISK_MODELS = {
    WeightedFactorModel.name: WeightedFactorModel,
    AdditivePointsModel.name: AdditivePointsModel,
}


def get_model(name: str, geo_catalog: Optional[GeoCatalog] = None) -> RiskModel:
    try:
        return RISK_MODELS[name](geo_catalog)
    except KeyError:
        raise NotFoundError(f"Unknown risk model: {name}") from None
