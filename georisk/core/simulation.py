"""What-if simulation on top of the additive-points model.

Slider factors (soil saturation, vegetation, human activity, infrastructure,
drainage, population) perturb the base point score additively; an optional
month multiplies it by the seasonal risk multiplier.
"""

import math
from dataclasses import asdict, dataclass, fields, replace
from typing import Optional

import pandas as pd
from loguru import logger

from georisk.core.catalog import GeoCatalog, catalog
from georisk.core.errors import NotFoundError, ValidationError
from georisk.core.models import GeologicalSnapshot
from georisk.core.risk_models import AdditivePointsModel, tier_for
from georisk.utils.config import settings
from georisk.utils.constants import (
    ADDITIVE_POINTS_TIERS,
    ADDITIVE_POINTS_TOP_TIER,
    CURRENT_CONDITIONS,
    DEFAULT_SLIDERS,
)
from georisk.utils.numeric import clamp, round_half_up

SLIDER_FIELDS = tuple(DEFAULT_SLIDERS)
NUMERIC_FIELDS = ("elevation", "slope", "precipitation") + SLIDER_FIELDS
TEXT_FIELDS = ("soil_type", "geological_formation")

# Delta (percentage points) beyond which the change is reported as a trend
TREND_THRESHOLD = 5


@dataclass(frozen=True)
class SimulationState:
    """Snapshot attributes plus the user-tunable slider factors (0-100)."""
    elevation: float
    slope: float
    precipitation: float
    soil_type: str
    geological_formation: str
    soil_saturation: float = DEFAULT_SLIDERS["soil_saturation"]
    vegetation_cover: float = DEFAULT_SLIDERS["vegetation_cover"]
    human_activity: float = DEFAULT_SLIDERS["human_activity"]
    population_density: float = DEFAULT_SLIDERS["population_density"]
    infrastructure_vulnerability: float = DEFAULT_SLIDERS["infrastructure_vulnerability"]
    drainage_quality: float = DEFAULT_SLIDERS["drainage_quality"]

    def __post_init__(self):
        object.__setattr__(self, "slope", max(0.0, self.slope))
        for name in SLIDER_FIELDS:
            object.__setattr__(self, name, clamp(getattr(self, name)))

    @classmethod
    def from_snapshot(cls, snapshot: GeologicalSnapshot, **sliders) -> "SimulationState":
        return cls(**snapshot.to_dict(), **sliders)

    def snapshot(self) -> GeologicalSnapshot:
        return GeologicalSnapshot(
            elevation=self.elevation,
            slope=self.slope,
            precipitation=self.precipitation,
            soil_type=self.soil_type,
            geological_formation=self.geological_formation,
        )

    def with_overrides(self, overrides: Optional[dict] = None) -> "SimulationState":
        if not overrides:
            return self
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise ValidationError(f"Unknown simulation fields: {sorted(unknown)}")

        values = dict(overrides)
        for name in NUMERIC_FIELDS:
            if name not in values:
                continue
            value = values[name]
            if isinstance(value, bool):
                raise ValidationError(f"{name} must be numeric, got {value!r}")
            try:
                values[name] = float(value)
            except (TypeError, ValueError):
                raise ValidationError(f"{name} must be numeric, got {value!r}") from None
            if not math.isfinite(values[name]):
                raise ValidationError(f"{name} must be finite, got {value!r}")
        for name in TEXT_FIELDS:
            if name in values and not isinstance(values[name], str):
                raise ValidationError(f"{name} must be a string, got {values[name]!r}")
        return replace(self, **values)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class SimulationResult:
    original_score: int
    simulated_score: float
    delta: float
    estimated_economic_impact: float
    tier: str
    season: str
    trend: str  # increased, reduced, similar
    state: SimulationState

    def to_dict(self) -> dict:
        return {
            "original_score": self.original_score,
            "simulated_score": round_half_up(self.simulated_score, 1),
            "delta": round_half_up(self.delta, 1),
            "estimated_economic_impact": self.estimated_economic_impact,
            "tier": self.tier,
            "season": self.season,
            "trend": self.trend,
            "state": self.state.to_dict(),
        }


class SimulationEngine:
    """Stateless scorer for simulation states."""

    def __init__(self, model: Optional[AdditivePointsModel] = None, geo_catalog: Optional[GeoCatalog] = None):
        self.catalog = geo_catalog or catalog
        self.model = model or AdditivePointsModel(self.catalog)
        self.reference_value = settings.simulation.reference_asset_value
        self.impact_rate = settings.simulation.impact_rate_per_point

    def adjusted_score(self, state: SimulationState, season: str = CURRENT_CONDITIONS) -> float:
        score = float(self.model.score(state.snapshot()).overall_score)

        score += state.soil_saturation / 100 * 0.3 * 30
        score += (1 - state.vegetation_cover / 100) * 0.25 * 25
        score += state.human_activity / 100 * 0.2 * 20
        score += state.infrastructure_vulnerability / 100 * 0.15 * 15
        score += (1 - state.drainage_quality / 100) * 0.2 * 20
        score += state.population_density / 100 * 0.1 * 10

        if season != CURRENT_CONDITIONS:
            score *= self.catalog.season(season).risk_multiplier

        return clamp(score)

    def simulate(
        self,
        base: SimulationState,
        overrides: Optional[dict] = None,
        season: str = CURRENT_CONDITIONS,
    ) -> SimulationResult:
        original = self.model.score(base.snapshot()).overall_score
        state = base.with_overrides(overrides)
        simulated = self.adjusted_score(state, season)
        delta = simulated - original

        if delta > TREND_THRESHOLD:
            trend = "increased"
        elif delta < -TREND_THRESHOLD:
            trend = "reduced"
        else:
            trend = "similar"

        return SimulationResult(
            original_score=original,
            simulated_score=simulated,
            delta=delta,
            estimated_economic_impact=delta * self.impact_rate * self.reference_value,
            tier=tier_for(simulated, ADDITIVE_POINTS_TIERS, ADDITIVE_POINTS_TOP_TIER),
            season=season,
            trend=trend,
            state=state,
        )

    def seasonal_profile(self, score: float) -> pd.DataFrame:
        """Monthly risk for a given score, capped at 100."""
        df = pd.DataFrame([entry.model_dump() for entry in self.catalog.seasonal_calendar])
        df["risk"] = (score * df["risk_multiplier"]).clip(upper=100).round(1)
        return df


SCENARIOS = {
    "sequia": {
        "name": "Sequía prolongada",
        "description": "Lluvias al 60% de lo normal, suelos secos y mayor presión agrícola",
        "precipitation_factor": 0.6,
        "conditions": {
            "soil_saturation": 20,
            "vegetation_cover": 40,
            "human_activity": 60,
        },
    },
    "lluvias": {
        "name": "Temporada de lluvias intensas",
        "description": "Precipitación 80% por encima de lo normal y suelos saturados",
        "precipitation_factor": 1.8,
        "conditions": {
            "soil_saturation": 90,
            "vegetation_cover": 85,
            "human_activity": 30,
        },
    },
    "deforestacion": {
        "name": "Deforestación",
        "description": "Pérdida de cobertura vegetal y drenaje deficiente",
        "conditions": {
            "vegetation_cover": 20,
            "human_activity": 80,
            "soil_saturation": 70,
            "drainage_quality": 30,
        },
    },
    "urbanizacion": {
        "name": "Urbanización acelerada",
        "description": "Mayor densidad poblacional e infraestructura vulnerable",
        "conditions": {
            "human_activity": 85,
            "population_density": 80,
            "infrastructure_vulnerability": 70,
            "drainage_quality": 40,
            "vegetation_cover": 30,
        },
    },
    "mejoras": {
        "name": "Obras de mitigación",
        "description": "Drenaje mejorado, reforestación e infraestructura reforzada",
        "conditions": {
            "drainage_quality": 90,
            "vegetation_cover": 85,
            "infrastructure_vulnerability": 20,
            "human_activity": 25,
        },
    },
}


class SimulationSession:
    """Caller-held slider state for one original snapshot."""

    def __init__(self, original: GeologicalSnapshot, engine: Optional[SimulationEngine] = None):
        self.original = original
        self.engine = engine or SimulationEngine()
        self.base = SimulationState.from_snapshot(original)
        self.overrides: dict = {}
        self.season = CURRENT_CONDITIONS
        self.scenario: Optional[str] = None

    @property
    def state(self) -> SimulationState:
        return self.base.with_overrides(self.overrides)

    def set(self, **overrides) -> SimulationState:
        self.base.with_overrides(overrides)  # validate before committing
        self.overrides.update(overrides)
        return self.state

    def apply_scenario(self, name: str) -> SimulationState:
        preset = SCENARIOS.get(name)
        if preset is None:
            raise NotFoundError(f"Unknown scenario: {name}")

        updates = dict(preset["conditions"])
        if "precipitation_factor" in preset:
            updates["precipitation"] = self.original.precipitation * preset["precipitation_factor"]

        self.overrides.update(updates)
        self.scenario = name
        logger.info(f"Scenario applied: {preset['name']}")
        return self.state

    def select_season(self, month: str) -> None:
        if month != CURRENT_CONDITIONS:
            self.engine.catalog.season(month)
        self.season = month

    def reset(self) -> SimulationState:
        self.overrides = {}
        self.season = CURRENT_CONDITIONS
        self.scenario = None
        return self.state

    def result(self) -> SimulationResult:
        return self.engine.simulate(self.base, self.overrides, self.season)
