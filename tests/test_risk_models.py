from dataclasses import replace

import pytest

from georisk.core.errors import NotFoundError
from georisk.core.risk_models import (
    AdditivePointsModel,
    WeightedFactorModel,
    get_model,
    tier_for,
)
from georisk.utils.constants import (
    ADDITIVE_POINTS_TIERS,
    ADDITIVE_POINTS_TOP_TIER,
    WEIGHTED_FACTOR_TIERS,
    WEIGHTED_FACTOR_TOP_TIER,
)


@pytest.fixture
def weighted():
    return WeightedFactorModel()


@pytest.fixture
def additive():
    return AdditivePointsModel()


class TestWeightedFactor:
    def test_cuchilla_baseline(self, weighted, cuchilla_snapshot):
        result = weighted.score(cuchilla_snapshot)
        assert result.model == "weighted_factor"
        assert result.overall_score == 53
        assert result.tier == "Medio"
        assert result.factor_breakdown == {
            "slope": 67,
            "elevation": 30,
            "soil": 56,
            "precipitation": 70,
            "geological": 20,
        }

    def test_high_slope_and_rain_advisories(self, weighted, steep_snapshot):
        result = weighted.score(steep_snapshot)
        assert result.overall_score == 59
        assert result.recommendations == [
            "Considerar obras de estabilización de taludes",
            "Implementar sistemas de drenaje adecuados",
        ]

    def test_favorable_when_nothing_triggers(self, weighted, cuchilla_snapshot):
        calm = replace(cuchilla_snapshot, slope=5.0, precipitation=1500, soil_type="Alfisol")
        result = weighted.score(calm)
        assert result.recommendations == ["Zona con condiciones favorables para desarrollo"]

    def test_overall_advisory_above_sixty(self, weighted, cuchilla_snapshot):
        harsh = replace(
            cuchilla_snapshot,
            slope=45.0,
            precipitation=3000,
            geological_formation="Depósitos Aluviales",
        )
        result = weighted.score(harsh)
        assert result.overall_score > 60
        assert "Se recomienda evaluación profesional antes de construcción" in result.recommendations

    def test_unknown_soil_and_formation_are_neutral(self, weighted, cuchilla_snapshot):
        odd = replace(cuchilla_snapshot, soil_type="Oxisol", geological_formation="Desconocida")
        result = weighted.score(odd)
        assert result.factor_breakdown["soil"] == 50
        assert result.factor_breakdown["geological"] == 50

    def test_monotonic_in_slope(self, weighted, cuchilla_snapshot):
        scores = [weighted.score(replace(cuchilla_snapshot, slope=s)).overall_score for s in range(0, 60, 3)]
        assert scores == sorted(scores)

    def test_monotonic_in_precipitation(self, weighted, cuchilla_snapshot):
        scores = [
            weighted.score(replace(cuchilla_snapshot, precipitation=p)).overall_score
            for p in range(800, 3600, 100)
        ]
        assert scores == sorted(scores)

    def test_score_bounds(self, weighted, cuchilla_snapshot):
        extreme = replace(cuchilla_snapshot, slope=90.0, precipitation=9000, elevation=3000)
        assert 0 <= weighted.score(extreme).overall_score <= 100


class TestAdditivePoints:
    def test_steep_wet_site_is_critical(self, additive, steep_snapshot):
        result = additive.score(steep_snapshot)
        assert result.model == "additive_points"
        assert result.overall_score == 83
        assert result.tier == "Crítico"
        assert result.factor_breakdown == {
            "slope": 40,
            "precipitation": 25,
            "geological": 4.0,
            "soil": 8.7,
            "elevation": 5,
        }
        assert "Pendiente muy pronunciada (>35°)" in result.factors
        assert "Precipitación muy alta (>2500mm)" in result.factors

    def test_cuchilla_baseline(self, additive, cuchilla_snapshot):
        result = additive.score(cuchilla_snapshot)
        assert result.overall_score == 68
        assert result.tier == "Alto"
        assert "Tipo de suelo con alta permeabilidad (Entisol)" in result.factors
        assert "Elevación alta" in result.factors
        assert result.description.startswith("El riesgo de deslizamiento es alto")

    def test_recommendations_follow_tier(self, additive, steep_snapshot):
        result = additive.score(steep_snapshot)
        assert result.recommendations == list(additive.catalog.guidance["Crítico"].recommendations)

    def test_band_thresholds_are_strict(self, additive, cuchilla_snapshot):
        at_edge = additive.score(replace(cuchilla_snapshot, slope=35.0, precipitation=2500, elevation=2400))
        assert at_edge.factor_breakdown["slope"] == 30
        assert at_edge.factor_breakdown["precipitation"] == 20
        assert at_edge.factor_breakdown["elevation"] == 3

    def test_unstable_formation_factor(self, additive, cuchilla_snapshot):
        result = additive.score(replace(cuchilla_snapshot, geological_formation="Depósitos Aluviales"))
        assert "Formación geológica moderadamente estable (Depósitos Aluviales)" in result.factors

    def test_unknown_soil_contributes_nothing(self, additive, cuchilla_snapshot):
        result = additive.score(replace(cuchilla_snapshot, soil_type="Oxisol"))
        assert result.factor_breakdown["soil"] == 0

    def test_capped_at_hundred(self, raw_catalog, make_catalog, cuchilla_snapshot):
        raw_catalog["soil_types"]["Entisol"] = {"permeability": 1.0, "cohesion": 0.0}
        raw_catalog["geological_formations"]["Depósitos Aluviales"]["stability"] = 0.0
        model = AdditivePointsModel(make_catalog(raw_catalog))
        worst = replace(
            cuchilla_snapshot,
            slope=60.0,
            precipitation=3000,
            elevation=2500,
            geological_formation="Depósitos Aluviales",
        )
        result = model.score(worst)
        assert sum(result.factor_breakdown.values()) == 105
        assert result.overall_score == 100
        assert result.tier == "Crítico"

    def test_flat_dry_site_is_low(self, additive, cuchilla_snapshot):
        calm = replace(cuchilla_snapshot, slope=3.0, precipitation=900, elevation=2100, soil_type="Alfisol")
        result = additive.score(calm)
        assert result.tier == "Bajo"
        assert result.factors == []


class TestTiers:
    @pytest.mark.parametrize("score,tier", [
        (0, "Muy Bajo"), (19, "Muy Bajo"), (20, "Bajo"), (39, "Bajo"),
        (40, "Medio"), (59, "Medio"), (60, "Alto"), (79, "Alto"),
        (80, "Muy Alto"), (100, "Muy Alto"),
    ])
    def test_weighted_factor_tiers(self, score, tier):
        assert tier_for(score, WEIGHTED_FACTOR_TIERS, WEIGHTED_FACTOR_TOP_TIER) == tier

    @pytest.mark.parametrize("score,tier", [
        (0, "Bajo"), (29.9, "Bajo"), (30, "Medio"), (59.9, "Medio"),
        (60, "Alto"), (79.9, "Alto"), (80, "Crítico"), (100, "Crítico"),
    ])
    def test_additive_points_tiers(self, score, tier):
        assert tier_for(score, ADDITIVE_POINTS_TIERS, ADDITIVE_POINTS_TOP_TIER) == tier


def test_model_registry():
    assert isinstance(get_model("weighted_factor"), WeightedFactorModel)
    assert isinstance(get_model("additive_points"), AdditivePointsModel)
    with pytest.raises(NotFoundError):
        get_model("neural_net")
