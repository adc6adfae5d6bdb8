"""Project-wide constants."""

SOIL_TYPES = ["Andisol", "Inceptisol", "Entisol", "Alfisol"]

CURRENT_CONDITIONS = "actual"

AUDIENCES = ["municipal", "technical"]

EXPORT_FORMATS = {
    "txt": "text/plain",
    "pdf": "application/pdf",
}

# Weighted-factor model: 0-1 factor risks, weighted sum -> percentage
FACTOR_WEIGHTS = {
    "slope": 0.35,
    "elevation": 0.15,
    "soil": 0.20,
    "precipitation": 0.15,
    "geological": 0.15,
}

# (upper bound exclusive, label); anything above the last bound gets the final label
WEIGHTED_FACTOR_TIERS = [(20, "Muy Bajo"), (40, "Bajo"), (60, "Medio"), (80, "Alto")]
WEIGHTED_FACTOR_TOP_TIER = "Muy Alto"

ADDITIVE_POINTS_TIERS = [(30, "Bajo"), (60, "Medio"), (80, "Alto")]
ADDITIVE_POINTS_TOP_TIER = "Crítico"

# Composite dashboard: (lower bound inclusive, label), checked top-down
COMPOSITE_TIERS = [(70, "Muy Alto"), (50, "Alto"), (30, "Medio")]
COMPOSITE_BOTTOM_TIER = "Bajo"

LANDSLIDE_WEIGHT = 0.6
COLLAPSE_WEIGHT = 0.4

TIER_COLORS = {
    "Muy Bajo": "#22c55e",
    "Bajo": "#4ade80",
    "Medio": "#eab308",
    "Alto": "#f97316",
    "Muy Alto": "#ef4444",
    "Crítico": "#dc2626",
}

DEFAULT_SLIDERS = {
    "soil_saturation": 50,
    "vegetation_cover": 70,
    "human_activity": 40,
    "population_density": 30,
    "infrastructure_vulnerability": 45,
    "drainage_quality": 60,
}

# Slider ranges shown in the dashboard: (min, max, step)
SLIDER_RANGES = {
    "precipitation": (800, 3500, 50),
    "slope": (0.0, 45.0, 1.0),
    "elevation": (2000, 2600, 10),
    "soil_saturation": (0, 100, 5),
    "vegetation_cover": (0, 100, 5),
    "human_activity": (0, 100, 5),
    "population_density": (0, 100, 5),
    "infrastructure_vulnerability": (0, 100, 5),
    "drainage_quality": (0, 100, 5),
}
