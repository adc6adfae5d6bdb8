"""Static reference catalog: districts, soils, formations and canned texts.

Everything the resolver, synthesizer and scoring models look up comes from a
single YAML file, validated once and frozen at load time.
"""

from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional, Union

import pydantic
import yaml
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, model_validator

from georisk.core.errors import CatalogError, NotFoundError
from georisk.utils.config import resolve_path, settings
from georisk.utils.constants import ADDITIVE_POINTS_TIERS, ADDITIVE_POINTS_TOP_TIER, SOIL_TYPES


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class Coordinates(_Frozen):
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)


class Demographics(_Frozen):
    population: str
    main_activity: str
    risk_factors: tuple[str, ...] = ()
    strengths: tuple[str, ...] = ()


class District(_Frozen):
    name: str
    center: Coordinates
    description: str = ""
    base_elevation: float
    base_slope: float = Field(ge=0)
    base_precipitation: float
    soil_type: str
    demographics: Demographics


class SoilTypeProfile(_Frozen):
    permeability: float = Field(ge=0, le=1)
    cohesion: float = Field(ge=0, le=1)
    description: str = ""


class FormationProfile(_Frozen):
    stability: float = Field(ge=0, le=1)
    description: str = ""


class FormationBand(_Frozen):
    min_elevation: float
    formation: str


class TierGuidance(_Frozen):
    description: str
    recommendations: tuple[str, ...] = Field(min_length=1)


class SeasonalEntry(_Frozen):
    month: str
    precipitation: float
    temperature: float
    risk_multiplier: float = Field(gt=0)


class EmergencyContact(_Frozen):
    name: str
    phone: str


class Municipality(_Frozen):
    name: str
    department: str = ""
    country: str = ""
    center: Coordinates


class CatalogFile(BaseModel):
    """Schema of the YAML reference file."""

    municipality: Municipality
    soil_types: dict[str, SoilTypeProfile]
    geological_formations: dict[str, FormationProfile]
    formation_bands: list[FormationBand]
    default_formation: str
    districts: list[District] = Field(min_length=1)
    weighted_factor_advisories: dict[str, str]
    additive_points_guidance: dict[str, TierGuidance]
    seasonal_calendar: list[SeasonalEntry] = Field(min_length=12, max_length=12)
    emergency_contacts: list[EmergencyContact] = []

    @model_validator(mode="after")
    def _check_references(self):
        unknown_soils = set(self.soil_types) - set(SOIL_TYPES)
        if unknown_soils:
            raise ValueError(f"Unsupported soil types: {sorted(unknown_soils)}")

        names = [d.name for d in self.districts]
        if len(names) != len(set(names)):
            raise ValueError("District names must be unique")

        for d in self.districts:
            if d.soil_type not in self.soil_types:
                raise ValueError(f"District {d.name!r} references unknown soil {d.soil_type!r}")

        formations = [b.formation for b in self.formation_bands] + [self.default_formation]
        for f in formations:
            if f not in self.geological_formations:
                raise ValueError(f"Unknown geological formation {f!r}")

        thresholds = [b.min_elevation for b in self.formation_bands]
        if thresholds != sorted(thresholds, reverse=True):
            raise ValueError("formation_bands must be ordered by descending min_elevation")

        tiers = [label for _, label in ADDITIVE_POINTS_TIERS] + [ADDITIVE_POINTS_TOP_TIER]
        missing = [t for t in tiers if t not in self.additive_points_guidance]
        if missing:
            raise ValueError(f"Missing guidance for tiers: {missing}")

        required = {"slope", "precipitation", "soil", "geological", "overall", "favorable"}
        missing_advisories = required - set(self.weighted_factor_advisories)
        if missing_advisories:
            raise ValueError(f"Missing advisories: {sorted(missing_advisories)}")
        return self


class GeoCatalog:
    """Read-only view over the validated reference data."""

    def __init__(self, data: CatalogFile):
        self.municipality = data.municipality
        self.districts: tuple[District, ...] = tuple(data.districts)
        self.soil_types: Mapping[str, SoilTypeProfile] = MappingProxyType(dict(data.soil_types))
        self.formations: Mapping[str, FormationProfile] = MappingProxyType(dict(data.geological_formations))
        self.formation_bands: tuple[FormationBand, ...] = tuple(data.formation_bands)
        self.default_formation = data.default_formation
        self.advisories: Mapping[str, str] = MappingProxyType(dict(data.weighted_factor_advisories))
        self.guidance: Mapping[str, TierGuidance] = MappingProxyType(dict(data.additive_points_guidance))
        self.seasonal_calendar: tuple[SeasonalEntry, ...] = tuple(data.seasonal_calendar)
        self.emergency_contacts: tuple[EmergencyContact, ...] = tuple(data.emergency_contacts)
        self._by_name = MappingProxyType({d.name: d for d in self.districts})

    def district_names(self) -> list[str]:
        return [d.name for d in self.districts]

    def district(self, name: str) -> District:
        try:
            return self._by_name[name]
        except KeyError:
            raise NotFoundError(f"Vereda no encontrada: {name}") from None

    def soil(self, name: str) -> Optional[SoilTypeProfile]:
        return self.soil_types.get(name)

    def formation(self, name: str) -> Optional[FormationProfile]:
        return self.formations.get(name)

    def formation_for_elevation(self, elevation: float) -> str:
        for band in self.formation_bands:
            if elevation > band.min_elevation:
                return band.formation
        return self.default_formation

    def season(self, month: str) -> SeasonalEntry:
        for entry in self.seasonal_calendar:
            if entry.month == month:
                return entry
        raise NotFoundError(f"Mes desconocido: {month}")


def load_catalog(path: Union[str, Path, None] = None) -> GeoCatalog:
    """Load and validate the reference YAML."""
    path = resolve_path(str(path or settings.catalog.path))
    if not path.exists():
        raise CatalogError(f"Catalog not found: {path}")

    with open(path, encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    try:
        data = CatalogFile(**raw)
    except pydantic.ValidationError as e:
        raise CatalogError(f"Invalid catalog {path.name}: {e}") from e

    logger.info(f"Loaded catalog {path.name}: {len(data.districts)} districts")
    return GeoCatalog(data)


catalog = load_catalog()
