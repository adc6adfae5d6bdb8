"""Data models produced by the risk engine."""

from dataclasses import asdict, dataclass, field
from datetime import datetime

from georisk.core.catalog import Coordinates, District


@dataclass(frozen=True)
class GeologicalSnapshot:
    """Synthesized environmental attributes for one analysis."""
    elevation: float  # m
    slope: float  # degrees
    precipitation: float  # mm/year
    soil_type: str
    geological_formation: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class RiskAssessment:
    """Output of one scoring call."""
    model: str
    overall_score: int
    tier: str
    factor_breakdown: dict
    recommendations: list
    factors: list = field(default_factory=list)
    description: str = ""

    def to_dict(self) -> dict:
        return {
            "model": self.model,
            "overall_score": self.overall_score,
            "tier": self.tier,
            "factor_breakdown": dict(self.factor_breakdown),
            "factors": list(self.factors),
            "description": self.description,
            "recommendations": list(self.recommendations),
        }


@dataclass(frozen=True)
class CompositeRisk:
    """Landslide and collapse risk combined 60/40."""
    landslide_risk: int
    collapse_risk: int
    collapse_tier: str
    overall_risk: int
    tier: str
    recommendations: list

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class AnalysisResult:
    """Complete analysis output."""
    analysis_id: str
    timestamp: datetime
    district: District
    coordinates: Coordinates
    snapshot: GeologicalSnapshot
    landslide: RiskAssessment
    report: RiskAssessment
    composite: CompositeRisk
    duration_seconds: float

    def to_dict(self) -> dict:
        return {
            "analysis_id": self.analysis_id,
            "timestamp": self.timestamp.isoformat(),
            "district": self.district.name,
            "coordinates": {"lat": self.coordinates.lat, "lng": self.coordinates.lng},
            "snapshot": self.snapshot.to_dict(),
            "landslide": self.landslide.to_dict(),
            "report": self.report.to_dict(),
            "composite": self.composite.to_dict(),
            "duration_seconds": self.duration_seconds,
        }
