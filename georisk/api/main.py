"""FastAPI application."""

from datetime import datetime
from typing import Optional, Union

from fastapi import FastAPI, HTTPException, Query, Response
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict

import georisk.utils.logger  # noqa: F401
from georisk.core import (
    SCENARIOS,
    ExportFailure,
    NotFoundError,
    RiskAnalyzer,
    SimulationEngine,
    SimulationSession,
    ValidationError,
    build_report,
    catalog,
    exporter,
    format_output,
)
from georisk.core.models import GeologicalSnapshot
from georisk.core.synthesizer import GeologicalSynthesizer
from georisk.utils.config import settings
from georisk.utils.constants import CURRENT_CONDITIONS

app = FastAPI(
    title="GeoRisk Scanner API",
    description="Análisis de riesgo geológico para San Pedro de los Milagros",
    version=settings.app.version,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.api.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

analyzer = RiskAnalyzer()
simulation_engine = SimulationEngine()


class AnalyzeRequest(BaseModel):
    lat: Optional[Union[float, str]] = None
    lng: Optional[Union[float, str]] = None
    district: Optional[str] = None
    audience: str = "municipal"


class SnapshotModel(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    elevation: float
    slope: float
    precipitation: float
    soil_type: str
    geological_formation: str


class SimulateRequest(BaseModel):
    district: Optional[str] = None
    snapshot: Optional[SnapshotModel] = None
    overrides: dict = {}
    scenario: Optional[str] = None
    season: str = CURRENT_CONDITIONS


def _error(e: Exception) -> HTTPException:
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, ValidationError):
        return HTTPException(status_code=422, detail=str(e))
    return HTTPException(status_code=500, detail=str(e))


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "districts": len(catalog.districts),
        "timestamp": datetime.utcnow().isoformat(),
    }


@app.get("/api/v1/districts")
async def list_districts():
    """All districts with their reference centers."""
    return {
        "count": len(catalog.districts),
        "districts": [
            {
                "name": d.name,
                "lat": d.center.lat,
                "lng": d.center.lng,
                "description": d.description,
            }
            for d in catalog.districts
        ],
    }


@app.get("/api/v1/districts/{name}")
async def get_district(name: str):
    try:
        return catalog.district(name).model_dump()
    except NotFoundError as e:
        raise _error(e)


# Blocking handlers (analysis may sleep) are plain def so they run in the threadpool
@app.post("/api/v1/analyze")
def run_analysis(request: AnalyzeRequest):
    """Resolve, synthesize and score one location."""
    try:
        result = analyzer.analyze(request.lat, request.lng, request.district)
    except (NotFoundError, ValidationError) as e:
        raise _error(e)

    data = result.to_dict()
    data["formatted_output"] = format_output(result, request.audience)
    return data


@app.get("/api/v1/analyze")
def quick_analysis(
    lat: Optional[str] = Query(None),
    lng: Optional[str] = Query(None),
    district: Optional[str] = Query(None),
    audience: str = Query("municipal"),
):
    """Quick analysis via GET."""
    return run_analysis(AnalyzeRequest(lat=lat, lng=lng, district=district, audience=audience))


@app.post("/api/v1/simulate")
def simulate(request: SimulateRequest):
    """What-if simulation from a district (fresh snapshot) or a given snapshot."""
    try:
        if request.snapshot is not None:
            original = GeologicalSnapshot(**request.snapshot.model_dump())
        elif request.district:
            original = GeologicalSynthesizer().synthesize(catalog.district(request.district))
        else:
            raise ValidationError("Provide a district or a snapshot")

        session = SimulationSession(original, simulation_engine)
        if request.scenario:
            session.apply_scenario(request.scenario)
        if request.overrides:
            session.set(**request.overrides)
        session.select_season(request.season)
        result = session.result()
    except (NotFoundError, ValidationError) as e:
        raise _error(e)

    data = result.to_dict()
    data["original"] = original.to_dict()
    data["scenario"] = session.scenario
    data["seasonal_profile"] = simulation_engine.seasonal_profile(result.simulated_score).to_dict(orient="records")
    return data


@app.post("/api/v1/report")
def download_report(request: AnalyzeRequest, fmt: str = Query("pdf")):
    """Run an analysis and return the exported report as a file."""
    try:
        result = analyzer.analyze(request.lat, request.lng, request.district)
        exported = exporter.export(build_report(result), fmt)
    except (NotFoundError, ValidationError, ExportFailure) as e:
        raise _error(e)

    return Response(
        content=exported.content,
        media_type=exported.mime,
        headers={"Content-Disposition": f'attachment; filename="{exported.filename}"'},
    )


@app.get("/api/v1/seasons")
async def get_seasons():
    return {"seasons": [entry.model_dump() for entry in catalog.seasonal_calendar]}


@app.get("/api/v1/scenarios")
async def get_scenarios():
    return {
        "scenarios": {
            key: {"name": s["name"], "description": s["description"], "conditions": s["conditions"]}
            for key, s in SCENARIOS.items()
        }
    }
