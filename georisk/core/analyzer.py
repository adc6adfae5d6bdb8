"""Analysis pipeline: resolve -> synthesize -> score."""

import time
import uuid
from datetime import datetime, timezone
from typing import Optional

import numpy as np
from loguru import logger

from georisk.core.catalog import Coordinates, GeoCatalog, catalog
from georisk.core.composite import CompositeRiskCalculator
from georisk.core.models import AnalysisResult
from georisk.core.resolver import LocationResolver, validate_coordinates
from georisk.core.risk_models import get_model
from georisk.core.synthesizer import GeologicalSynthesizer
from georisk.utils.config import settings


class RiskAnalyzer:
    """Runs one analysis per user action."""

    def __init__(
        self,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
        processing_delay: Optional[float] = None,
        geo_catalog: Optional[GeoCatalog] = None,
    ):
        self.catalog = geo_catalog or catalog
        rng = rng if rng is not None else np.random.default_rng(seed)
        self.resolver = LocationResolver(self.catalog)
        self.synthesizer = GeologicalSynthesizer(rng=rng, geo_catalog=self.catalog)
        self.composite = CompositeRiskCalculator(rng=rng)
        self.landslide_model = get_model(settings.analysis.default_model, self.catalog)
        self.report_model = get_model(settings.analysis.report_model, self.catalog)
        if processing_delay is None:
            processing_delay = settings.analysis.processing_delay_seconds
        self.processing_delay = processing_delay

    def analyze(self, lat=None, lng=None, district: Optional[str] = None) -> AnalysisResult:
        """Validate input, then run the full pipeline. Nothing runs on bad input."""
        start = datetime.now(timezone.utc)
        analysis_id = f"SPM-{start.strftime('%Y%m%d-%H%M%S')}-{uuid.uuid4().hex[:4]}"

        # Validated up front so a bad pair is rejected even when a district is selected
        point = validate_coordinates(lat, lng) if (lat is not None or lng is not None) else None
        resolved = self.resolver.resolve(lat, lng, district)
        coordinates = point or Coordinates(lat=resolved.center.lat, lng=resolved.center.lng)

        logger.info(f"Analysis {analysis_id}: {resolved.name} ({coordinates.lat}, {coordinates.lng})")

        if self.processing_delay > 0:
            time.sleep(self.processing_delay)

        logger.info("Synthesizing geological data...")
        snapshot = self.synthesizer.synthesize(resolved)

        logger.info("Scoring risk...")
        landslide = self.landslide_model.score(snapshot)
        report = self.report_model.score(snapshot)
        composite = self.composite.combine(snapshot, landslide)

        duration = (datetime.now(timezone.utc) - start).total_seconds()
        logger.info(
            f"Analysis done: landslide {landslide.overall_score}% ({landslide.tier}), "
            f"overall {composite.overall_risk}% ({composite.tier}), {duration:.2f}s"
        )

        return AnalysisResult(
            analysis_id=analysis_id,
            timestamp=start,
            district=resolved,
            coordinates=coordinates,
            snapshot=snapshot,
            landslide=landslide,
            report=report,
            composite=composite,
            duration_seconds=duration,
        )


analyzer = RiskAnalyzer()
