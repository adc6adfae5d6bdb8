"""Output formatters for dashboard and technical consumers."""

import json

from georisk.core.models import AnalysisResult


class MunicipalFormatter:
    """Markdown summary for municipal staff."""

    def format(self, result: AnalysisResult) -> str:
        snap = result.snapshot
        comp = result.composite
        lines = [
            f"**Análisis de Riesgo Geológico - {result.district.name}**",
            f"**Coordenadas:** {result.coordinates.lat:.6f}, {result.coordinates.lng:.6f} | "
            f"**Fecha:** {result.timestamp.strftime('%Y-%m-%d %H:%M')} UTC",
            f"**ID:** {result.analysis_id}",
            "",
            "**CONDICIONES:**",
            f"- Elevación: {snap.elevation} m",
            f"- Pendiente: {snap.slope:.1f}°",
            f"- Precipitación anual: {snap.precipitation} mm",
            f"- Suelo: {snap.soil_type} | Formación: {snap.geological_formation}",
            "",
            "**RIESGO:**",
            f"- Deslizamiento: {comp.landslide_risk}% ({result.landslide.tier})",
            f"- Colapso: {comp.collapse_risk}% ({comp.collapse_tier})",
            f"- General: {comp.overall_risk}% ({comp.tier.upper()})",
            "",
        ]

        if result.report.factors:
            lines.append("**FACTORES:**")
            lines.extend(f"- {f}" for f in result.report.factors)
            lines.append("")

        lines.append("**RECOMENDACIONES:**")
        for i, rec in enumerate(comp.recommendations, 1):
            lines.append(f"{i}. {rec}")

        lines.extend([
            "",
            "---",
            f"*Análisis: {result.duration_seconds:.2f}s*",
        ])
        return "\n".join(lines)


class TechnicalFormatter:
    """JSON with full details."""

    def format(self, result: AnalysisResult) -> dict:
        data = result.to_dict()
        data["demographics"] = result.district.demographics.model_dump()
        return data

    def to_json(self, result: AnalysisResult) -> str:
        return json.dumps(self.format(result), indent=2, ensure_ascii=False, default=str)


def format_output(result: AnalysisResult, audience: str = "municipal") -> str:
    if audience == "technical":
        return TechnicalFormatter().to_json(result)
    return MunicipalFormatter().format(result)
