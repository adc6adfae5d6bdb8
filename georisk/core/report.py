"""Report export (plain text and PDF) for a completed analysis."""

import io
import re
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional, Union
from xml.sax.saxutils import escape

from loguru import logger
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from georisk.core.catalog import Demographics, GeoCatalog, catalog
from georisk.core.errors import ExportFailure, ValidationError
from georisk.core.models import AnalysisResult
from georisk.utils.config import resolve_path, settings
from georisk.utils.constants import EXPORT_FORMATS, TIER_COLORS

PAGE_SIZES = {"A4": A4, "letter": letter}

SYSTEM_NAME = "Sistema de Análisis de Riesgo Geológico"


@dataclass(frozen=True)
class RiskReport:
    """Informational content every export must carry."""
    municipality: str
    district: str
    description: str
    lat: float
    lng: float
    elevation: float
    slope: float
    precipitation: float
    soil_type: str
    geological_formation: str
    landslide_risk: int
    landslide_tier: str
    collapse_risk: int
    collapse_tier: str
    overall_risk: int
    overall_tier: str
    report_score: int
    report_tier: str
    report_description: str
    risk_factors: tuple
    recommendations: tuple
    factor_recommendations: tuple
    demographics: Demographics
    emergency_contacts: tuple
    generated_at: datetime


@dataclass(frozen=True)
class ExportedReport:
    filename: str
    content: bytes
    mime: str

    def write(self, directory: Union[str, Path, None] = None) -> Path:
        target_dir = resolve_path(str(directory or settings.export.output_dir))
        path = target_dir / self.filename
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            path.write_bytes(self.content)
        except OSError as e:
            logger.exception(f"Could not write report to {path}")
            raise ExportFailure(f"No se pudo guardar el reporte: {e}") from e
        logger.info(f"Report written: {path}")
        return path


def build_report(
    result: AnalysisResult,
    geo_catalog: Optional[GeoCatalog] = None,
    generated_at: Optional[datetime] = None,
) -> RiskReport:
    geo_catalog = geo_catalog or catalog
    snap = result.snapshot
    return RiskReport(
        municipality=f"{geo_catalog.municipality.name}, {geo_catalog.municipality.department}",
        district=result.district.name,
        description=result.district.description,
        lat=result.coordinates.lat,
        lng=result.coordinates.lng,
        elevation=snap.elevation,
        slope=snap.slope,
        precipitation=snap.precipitation,
        soil_type=snap.soil_type,
        geological_formation=snap.geological_formation,
        landslide_risk=result.composite.landslide_risk,
        landslide_tier=result.landslide.tier,
        collapse_risk=result.composite.collapse_risk,
        collapse_tier=result.composite.collapse_tier,
        overall_risk=result.composite.overall_risk,
        overall_tier=result.composite.tier,
        report_score=result.report.overall_score,
        report_tier=result.report.tier,
        report_description=result.report.description,
        risk_factors=tuple(result.report.factors),
        recommendations=tuple(result.report.recommendations),
        factor_recommendations=tuple(result.landslide.recommendations),
        demographics=result.district.demographics,
        emergency_contacts=tuple(geo_catalog.emergency_contacts),
        generated_at=generated_at or datetime.now(),
    )


class ReportExporter:
    """Render a RiskReport as txt or pdf."""

    def __init__(self, page_size: Optional[str] = None):
        self.page_size = PAGE_SIZES.get(page_size or settings.export.page_size, A4)

    def export(self, report: RiskReport, fmt: Optional[str] = None) -> ExportedReport:
        fmt = (fmt or settings.export.default_format).lower()
        renderers = {"txt": self.render_text, "pdf": self.render_pdf}
        if fmt not in renderers:
            raise ValidationError(f"Formato no soportado: {fmt} (use {', '.join(EXPORT_FORMATS)})")

        try:
            content = renderers[fmt](report)
        except Exception as e:
            logger.exception(f"Report export failed ({fmt}) for {report.district}")
            raise ExportFailure(f"Error al generar el reporte {fmt.upper()}: {e}") from e

        logger.info(f"Report rendered: {report.district} ({fmt}, {len(content)} bytes)")
        return ExportedReport(
            filename=self.filename(report, fmt),
            content=content,
            mime=EXPORT_FORMATS[fmt],
        )

    @staticmethod
    def filename(report: RiskReport, fmt: str) -> str:
        if fmt == "pdf":
            slug = re.sub(r"\s+", "-", report.district).lower()
            return f"analisis-riesgo-geologico-{slug}-{report.generated_at.strftime('%Y-%m-%d')}.pdf"
        name = re.sub(r"\s+", "_", report.district)
        stamp = int(report.generated_at.timestamp() * 1000)
        return f"Reporte_Riesgo_{name}_{stamp}.txt"

    def render_text(self, report: RiskReport) -> bytes:
        rule = "=" * 46
        lines = [
            "REPORTE TÉCNICO DE ANÁLISIS DE RIESGO GEOLÓGICO",
            report.municipality,
            "",
            rule,
            "",
            "INFORMACIÓN GENERAL",
            f"- Vereda: {report.district}",
            f"- Descripción: {report.description}",
            f"- Coordenadas: {report.lat:.6f}, {report.lng:.6f}",
            f"- Fecha de análisis: {report.generated_at.strftime('%d/%m/%Y')}",
            f"- Elevación: {report.elevation} m.s.n.m.",
            f"- Pendiente: {report.slope}°",
            f"- Tipo de suelo: {report.soil_type}",
            f"- Formación geológica: {report.geological_formation}",
            f"- Precipitación anual: {report.precipitation} mm",
            "",
            "ANÁLISIS DE RIESGOS",
            f"- Riesgo de deslizamiento: {report.landslide_risk}% ({report.landslide_tier})",
            f"- Riesgo de colapso: {report.collapse_risk}% ({report.collapse_tier})",
            f"- Riesgo general: {report.overall_risk}%",
            f"- Nivel de riesgo: {report.overall_tier}",
            f"- Evaluación técnica: {report.report_score}% ({report.report_tier})",
            f"  {report.report_description}",
            "",
        ]

        if report.risk_factors:
            lines.append("FACTORES DE RIESGO IDENTIFICADOS")
            lines.extend(f"- {f}" for f in report.risk_factors)
            lines.append("")

        lines.append("RECOMENDACIONES")
        if report.recommendations:
            lines.extend(f"{i}. {rec}" for i, rec in enumerate(report.recommendations, 1))
        else:
            lines.append("No hay recomendaciones específicas disponibles.")
        lines.append("")

        lines.append("RECOMENDACIONES POR FACTOR")
        lines.extend(f"- {rec}" for rec in report.factor_recommendations)
        lines.append("")

        demo = report.demographics
        lines.extend([
            "INFORMACIÓN DE LA VEREDA",
            f"- Población: {demo.population}",
            f"- Actividad principal: {demo.main_activity}",
            f"- Factores de riesgo: {', '.join(demo.risk_factors)}",
            f"- Fortalezas: {', '.join(demo.strengths)}",
            "",
        ])

        if report.emergency_contacts:
            lines.append("CONTACTOS DE EMERGENCIA")
            lines.extend(f"- {c.name}: {c.phone}" for c in report.emergency_contacts)
            lines.append("")

        lines.extend([
            rule,
            f"Generado por {SYSTEM_NAME}",
            report.generated_at.strftime("%d/%m/%Y %H:%M:%S"),
        ])
        return "\n".join(lines).encode("utf-8")

    def render_pdf(self, report: RiskReport) -> bytes:
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=self.page_size,
            rightMargin=2 * cm,
            leftMargin=2 * cm,
            topMargin=2 * cm,
            bottomMargin=2 * cm,
            title=f"Análisis de Riesgo Geológico - {report.district}",
            author=SYSTEM_NAME,
        )

        styles = getSampleStyleSheet()
        title_style = ParagraphStyle(
            "ReportTitle",
            parent=styles["Heading1"],
            fontSize=20,
            textColor=colors.HexColor("#1e3a8a"),
            spaceAfter=6,
        )
        heading_style = ParagraphStyle(
            "ReportHeading",
            parent=styles["Heading2"],
            fontSize=14,
            spaceBefore=14,
            spaceAfter=8,
        )
        body = styles["BodyText"]
        footer_style = ParagraphStyle("ReportFooter", parent=body, fontSize=8, textColor=colors.grey)

        def para(text: str, style=body) -> Paragraph:
            return Paragraph(escape(str(text)), style)

        story = [
            para("Análisis de Riesgo Geológico", title_style),
            para(report.municipality, styles["Heading3"]),
            Spacer(1, 12),
            para("Información de Ubicación", heading_style),
            self._table([
                ["Vereda", report.district],
                ["Descripción", report.description],
                ["Coordenadas", f"{report.lat:.6f}, {report.lng:.6f}"],
                ["Elevación", f"{float(report.elevation):.1f} m"],
                ["Pendiente", f"{float(report.slope):.1f}°"],
                ["Tipo de Suelo", report.soil_type],
                ["Formación Geológica", report.geological_formation],
                ["Precipitación Anual", f"{float(report.precipitation):.0f} mm"],
            ]),
            para("Análisis de Riesgo", heading_style),
            self._table(
                [
                    ["Riesgo de Deslizamiento", f"{report.landslide_risk}%", report.landslide_tier],
                    ["Riesgo de Colapso", f"{report.collapse_risk}%", report.collapse_tier],
                    ["Riesgo General", f"{report.overall_risk}%", report.overall_tier],
                    ["Evaluación Técnica", f"{report.report_score}%", report.report_tier],
                ],
                tier_column=2,
            ),
            Spacer(1, 6),
            para(report.report_description),
        ]

        if report.risk_factors:
            story.append(para("Factores de Riesgo Identificados", heading_style))
            story.extend(para(f"• {f}") for f in report.risk_factors)

        story.append(para("Recomendaciones", heading_style))
        story.extend(para(f"{i}. {rec}") for i, rec in enumerate(report.recommendations, 1))
        story.extend(para(f"• {rec}") for rec in report.factor_recommendations)

        demo = report.demographics
        story.append(para("Información de la Vereda", heading_style))
        story.append(self._table([
            ["Población", demo.population],
            ["Actividad Principal", demo.main_activity],
            ["Factores de Riesgo", ", ".join(demo.risk_factors)],
            ["Fortalezas", ", ".join(demo.strengths)],
        ]))

        if report.emergency_contacts:
            story.append(para("Contactos de Emergencia", heading_style))
            story.append(self._contacts_table(report.emergency_contacts))

        story.extend([
            Spacer(1, 24),
            para(
                f"Generado el {report.generated_at.strftime('%d/%m/%Y')} a las "
                f"{report.generated_at.strftime('%H:%M:%S')} - {SYSTEM_NAME}",
                footer_style,
            ),
        ])

        doc.build(story)
        return buffer.getvalue()

    @staticmethod
    def _table(rows: list, tier_column: Optional[int] = None) -> Table:
        table = Table(rows, hAlign="LEFT", colWidths=[5.5 * cm] + [None] * (len(rows[0]) - 1))
        style = [
            ("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold"),
            ("FONTSIZE", (0, 0), (-1, -1), 10),
            ("GRID", (0, 0), (-1, -1), 0.25, colors.lightgrey),
            ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ]
        if tier_column is not None:
            for i, row in enumerate(rows):
                color = TIER_COLORS.get(row[tier_column])
                if color:
                    style.append(("TEXTCOLOR", (tier_column, i), (tier_column, i), colors.HexColor(color)))
        table.setStyle(TableStyle(style))
        return table

    @staticmethod
    def _contacts_table(contacts: tuple) -> Table:
        rows = [[c.name, c.phone] for c in contacts]
        table = Table(rows, hAlign="LEFT")
        table.setStyle(TableStyle([
            ("BACKGROUND", (0, 0), (-1, -1), colors.HexColor("#ebf5ff")),
            ("BOX", (0, 0), (-1, -1), 0.5, colors.HexColor("#0064c8")),
            ("FONTSIZE", (0, 0), (-1, -1), 10),
        ]))
        return table


exporter = ReportExporter()
