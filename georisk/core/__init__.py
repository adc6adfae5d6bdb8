"""Core module."""
from georisk.core.analyzer import RiskAnalyzer, analyzer
from georisk.core.catalog import GeoCatalog, catalog, load_catalog
from georisk.core.errors import CatalogError, ExportFailure, GeoRiskError, NotFoundError, ValidationError
from georisk.core.formatter import format_output
from georisk.core.report import ReportExporter, build_report, exporter
from georisk.core.simulation import SCENARIOS, SimulationEngine, SimulationSession, SimulationState
