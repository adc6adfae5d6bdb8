"""Exceptions raised by the risk engine."""


class GeoRiskError(Exception):
    """Base class for GeoRisk errors."""


class NotFoundError(GeoRiskError):
    """Unknown district, model, scenario or month."""


class ValidationError(GeoRiskError):
    """Input rejected before any synthesis or scoring runs."""


class ExportFailure(GeoRiskError):
    """Report rendering failed. The assessment itself is unaffected."""


class CatalogError(GeoRiskError):
    """Reference data file is missing or inconsistent."""
