"""Location resolver: coordinates or district name -> District."""

import math
from typing import Optional

from loguru import logger

from georisk.core.catalog import Coordinates, District, GeoCatalog, catalog
from georisk.core.errors import ValidationError


def _as_number(value, label: str) -> float:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"Falta la {label}")
    if isinstance(value, bool):
        raise ValidationError(f"{label.capitalize()} no numérica: {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{label.capitalize()} no numérica: {value!r}") from None
    if not math.isfinite(number):
        raise ValidationError(f"{label.capitalize()} no válida: {value!r}")
    return number


def validate_coordinates(lat, lng) -> Coordinates:
    """Parse and range-check a decimal-degree pair."""
    lat = _as_number(lat, "latitud")
    lng = _as_number(lng, "longitud")
    if not -90 <= lat <= 90:
        raise ValidationError(f"Latitud fuera de rango (-90..90): {lat}")
    if not -180 <= lng <= 180:
        raise ValidationError(f"Longitud fuera de rango (-180..180): {lng}")
    return Coordinates(lat=lat, lng=lng)


class LocationResolver:
    """Map coordinates or a district name to a catalog district."""

    def __init__(self, geo_catalog: Optional[GeoCatalog] = None):
        self.catalog = geo_catalog or catalog

    def resolve(self, lat=None, lng=None, district_name: Optional[str] = None) -> District:
        # A selected district wins over coordinates
        if district_name:
            return self.catalog.district(district_name)

        if lat is None and lng is None:
            raise ValidationError("Ingresa coordenadas válidas o selecciona una vereda")

        point = validate_coordinates(lat, lng)
        return self.nearest(point)

    def nearest(self, point: Coordinates) -> District:
        """Nearest center by Euclidean distance in degree space; ties keep table order."""
        best = None
        best_distance = math.inf
        for district in self.catalog.districts:
            distance = math.hypot(point.lat - district.center.lat, point.lng - district.center.lng)
            if distance < best_distance:
                best, best_distance = district, distance

        logger.debug(f"Nearest district to ({point.lat}, {point.lng}): {best.name} ({best_distance:.4f} deg)")
        return best


resolver = LocationResolver()
