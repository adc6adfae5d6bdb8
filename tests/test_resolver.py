import math

import pytest

from georisk.core.catalog import Coordinates, catalog
from georisk.core.errors import NotFoundError, ValidationError
from georisk.core.resolver import LocationResolver, validate_coordinates


@pytest.fixture
def resolver():
    return LocationResolver()


class TestValidateCoordinates:
    def test_numeric_strings_accepted(self):
        point = validate_coordinates("6.4625", " -75.5522 ")
        assert point == Coordinates(lat=6.4625, lng=-75.5522)

    @pytest.mark.parametrize("lat,lng", [
        ("abc", "-75.5"),
        ("6.4", ""),
        (None, -75.5),
        (6.4, None),
        (True, -75.5),
        (float("nan"), -75.5),
        (6.4, float("inf")),
        (91, -75.5),
        (-90.5, -75.5),
        (6.4, 180.1),
        (6.4, -181),
    ])
    def test_rejected(self, lat, lng):
        with pytest.raises(ValidationError):
            validate_coordinates(lat, lng)

    def test_range_edges_accepted(self):
        assert validate_coordinates(90, -180).lat == 90
        assert validate_coordinates(-90, 180).lng == 180


class TestResolve:
    def test_district_center_resolves_to_itself(self, resolver):
        for district in catalog.districts:
            assert resolver.resolve(district.center.lat, district.center.lng).name == district.name

    def test_nearest_minimizes_distance(self, resolver):
        point = Coordinates(lat=6.402, lng=-75.548)
        found = resolver.nearest(point)
        best = min(math.hypot(point.lat - d.center.lat, point.lng - d.center.lng) for d in catalog.districts)
        assert math.hypot(point.lat - found.center.lat, point.lng - found.center.lng) == best

    def test_far_away_point_still_resolves(self, resolver):
        assert resolver.resolve(-33.45, -70.66).name in catalog.district_names()

    def test_name_wins_over_coordinates(self, resolver):
        centro = catalog.district("Centro Urbano").center
        assert resolver.resolve(centro.lat, centro.lng, "Vereda La Cuchilla").name == "Vereda La Cuchilla"

    def test_unknown_name(self, resolver):
        with pytest.raises(NotFoundError):
            resolver.resolve(district_name="Vereda Fantasma")

    def test_no_input(self, resolver):
        with pytest.raises(ValidationError):
            resolver.resolve()

    def test_ties_keep_table_order(self, raw_catalog, make_catalog):
        first, second = raw_catalog["districts"][0], raw_catalog["districts"][1]
        first["center"] = {"lat": 1.0, "lng": 0.0}
        second["center"] = {"lat": -1.0, "lng": 0.0}
        tied = LocationResolver(make_catalog(raw_catalog))
        assert tied.nearest(Coordinates(lat=0.0, lng=0.0)).name == first["name"]
