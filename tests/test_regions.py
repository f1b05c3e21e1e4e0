import pytest
from shapely.geometry import Polygon

from campus_fees.errors import CollaboratorError, ConfigurationError
from campus_fees.services.geospatial import haversine_km, haversine_meters, point_in_polygon
from campus_fees.services.regions.lookup import DeliveryRegion, PolygonRegionLookup, parse_coordinate


def _square(lat: float, lng: float, size: float = 0.01) -> list[tuple[float, float]]:
    return [(lat, lng), (lat, lng + size), (lat + size, lng + size), (lat + size, lng)]


def _lookup() -> PolygonRegionLookup:
    return PolygonRegionLookup(
        [
            DeliveryRegion(id=1, name="North Campus", boundary=_square(30.50, 114.30), rate_multiplier=1.2),
            DeliveryRegion(id=2, name="South Campus", boundary=_square(30.40, 114.30), rate_multiplier=1.6),
            DeliveryRegion(id=3, name="Library", boundary=_square(30.502, 114.302, 0.002), rate_multiplier=2.0, priority=5),
            DeliveryRegion(id=4, name="Closed", boundary=_square(30.60, 114.30), rate_multiplier=3.0, active=False),
        ]
    )


def test_haversine_distance():
    # One degree of latitude is roughly 111 km.
    assert haversine_km(30.0, 114.0, 31.0, 114.0) == pytest.approx(111.19, rel=1e-3)
    assert haversine_meters(30.5, 114.3, 30.5, 114.3) == 0.0
    assert haversine_km(0.0, 0.0, 0.0, 180.0) == pytest.approx(20015.09, rel=1e-4)


def test_point_in_polygon_includes_edges():
    polygon = Polygon([(0, 0), (0, 1), (1, 1), (1, 0)])
    assert point_in_polygon(0.5, 0.5, polygon)
    assert point_in_polygon(0.0, 0.5, polygon)
    assert not point_in_polygon(1.5, 0.5, polygon)


def test_find_region_prefers_priority_and_skips_inactive():
    lookup = _lookup()

    assert lookup.find_region("114.305000,30.505000").name == "North Campus"
    assert lookup.find_region("114.303000,30.503000").name == "Library"
    assert lookup.find_region("114.305000,30.605000") is None


def test_region_rate_averages_both_ends():
    lookup = _lookup()

    same = lookup.region_rate("114.305000,30.505000", "114.306000,30.506000")
    assert same.final_rate == pytest.approx(1.2)
    assert not same.is_cross_region
    assert same.description() == "Inside region North Campus"

    cross = lookup.region_rate("114.305000,30.505000", "114.305000,30.405000")
    assert cross.final_rate == pytest.approx(1.4)
    assert cross.is_cross_region
    assert cross.description() == "Cross-region order from North Campus to South Campus"

    half_outside = lookup.region_rate("114.305000,30.405000", "120.000000,35.000000")
    assert half_outside.final_rate == pytest.approx(1.3)
    assert not half_outside.is_cross_region


def test_region_rate_outside_every_region():
    rate = _lookup().region_rate("120.000000,35.000000", "121.000000,36.000000")
    assert rate.final_rate == 1.0
    assert rate.pickup_region is None and rate.delivery_region is None


def test_lookup_is_cached(monkeypatch):
    lookup = _lookup()
    calls = []
    original = parse_coordinate

    def counting(coordinate):
        calls.append(coordinate)
        return original(coordinate)

    monkeypatch.setattr("campus_fees.services.regions.lookup.parse_coordinate", counting)
    lookup.find_region("114.305000,30.505000")
    lookup.find_region("114.305000,30.505000")

    assert calls == ["114.305000,30.505000"]


@pytest.mark.parametrize("coordinate", ["", "114.3", "abc,def", "200.0,30.0", "114.3,95.0"])
def test_invalid_coordinates_are_rejected(coordinate):
    with pytest.raises(CollaboratorError):
        _lookup().find_region(coordinate)


def test_invalid_regions_are_rejected_at_startup():
    with pytest.raises(ConfigurationError):
        PolygonRegionLookup([DeliveryRegion(id=1, name="Line", boundary=[(30.0, 114.0), (30.1, 114.1)])])
    with pytest.raises(ConfigurationError):
        PolygonRegionLookup([DeliveryRegion(id=1, name="Free", boundary=_square(30.0, 114.0), rate_multiplier=0)])
