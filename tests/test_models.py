"""Tests for domain Pydantic models."""
import pytest
from pydantic import ValidationError


class TestCoordinate:
    def test_valid_coordinate(self):
        from trailside.models import Coordinate
        c = Coordinate(lat=46.5, lon=7.9)
        assert c.lat == 46.5

    def test_lat_out_of_range(self):
        from trailside.models import Coordinate
        with pytest.raises(ValidationError):
            Coordinate(lat=91.0, lon=0.0)

    def test_lon_out_of_range(self):
        from trailside.models import Coordinate
        with pytest.raises(ValidationError):
            Coordinate(lat=0.0, lon=-181.0)

    def test_is_immutable(self):
        from trailside.models import Coordinate
        c = Coordinate(lat=1.0, lon=2.0)
        with pytest.raises(ValidationError):
            c.lat = 3.0

    def test_distance_one_degree_at_equator(self):
        from trailside.models import Coordinate
        origin = Coordinate(lat=0.0, lon=0.0)
        assert origin.distance_to(Coordinate(lat=0.0, lon=1.0)) == pytest.approx(111194.93, abs=1.0)
        assert origin.distance_to(Coordinate(lat=1.0, lon=0.0)) == pytest.approx(111194.93, abs=1.0)

    def test_distance_diagonal_and_shrinking_longitude(self):
        from trailside.models import Coordinate
        assert Coordinate(lat=0.0, lon=0.0).distance_to(
            Coordinate(lat=1.0, lon=1.0)
        ) == pytest.approx(157249.38, abs=1.0)
        assert Coordinate(lat=1.0, lon=0.0).distance_to(
            Coordinate(lat=1.0, lon=1.0)
        ) == pytest.approx(111177.99, abs=1.0)

    def test_distance_to_self_is_zero(self):
        from trailside.models import Coordinate
        c = Coordinate(lat=46.5, lon=7.9)
        assert c.distance_to(c) == 0.0


class TestFacilityType:
    def test_values_match_osm_amenity_tags(self):
        from trailside.models import FacilityType
        assert FacilityType.DRINKING_WATER.value == "drinking_water"
        assert FacilityType.BIERGARTEN.value == "biergarten"
        assert len(FacilityType) == 10

    def test_from_amenity_known(self):
        from trailside.models import FacilityType
        assert FacilityType.from_amenity("ranger_station") is FacilityType.RANGER_STATION

    def test_from_amenity_unknown_returns_none(self):
        from trailside.models import FacilityType
        assert FacilityType.from_amenity("spa") is None
        assert FacilityType.from_amenity("") is None

    def test_overpass_pattern_lists_every_type(self):
        from trailside.models import FacilityType
        pattern = FacilityType.overpass_pattern()
        assert pattern.split("|") == [t.value for t in FacilityType]

    def test_overpass_pattern_subset(self):
        from trailside.models import FacilityType
        pattern = FacilityType.overpass_pattern([FacilityType.BENCH, FacilityType.BBQ])
        assert pattern == "bench|bbq"


class TestFacility:
    def test_equal_facilities_hash_equal(self):
        from trailside.models import Coordinate, Facility, FacilityType
        a = Facility(type=FacilityType.TOILETS, coordinates=Coordinate(lat=1.0, lon=2.0))
        b = Facility(type="toilets", coordinates=Coordinate(lat=1.0, lon=2.0))
        assert a == b
        assert len({a, b}) == 1

    def test_unknown_type_rejected(self):
        from trailside.models import Coordinate, Facility
        with pytest.raises(ValidationError):
            Facility(type="spa", coordinates=Coordinate(lat=1.0, lon=2.0))


class TestRoute:
    def _route(self):
        from trailside.models import Coordinate, Route
        return Route(
            id="r1",
            waypoints=[
                Coordinate(lat=0.0, lon=0.0),
                Coordinate(lat=0.0, lon=1.0),
                Coordinate(lat=1.0, lon=1.0),
            ],
        )

    def test_route_requires_two_waypoints(self):
        from trailside.models import Coordinate, Route
        with pytest.raises(ValidationError):
            Route(id="bad", waypoints=[Coordinate(lat=0.0, lon=0.0)])

    def test_segments_follow_waypoints(self):
        route = self._route()
        segments = route.segments
        assert len(segments) == 2
        for segment, (start, end) in zip(segments, zip(route.waypoints, route.waypoints[1:])):
            assert segment.start == start
            assert segment.end == end
            assert segment.length_m == pytest.approx(start.distance_to(end))

    def test_length_is_sum_of_segments(self):
        route = self._route()
        assert route.length_m == pytest.approx(111194.93 * 2, abs=5.0)

    def test_bounds_cover_waypoints(self):
        b = self._route().bounds
        assert (b.south, b.west, b.north, b.east) == (0.0, 0.0, 1.0, 1.0)

    def test_bounds_of_route_across_antimeridian_wrap(self):
        from trailside.models import Coordinate, Route
        route = Route(
            id="wrap",
            waypoints=[
                Coordinate(lat=-16.8, lon=179.9),
                Coordinate(lat=-16.7, lon=-179.9),
                Coordinate(lat=-16.6, lon=-179.8),
            ],
        )
        b = route.bounds
        assert b.crosses_date_line()
        assert (b.west, b.east) == (179.9, -179.8)
        assert b.lon_range == pytest.approx(0.3)
        for p in route.waypoints:
            assert b.contains_coordinate(p.lat, p.lon)

    def test_bounds_of_wide_route_not_crossing(self):
        from trailside.models import Coordinate, Route
        route = Route(
            id="wide",
            waypoints=[Coordinate(lat=0.0, lon=-60.0), Coordinate(lat=0.0, lon=60.0)],
        )
        b = route.bounds
        assert not b.crosses_date_line()
        assert (b.west, b.east) == (-60.0, 60.0)
