"""Tests for Bounds validation and geometry predicates."""
import pytest
from pydantic import ValidationError

from trailside.models import Bounds


def _b(south, west, north, east):
    return Bounds(south=south, west=west, north=north, east=east)


class TestValidation:
    def test_south_greater_than_north_rejected(self):
        with pytest.raises(ValidationError):
            _b(47.0, 7.0, 46.0, 8.0)

    def test_degenerate_bounds_allowed(self):
        b = _b(46.0, 7.0, 46.0, 7.0)
        assert b.lat_range == 0.0
        assert b.area == 0.0

    def test_west_greater_than_east_is_valid(self):
        b = _b(-10.0, 170.0, 10.0, -170.0)
        assert b.crosses_date_line()

    def test_out_of_range_rejected(self):
        with pytest.raises(ValidationError):
            _b(0.0, 0.0, 91.0, 1.0)
        with pytest.raises(ValidationError):
            _b(0.0, -181.0, 1.0, 1.0)

    def test_hashable_and_equal_by_value(self):
        assert _b(1, 2, 3, 4) == _b(1, 2, 3, 4)
        assert {_b(1, 2, 3, 4): "x"}[_b(1, 2, 3, 4)] == "x"


class TestContainsBounds:
    def test_contains_inner(self):
        assert _b(46.0, 7.0, 47.0, 8.0).contains_bounds(_b(46.2, 7.2, 46.8, 7.8))

    def test_contains_itself(self):
        b = _b(46.0, 7.0, 47.0, 8.0)
        assert b.contains_bounds(b)

    def test_north_overflow_not_contained(self):
        outer = _b(46.0, 7.0, 47.0, 8.0)
        assert not outer.contains_bounds(_b(46.2, 7.2, 47.1, 7.8))

    @pytest.mark.parametrize("inner", [
        (45.9, 7.2, 46.8, 7.8),
        (46.2, 6.9, 46.8, 7.8),
        (46.2, 7.2, 46.8, 8.1),
    ])
    def test_any_edge_overflow_not_contained(self, inner):
        assert not _b(46.0, 7.0, 47.0, 8.0).contains_bounds(_b(*inner))

    def test_crossing_outer_contains_piece_on_either_side(self):
        outer = _b(-10.0, 170.0, 10.0, -170.0)
        assert outer.contains_bounds(_b(-5.0, 172.0, 5.0, 178.0))
        assert outer.contains_bounds(_b(-5.0, -178.0, 5.0, -172.0))
        assert outer.contains_bounds(_b(-5.0, 175.0, 5.0, -175.0))

    def test_crossing_outer_does_not_contain_far_side(self):
        outer = _b(-10.0, 170.0, 10.0, -170.0)
        assert not outer.contains_bounds(_b(-5.0, 0.0, 5.0, 10.0))

    def test_non_crossing_outer_does_not_contain_crossing_inner(self):
        outer = _b(-10.0, -170.0, 10.0, 170.0)
        assert not outer.contains_bounds(_b(-5.0, 175.0, 5.0, -175.0))

    def test_whole_world_contains_crossing_inner(self):
        world = _b(-90.0, -180.0, 90.0, 180.0)
        assert world.contains_bounds(_b(-5.0, 175.0, 5.0, -175.0))


class TestContainsCoordinate:
    def test_inside_and_on_edges(self):
        b = _b(46.0, 7.0, 47.0, 8.0)
        assert b.contains_coordinate(46.5, 7.5)
        assert b.contains_coordinate(46.0, 7.0)
        assert b.contains_coordinate(47.0, 8.0)

    def test_outside(self):
        b = _b(46.0, 7.0, 47.0, 8.0)
        assert not b.contains_coordinate(47.01, 7.5)
        assert not b.contains_coordinate(46.5, 6.99)

    def test_crossing_box(self):
        b = _b(-10.0, 170.0, 10.0, -170.0)
        assert b.contains_coordinate(0.0, 179.0)
        assert b.contains_coordinate(0.0, -179.0)
        assert not b.contains_coordinate(0.0, 0.0)


class TestDateLine:
    def test_split_crossing(self):
        east_half, west_half = _b(-10.0, 170.0, 10.0, -170.0).split_by_date_line()
        assert east_half == _b(-10.0, 170.0, 10.0, 180.0)
        assert west_half == _b(-10.0, -180.0, 10.0, -170.0)
        assert not east_half.crosses_date_line()
        assert not west_half.crosses_date_line()

    def test_split_non_crossing_returns_self_twice(self):
        b = _b(0.0, -170.0, 1.0, 170.0)
        assert b.split_by_date_line() == (b, b)

    def test_lon_range_and_center_across_date_line(self):
        b = _b(-10.0, 170.0, 10.0, -170.0)
        assert b.lon_range == pytest.approx(20.0)
        assert abs(b.center_lon) == pytest.approx(180.0)


class TestHelpers:
    def test_intersects(self):
        a = _b(0.0, 0.0, 2.0, 2.0)
        assert a.intersects_bounds(_b(1.0, 1.0, 3.0, 3.0))
        assert not a.intersects_bounds(_b(3.0, 3.0, 4.0, 4.0))
        assert _b(-1.0, 170.0, 1.0, -170.0).intersects_bounds(_b(0.0, -175.0, 0.5, -172.0))

    def test_expanded(self):
        b = _b(46.0, 7.0, 47.0, 8.0).expanded(0.001)
        assert b.south == pytest.approx(45.999)
        assert b.west == pytest.approx(6.999)
        assert b.north == pytest.approx(47.001)
        assert b.east == pytest.approx(8.001)

    def test_expanded_clamps_latitude_and_wraps_longitude(self):
        b = _b(89.5, 179.5, 90.0, 179.9).expanded(1.0)
        assert b.north == 90.0
        assert b.east == pytest.approx(-179.1)
        assert b.crosses_date_line()

    def test_expanded_to_whole_world(self):
        b = _b(0.0, -179.0, 1.0, 179.0).expanded(2.0)
        assert (b.west, b.east) == (-180.0, 180.0)

    def test_overpass_bbox_order(self):
        assert _b(46.0, 7.0, 47.0, 8.0).to_overpass_bbox() == "46.0,7.0,47.0,8.0"

    def test_center_and_area(self):
        b = _b(46.0, 7.0, 47.0, 9.0)
        assert b.center_lat == pytest.approx(46.5)
        assert b.center_lon == pytest.approx(8.0)
        assert b.area == pytest.approx(2.0)
