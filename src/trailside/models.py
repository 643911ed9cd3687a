"""Pydantic domain models for bounds, facilities and hiking routes."""

import math
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Mean earth radius in meters
EARTH_RADIUS_M = 6_371_009.0


def _wrap_lon(lon: float) -> float:
    if lon > 180.0:
        return lon - 360.0
    if lon < -180.0:
        return lon + 360.0
    return lon


class Coordinate(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float = Field(ge=-90, le=90)
    lon: float = Field(ge=-180, le=180)

    def distance_to(self, other: "Coordinate") -> float:
        """Great-circle (haversine) distance to another coordinate, in meters."""
        lat1, lat2 = math.radians(self.lat), math.radians(other.lat)
        dlat = lat2 - lat1
        dlon = math.radians(other.lon - self.lon)
        a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
        return 2 * EARTH_RADIUS_M * math.asin(min(1.0, math.sqrt(a)))


class Bounds(BaseModel):
    """Rectangular geographic region.

    ``west > east`` is legal and means the box crosses the antimeridian.
    Instances are immutable and hashable so they can key a cache.
    """
    model_config = ConfigDict(frozen=True)

    south: float = Field(ge=-90, le=90)
    west: float = Field(ge=-180, le=180)
    north: float = Field(ge=-90, le=90)
    east: float = Field(ge=-180, le=180)

    @model_validator(mode="after")
    def check_south_le_north(self) -> "Bounds":
        if self.south > self.north:
            raise ValueError(f"south ({self.south}) must not be greater than north ({self.north})")
        return self

    def crosses_date_line(self) -> bool:
        return self.west > self.east

    def split_by_date_line(self) -> tuple["Bounds", "Bounds"]:
        """Split into two non-crossing boxes; a non-crossing box is returned twice."""
        if not self.crosses_date_line():
            return self, self
        return (
            Bounds(south=self.south, west=self.west, north=self.north, east=180.0),
            Bounds(south=self.south, west=-180.0, north=self.north, east=self.east),
        )

    def _lon_intervals(self) -> list[tuple[float, float]]:
        if self.crosses_date_line():
            return [(self.west, 180.0), (-180.0, self.east)]
        return [(self.west, self.east)]

    def contains_bounds(self, other: "Bounds") -> bool:
        """True if ``other`` lies entirely inside this box (edges inclusive)."""
        if other.south < self.south or other.north > self.north:
            return False
        outer = self._lon_intervals()
        return all(
            any(lo <= inner_lo and inner_hi <= hi for lo, hi in outer)
            for inner_lo, inner_hi in other._lon_intervals()
        )

    def contains_coordinate(self, lat: float, lon: float) -> bool:
        if not self.south <= lat <= self.north:
            return False
        return any(lo <= lon <= hi for lo, hi in self._lon_intervals())

    def intersects_bounds(self, other: "Bounds") -> bool:
        if self.south > other.north or self.north < other.south:
            return False
        return any(
            lo <= other_hi and other_lo <= hi
            for lo, hi in self._lon_intervals()
            for other_lo, other_hi in other._lon_intervals()
        )

    def expanded(self, margin_deg: float, lon_margin_deg: Optional[float] = None) -> "Bounds":
        """Grow the box by ``margin_deg`` on every side, clamped to valid ranges.

        ``lon_margin_deg`` overrides the east/west margin when given.
        """
        lon_margin = margin_deg if lon_margin_deg is None else lon_margin_deg
        south = max(-90.0, self.south - margin_deg)
        north = min(90.0, self.north + margin_deg)
        if self.lon_range + 2 * lon_margin >= 360.0:
            return Bounds(south=south, west=-180.0, north=north, east=180.0)
        return Bounds(
            south=south,
            west=_wrap_lon(self.west - lon_margin),
            north=north,
            east=_wrap_lon(self.east + lon_margin),
        )

    def to_overpass_bbox(self) -> str:
        return f"{self.south},{self.west},{self.north},{self.east}"

    @property
    def lat_range(self) -> float:
        return self.north - self.south

    @property
    def lon_range(self) -> float:
        if self.crosses_date_line():
            return 360.0 - (self.west - self.east)
        return self.east - self.west

    @property
    def area(self) -> float:
        """Area in square degrees."""
        return self.lat_range * self.lon_range

    @property
    def center_lat(self) -> float:
        return (self.north + self.south) / 2

    @property
    def center_lon(self) -> float:
        return _wrap_lon(self.west + self.lon_range / 2)


class FacilityType(str, Enum):
    """OpenStreetMap ``amenity`` values shown as facilities."""

    TOILETS = "toilets"
    PARKING = "parking"
    WASTE_BASKET = "waste_basket"
    SUPERMARKET = "supermarket"
    DRINKING_WATER = "drinking_water"
    RANGER_STATION = "ranger_station"
    BBQ = "bbq"
    BENCH = "bench"
    RESTAURANT = "restaurant"
    BIERGARTEN = "biergarten"

    @classmethod
    def from_amenity(cls, amenity: str) -> Optional["FacilityType"]:
        try:
            return cls(amenity)
        except ValueError:
            return None

    @classmethod
    def overpass_pattern(cls, types: Optional[list["FacilityType"]] = None) -> str:
        """Pipe-separated alternation for an Overpass regex filter."""
        return "|".join(t.value for t in (types or list(cls)))


class Facility(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: FacilityType
    coordinates: Coordinate


class RouteSegment(BaseModel):
    start: Coordinate
    end: Coordinate
    length_m: float = Field(ge=0)


class Route(BaseModel):
    """A hiking route as an ordered polyline of waypoints."""

    id: str
    name: str = ""
    waypoints: list[Coordinate] = Field(min_length=2)

    @property
    def segments(self) -> list[RouteSegment]:
        return [
            RouteSegment(start=a, end=b, length_m=a.distance_to(b))
            for a, b in zip(self.waypoints, self.waypoints[1:])
        ]

    @property
    def length_m(self) -> float:
        return sum(s.length_m for s in self.segments)

    @property
    def bounds(self) -> Bounds:
        """Smallest box holding every waypoint; crosses the antimeridian if that is narrower."""
        lats = [p.lat for p in self.waypoints]
        lons = sorted(p.lon for p in self.waypoints)
        west, east = lons[0], lons[-1]
        # The widest empty longitude gap is left outside the box
        widest_gap = 360.0 - (east - west)
        for before, after in zip(lons, lons[1:]):
            if after - before > widest_gap:
                widest_gap = after - before
                west, east = after, before
        return Bounds(south=min(lats), west=west, north=max(lats), east=east)


class RouteProjection(BaseModel):
    projected_location: Coordinate
    progress_distance_m: float
    distance_from_route_m: float
    segment: RouteSegment
    segment_index: int = Field(ge=0)
