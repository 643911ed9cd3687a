"""Geographic helpers: bounds padding and planar segment projection."""

import math

from ..models import Bounds, Coordinate

# 1 degree latitude ~ 111,000 meters
METERS_PER_DEG_LAT = 111_000.0


def add_padding_to_bounds(bounds: Bounds, padding_m: float) -> Bounds:
    """Add padding in meters around a bounding box."""
    lat_padding = padding_m / METERS_PER_DEG_LAT
    # 1 degree longitude varies with latitude
    cos_lat = max(math.cos(math.radians(bounds.center_lat)), 1e-6)
    lon_padding = padding_m / (METERS_PER_DEG_LAT * cos_lat)

    return bounds.expanded(lat_padding, lon_margin_deg=lon_padding)


def bounds_around(lat: float, lon: float, radius_m: float) -> Bounds:
    """Square box of half-width ``radius_m`` centered on a point."""
    return add_padding_to_bounds(Bounds(south=lat, west=lon, north=lat, east=lon), radius_m)


def project_point_onto_segment(
    point: Coordinate, start: Coordinate, end: Coordinate,
) -> Coordinate:
    """Project ``point`` onto the segment start-end, clamped to its ends.

    Works in an equirectangular frame: longitudes are scaled by the cosine
    of the segment's mean latitude so both axes are roughly in meters.
    """
    lon_scale = math.cos(math.radians((start.lat + end.lat) / 2))

    dx = (end.lon - start.lon) * lon_scale
    dy = end.lat - start.lat
    length_sq = dx * dx + dy * dy
    if length_sq == 0:
        return start

    px = (point.lon - start.lon) * lon_scale
    py = point.lat - start.lat
    t = max(0.0, min(1.0, (px * dx + py * dy) / length_sq))

    return Coordinate(
        lat=start.lat + t * (end.lat - start.lat),
        lon=start.lon + t * (end.lon - start.lon),
    )
