"""GPX file parsing."""

from pathlib import Path

import gpxpy

from trailside.models import Coordinate, Route


def load_route_from_gpx(filepath: str) -> Route:
    """Build a Route from every track point of a GPX file, in file order.

    Routes (``<rte>``) are used when the file has no tracks.
    """
    with open(filepath, "r") as f:
        gpx = gpxpy.parse(f)

    waypoints = []
    for track in gpx.tracks:
        for segment in track.segments:
            for point in segment.points:
                waypoints.append(Coordinate(lat=point.latitude, lon=point.longitude))

    if not waypoints:
        for rte in gpx.routes:
            for point in rte.points:
                waypoints.append(Coordinate(lat=point.latitude, lon=point.longitude))

    if len(waypoints) < 2:
        raise ValueError(f"GPX file {filepath} has fewer than 2 track points")

    name = gpx.name or (gpx.tracks[0].name if gpx.tracks else None) or ""
    return Route(id=Path(filepath).stem, name=name, waypoints=waypoints)
