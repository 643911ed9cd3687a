"""Projection of a location onto a hiking route."""

from typing import Optional

from ..models import Coordinate, Route, RouteProjection
from .coords import project_point_onto_segment


def project_location_on_route(location: Coordinate, route: Route) -> Optional[RouteProjection]:
    """Project a location onto the nearest segment of a route.

    Greedy scan over every segment; the projection with the smallest
    distance to ``location`` wins (first one on ties). Returns None when the
    route has fewer than two waypoints.
    """
    if len(route.waypoints) < 2:
        return None

    best: Optional[RouteProjection] = None
    distance_covered = 0.0

    for index, segment in enumerate(route.segments):
        projected = project_point_onto_segment(location, segment.start, segment.end)
        distance = location.distance_to(projected)

        if best is None or distance < best.distance_from_route_m:
            best = RouteProjection(
                projected_location=projected,
                progress_distance_m=distance_covered + segment.start.distance_to(projected),
                distance_from_route_m=distance,
                segment=segment,
                segment_index=index,
            )
        distance_covered += segment.length_m

    return best
