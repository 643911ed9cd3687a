"""Area definition tools: set_area_from_coordinates, set_route_from_gpx."""

import logging

from gpxpy.gpx import GPXException
from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import ValidationError

from ..state import state
from ..models import Bounds
from ..core.coords import bounds_around
from ..core.gpx import load_route_from_gpx

logger = logging.getLogger(__name__)


def _describe(bounds: Bounds) -> str:
    text = (
        f"S={bounds.south:.6f}, W={bounds.west:.6f}, "
        f"N={bounds.north:.6f}, E={bounds.east:.6f} "
        f"(~{bounds.lat_range * 111_000:.0f}m x {bounds.lon_range * 111_000:.0f}m)"
    )
    if bounds.crosses_date_line():
        text += ", crosses the antimeridian"
    return text


def register_area_tools(mcp: FastMCP):

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def set_area_from_coordinates(
        lat: float | None = None,
        lon: float | None = None,
        radius_m: float | None = None,
        north: float | None = None,
        south: float | None = None,
        east: float | None = None,
        west: float | None = None,
    ) -> str:
        """Define the area of interest by center+radius or explicit bounding box.

        Either provide (lat, lon, radius_m) for a square area around a point,
        or (north, south, east, west) for a rectangular bounding box. A west
        edge greater than the east edge describes a box across the antimeridian.

        **Next:** fetch_facilities.

        Args:
            lat: Center latitude (degrees). Use with lon and radius_m.
            lon: Center longitude (degrees). Use with lat and radius_m.
            radius_m: Half-width in meters around the center point.
            north/south/east/west: Explicit bounding box (degrees).
        """
        try:
            if lat is not None and lon is not None and radius_m is not None:
                bounds = bounds_around(lat, lon, radius_m)
            elif all(v is not None for v in [north, south, east, west]):
                bounds = Bounds(south=south, west=west, north=north, east=east)
            else:
                return "Error: Provide either (lat, lon, radius_m) or (north, south, east, west)."
        except ValidationError as e:
            return f"Error: Invalid area: {e.errors()[0]['msg']}"

        state.bounds = bounds
        # Facilities belong to the previous area
        state.facilities = []
        return f"Area set: {_describe(bounds)}"

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def set_route_from_gpx(file_path: str) -> str:
        """Load a hiking route from a GPX file and use its bounds as the area.

        **Next:** fetch_route_facilities, facilities_for_view or project_location.

        Args:
            file_path: Absolute path to a .gpx file.
        """
        try:
            route = load_route_from_gpx(file_path)
        except FileNotFoundError:
            return f"Error: GPX file not found: {file_path}"
        except (ValueError, GPXException) as e:
            return f"Error: {e}"

        state.route = route
        state.bounds = route.bounds
        state.facilities = []
        logger.info("Loaded route %s with %d waypoints", route.id, len(route.waypoints))

        return (
            f"Route loaded: '{route.name or route.id}', {len(route.waypoints)} waypoints, "
            f"{route.length_m / 1000:.2f} km. Area set: {_describe(route.bounds)}"
        )
