"""Route tools: project_location."""

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from ..state import state
from ..models import Coordinate
from ..core.route import project_location_on_route
from ._prereqs import require_state


def register_route_tools(mcp: FastMCP):

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=True))
    def project_location(lat: float, lon: float) -> str:
        """Snap a location onto the current route and report progress along it.

        **Requires:** set_route_from_gpx first.

        Args:
            lat: Latitude of the location (degrees).
            lon: Longitude of the location (degrees).
        """
        try:
            require_state(state, route=True)
            location = Coordinate(lat=lat, lon=lon)
        except ValueError as e:
            return f"Error: {e}"

        projection = project_location_on_route(location, state.route)
        if projection is None:
            return "Error: Route has too few waypoints to project onto."

        p = projection.projected_location
        return (
            f"Projected onto segment {projection.segment_index} at {p.lat:.6f}, {p.lon:.6f}: "
            f"{projection.distance_from_route_m:.0f}m from the route, "
            f"{projection.progress_distance_m / 1000:.2f} km of "
            f"{state.route.length_m / 1000:.2f} km covered"
        )
