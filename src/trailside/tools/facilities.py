"""Facility tools: fetch_facilities, fetch_route_facilities, facilities_for_view."""

import logging
from collections import Counter

import httpx
from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import ValidationError

from ..state import state, get_facilities_service
from ..models import Bounds, Facility, FacilityType
from ..core.facilities import filter_for_display
from ..core.overpass import FacilitySourceError
from ..core.parser import FacilityParseError
from ._prereqs import require_state

logger = logging.getLogger(__name__)

# Errors a facility query reports to the caller instead of raising
QUERY_ERRORS = (httpx.HTTPError, FacilitySourceError, FacilityParseError)


def _parse_types(types: list[str] | None) -> list[FacilityType] | None:
    if not types:
        return None
    parsed = []
    for name in types:
        facility_type = FacilityType.from_amenity(name)
        if facility_type is None:
            allowed = ", ".join(t.value for t in FacilityType)
            raise ValueError(f"Unknown facility type '{name}'. Choose from: {allowed}")
        parsed.append(facility_type)
    return parsed


def _format(facilities: list[Facility], limit: int = 50) -> str:
    counts = dict(Counter(f.type.value for f in facilities))
    lines = [f"{len(facilities)} facilities: {counts}"]
    for f in facilities[:limit]:
        lines.append(f"- {f.type.value} at {f.coordinates.lat:.6f}, {f.coordinates.lon:.6f}")
    if len(facilities) > limit:
        lines.append(f"... and {len(facilities) - limit} more")
    return "\n".join(lines)


def register_facility_tools(mcp: FastMCP):

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False, openWorldHint=True))
    async def fetch_facilities(types: list[str] | None = None) -> str:
        """Fetch hiking facilities (toilets, parking, drinking water, ...) in the current area.

        Results are cached per area: any later query inside an area that was
        already fetched is answered without contacting Overpass.
        **Requires:** set_area_from_coordinates or set_route_from_gpx first.

        Args:
            types: Facility types to keep, e.g. ['toilets', 'drinking_water'].
                   Default: all types.
        """
        try:
            require_state(state, bounds=True)
            wanted = _parse_types(types)
        except ValueError as e:
            return f"Error: {e}"

        try:
            facilities = await get_facilities_service().get_facilities(state.bounds)
        except QUERY_ERRORS as e:
            return f"Error: Could not fetch facilities: {e}"

        if wanted:
            facilities = [f for f in facilities if f.type in wanted]
        state.facilities = facilities

        if not facilities:
            logger.debug("fetch_facilities returned zero results for types: %s", types)
            return "Facilities fetched: none found"
        return f"Facilities fetched: {_format(facilities)}"

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False, openWorldHint=True))
    async def fetch_route_facilities() -> str:
        """Fetch every facility along the current route (route bounds plus a small margin).

        **Requires:** set_route_from_gpx first.
        **Next:** facilities_for_view to pick what to draw for a map view.
        """
        try:
            require_state(state, route=True)
        except ValueError as e:
            return f"Error: {e}"

        try:
            facilities = await get_facilities_service().fetch_for_route(state.route)
        except QUERY_ERRORS as e:
            return f"Error: Could not fetch facilities: {e}"

        state.facilities = facilities
        return f"Route facilities fetched: {_format(facilities)}"

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=True))
    def facilities_for_view(
        north: float, south: float, east: float, west: float, zoom_level: float,
    ) -> str:
        """Select the route facilities to display for a map view.

        Nothing is shown below zoom 13 or when the view center is more than
        3 km from the route; otherwise the count is capped by zoom level.
        **Requires:** fetch_route_facilities first.

        Args:
            north/south/east/west: Visible map bounds (degrees).
            zoom_level: Current map zoom level.
        """
        try:
            require_state(state, route=True)
            view = Bounds(south=south, west=west, north=north, east=east)
        except ValueError as e:
            return f"Error: {e}"

        selected = filter_for_display(state.facilities, view, zoom_level, state.route)
        if selected is None:
            return "No facilities to display for this view."
        return f"Display {_format(selected)}"

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=True))
    async def clear_facility_cache() -> str:
        """Forget every cached facility area so the next query goes to Overpass."""
        service = get_facilities_service()
        entries = len(service.cache)
        await service.cache.clear()
        return f"Facility cache cleared ({entries} area(s) dropped)."
