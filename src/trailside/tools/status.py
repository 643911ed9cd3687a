"""Status tool: get_status."""

import json
from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from ..state import state, get_facilities_service


def register_status_tools(mcp: FastMCP):

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=True))
    def get_status() -> str:
        """Return a summary of the current session and the facility cache.

        Shows the area, the loaded route, the last fetched facilities and
        cache hit/miss counters.
        """
        summary = state.summary()
        service = get_facilities_service()
        summary["cache"] = service.cache.stats()
        summary["cache"]["in_flight"] = service.in_flight
        return json.dumps(summary, indent=2)
