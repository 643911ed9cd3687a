"""MCP server for trailside.

Registers all tools and runs via stdio transport.
"""

import logging
import sys

from mcp.server.fastmcp import FastMCP

from .config import get_settings
from .tools.area import register_area_tools
from .tools.facilities import register_facility_tools
from .tools.route import register_route_tools
from .tools.status import register_status_tools

mcp = FastMCP(
    "trailside",
    instructions="Find hiking facilities (toilets, parking, drinking water, ...) around an area or a GPX route",
)

# Register all tool groups
register_area_tools(mcp)
register_facility_tools(mcp)
register_route_tools(mcp)
register_status_tools(mcp)


def main():
    # stdout carries the MCP protocol, logs go to stderr
    logging.basicConfig(
        stream=sys.stderr,
        level=get_settings().log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
