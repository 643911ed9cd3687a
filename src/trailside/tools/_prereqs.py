"""Prerequisite checking helpers for MCP tools."""


def require_state(state, *, bounds: bool = False, route: bool = False) -> None:
    """Raise ValueError with a descriptive message if required state is not set.

    Usage in a tool:
        try:
            require_state(state, route=True)
        except ValueError as e:
            return f"Error: {e}"
    """
    if bounds and state.bounds is None:
        raise ValueError(
            "Set an area first with set_area_from_coordinates or set_route_from_gpx."
        )
    if route and state.route is None:
        raise ValueError(
            "Load a route first with set_route_from_gpx."
        )
