"""Session state for the trailside MCP server.

Holds the current area of interest, the loaded route, the last fetched
facilities, and the facility service whose cache lives as long as the
server process.
"""

from collections import Counter
from typing import Optional

from pydantic import BaseModel, ConfigDict

from trailside.config import get_settings
from trailside.core.cache import FacilitiesCache
from trailside.core.facilities import FacilitiesService
from trailside.core.overpass import OverpassFacilitiesRepository
from trailside.models import Bounds, Facility, Route


class SessionState(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    bounds: Optional[Bounds] = None
    route: Optional[Route] = None
    facilities: list[Facility] = []

    def summary(self) -> dict:
        return {
            "area": {
                "bounds_set": True,
                "south": self.bounds.south,
                "west": self.bounds.west,
                "north": self.bounds.north,
                "east": self.bounds.east,
                "crosses_date_line": self.bounds.crosses_date_line(),
            } if self.bounds else {"bounds_set": False},
            "route": {
                "loaded": True,
                "id": self.route.id,
                "name": self.route.name,
                "waypoints": len(self.route.waypoints),
                "length_km": round(self.route.length_m / 1000, 2),
            } if self.route else {"loaded": False},
            "facilities": {
                "count": len(self.facilities),
                "by_type": dict(Counter(f.type.value for f in self.facilities)),
            },
        }


# Global session state, one per MCP server process
state = SessionState()

_service: Optional[FacilitiesService] = None


def get_facilities_service() -> FacilitiesService:
    """The process-wide facility service, built from settings on first use."""
    global _service
    if _service is None:
        settings = get_settings()
        _service = FacilitiesService(
            OverpassFacilitiesRepository(settings),
            FacilitiesCache(max_entries=settings.cache_max_entries, ttl_s=settings.cache_ttl_s),
            route_margin_deg=settings.route_margin_deg,
        )
    return _service


def set_facilities_service(service: Optional[FacilitiesService]) -> None:
    """Replace the process-wide service; None rebuilds it on next use."""
    global _service
    _service = service
