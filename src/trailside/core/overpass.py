"""Facility fetching via the Overpass API."""

import logging
from abc import ABC, abstractmethod
from typing import Optional

import httpx

from ..config import Settings, get_settings
from ..models import Bounds, Facility, FacilityType
from .parser import parse_amenities

logger = logging.getLogger(__name__)


class FacilitySourceError(RuntimeError):
    """The facility source answered with a non-success status."""

    def __init__(self, message: str, status_code: Optional[int] = None, server: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.server = server


class FacilitiesRepository(ABC):
    """Remote source of facilities for a bounding box."""

    @abstractmethod
    async def fetch(self, bounds: Bounds) -> list[Facility]:
        """Return every facility inside ``bounds``; raise on failure."""


def build_facilities_query(
    bounds: Bounds,
    types: Optional[list[FacilityType]] = None,
    timeout_s: int = 30,
) -> str:
    """Overpass QL for amenity nodes of the given types inside a non-crossing box."""
    pattern = FacilityType.overpass_pattern(types)
    return (
        f"[out:json][timeout:{timeout_s}];\n"
        "(\n"
        f'  node["amenity"~"^({pattern})$"]({bounds.to_overpass_bbox()});\n'
        ");\n"
        "out geom;"
    )


class OverpassFacilitiesRepository(FacilitiesRepository):
    """Fetches amenity nodes from the configured Overpass servers.

    Servers are tried in order. Transport errors and non-success statuses
    fall through to the next server; once every server has failed the last
    error is raised.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        types: Optional[list[FacilityType]] = None,
    ):
        self.settings = settings or get_settings()
        self.types = types

    async def fetch(self, bounds: Bounds) -> list[Facility]:
        if bounds.crosses_date_line():
            # Overpass bboxes cannot wrap, query each side separately
            east_half, west_half = bounds.split_by_date_line()
            return await self._fetch_box(east_half) + await self._fetch_box(west_half)
        return await self._fetch_box(bounds)

    async def _fetch_box(self, bounds: Bounds) -> list[Facility]:
        query = build_facilities_query(bounds, self.types, self.settings.overpass_query_timeout_s)
        body = await self._query_overpass(query)
        facilities = parse_amenities(body)
        logger.debug("Got %d facilities for %s", len(facilities), bounds.to_overpass_bbox())
        return facilities

    async def _query_overpass(self, query: str) -> str:
        """Execute an Overpass query with server fallback and return the raw body."""
        last_error: Optional[Exception] = None
        async with httpx.AsyncClient(
            timeout=self.settings.http_timeout_s,
            headers={"User-Agent": self.settings.user_agent},
        ) as client:
            for server in self.settings.overpass_servers:
                try:
                    response = await client.post(server, data={"data": query})
                    response.raise_for_status()
                    return response.text
                except httpx.HTTPStatusError as exc:
                    status = exc.response.status_code
                    logger.warning("Overpass server %s returned HTTP %s", server, status)
                    last_error = FacilitySourceError(
                        f"Failed to fetch facilities from {server}. Response code: {status}",
                        status_code=status,
                        server=server,
                    )
                except httpx.TimeoutException as exc:
                    logger.warning("Overpass server %s timed out: %s", server, exc)
                    last_error = exc
                except httpx.TransportError as exc:
                    logger.warning("Overpass server %s failed: %s", server, exc)
                    last_error = exc

        if last_error is None:
            raise FacilitySourceError("No Overpass servers configured")
        logger.warning("All Overpass servers failed for facilities query")
        raise last_error
