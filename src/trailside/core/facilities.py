"""Facility queries: cache-then-fetch coordination and display filtering."""

import asyncio
import functools
import logging
from typing import Callable, Optional

from ..models import Bounds, Coordinate, Facility, Route
from .cache import FacilitiesCache
from .overpass import FacilitiesRepository
from .route import project_location_on_route

logger = logging.getLogger(__name__)

# Expands route bounds so facilities right next to the route are included
ROUTE_MARGIN_DEG = 0.001

MIN_ZOOM_FOR_FACILITIES = 13.0
MAX_DISTANCE_FROM_CENTER_TO_ROUTE_M = 3000.0
# Inclusive zoom ranges, first match wins
MAX_FACILITIES_PER_ZOOM = [
    ((13.0, 14.0), 15),
    ((14.0, 15.0), 15),
    ((15.0, 16.0), 20),
    ((16.0, 17.0), 30),
    ((17.0, 18.0), 50),
]


def max_facilities_for_zoom(zoom_level: float) -> int:
    for (low, high), limit in MAX_FACILITIES_PER_ZOOM:
        if low <= zoom_level <= high:
            return limit
    return 0


def filter_for_display(
    facilities: list[Facility],
    bounds: Bounds,
    zoom_level: float,
    route: Route,
) -> Optional[list[Facility]]:
    """Pick the facilities to draw for a map view around a route.

    Returns None when nothing should be shown: zoomed out too far, the view
    center is too far from the route, or the zoom level has no allowance.
    Otherwise returns at most the zoom level's allowance of facilities that
    lie inside ``bounds``.
    """
    if zoom_level < MIN_ZOOM_FOR_FACILITIES:
        return None

    center = Coordinate(lat=bounds.center_lat, lon=bounds.center_lon)
    projection = project_location_on_route(center, route)
    if projection is None or projection.distance_from_route_m > MAX_DISTANCE_FROM_CENTER_TO_ROUTE_M:
        return None

    limit = max_facilities_for_zoom(zoom_level)
    if limit == 0:
        return None

    visible = []
    for facility in facilities:
        if bounds.contains_coordinate(facility.coordinates.lat, facility.coordinates.lon):
            visible.append(facility)
            if len(visible) >= limit:
                break
    return visible


class FacilitiesService:
    """Serves facility queries from the cache, fetching only on a miss.

    Queries contained in a fetch that is still running wait for that fetch
    instead of starting another one. Cancelling a waiting caller never
    cancels a fetch other callers share; a started fetch always runs to
    completion and populates the cache on success.
    """

    def __init__(
        self,
        repository: FacilitiesRepository,
        cache: Optional[FacilitiesCache] = None,
        route_margin_deg: float = ROUTE_MARGIN_DEG,
    ):
        self.repository = repository
        self.cache = cache if cache is not None else FacilitiesCache()
        self.route_margin_deg = route_margin_deg
        self._in_flight: dict[Bounds, asyncio.Task] = {}
        self._callback_tasks: set[asyncio.Task] = set()

    @property
    def in_flight(self) -> int:
        return len(self._in_flight)

    async def get_facilities(self, bounds: Bounds) -> list[Facility]:
        """Facilities inside ``bounds``; raises whatever the repository raised."""
        cached = await self.cache.lookup(bounds)
        if cached is not None:
            logger.debug("Cache hit for %s (%d facilities)", bounds.to_overpass_bbox(), len(cached))
            return cached

        shared = self._find_in_flight(bounds)
        if shared is not None:
            fetched_bounds, task = shared
            logger.debug("Joining in-flight fetch %s", fetched_bounds.to_overpass_bbox())
            facilities = await asyncio.shield(task)
            if fetched_bounds == bounds:
                return list(facilities)
            return [
                f for f in facilities
                if bounds.contains_coordinate(f.coordinates.lat, f.coordinates.lon)
            ]

        task = asyncio.create_task(self._fetch_and_store(bounds))
        self._in_flight[bounds] = task
        task.add_done_callback(functools.partial(self._fetch_done, bounds))
        return list(await asyncio.shield(task))

    def _fetch_done(self, bounds: Bounds, task: asyncio.Task) -> None:
        self._in_flight.pop(bounds, None)
        # Failures are logged in _fetch_and_store; mark them retrieved even if
        # every waiter was cancelled
        if not task.cancelled():
            task.exception()

    def _find_in_flight(self, bounds: Bounds) -> Optional[tuple[Bounds, asyncio.Task]]:
        if bounds in self._in_flight:
            return bounds, self._in_flight[bounds]
        containing = [
            (b, t) for b, t in self._in_flight.items() if b.contains_bounds(bounds)
        ]
        if not containing:
            return None
        return min(containing, key=lambda item: item[0].area)

    async def _fetch_and_store(self, bounds: Bounds) -> list[Facility]:
        logger.info("Fetching facilities for %s", bounds.to_overpass_bbox())
        try:
            facilities = await self.repository.fetch(bounds)
        except Exception as exc:
            logger.warning("Facility fetch for %s failed: %s", bounds.to_overpass_bbox(), exc)
            raise
        await self.cache.store(bounds, facilities)
        return facilities

    def submit(
        self,
        bounds: Bounds,
        on_success: Callable[[list[Facility]], None],
        on_failure: Callable[[Exception], None],
    ) -> asyncio.Task:
        """Callback form of get_facilities. Must be called from a running loop.

        Exactly one of the callbacks is invoked once the query completes,
        never synchronously from within this call. An exception raised by a
        callback is logged and does not fail the task.
        """
        async def run() -> None:
            try:
                facilities = await self.get_facilities(bounds)
            except Exception as exc:
                callback, result = on_failure, exc
            else:
                callback, result = on_success, facilities
            try:
                callback(result)
            except Exception:
                logger.exception("Facility callback for %s raised", bounds.to_overpass_bbox())

        task = asyncio.create_task(run())
        self._callback_tasks.add(task)
        task.add_done_callback(self._callback_tasks.discard)
        return task

    async def fetch_for_route(self, route: Route) -> list[Facility]:
        """Facilities around a route, its bounds grown by the route margin."""
        return await self.get_facilities(route.bounds.expanded(self.route_margin_deg))
