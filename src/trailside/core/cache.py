"""In-memory facility cache keyed by the bounds of each completed fetch."""

import asyncio
import logging
import time
from collections import OrderedDict
from typing import Callable, NamedTuple, Optional

from ..models import Bounds, Facility

logger = logging.getLogger(__name__)


class CacheEntry(NamedTuple):
    facilities: list[Facility]
    stored_at: float


class FacilitiesCache:
    """Maps fetched bounds to the full facility list returned for them.

    A query is served from the cache when some stored bounds fully contains
    it; the stored list is then filtered down to the query bounds. When
    several entries contain the query the smallest one is used, and among
    equal areas the most recently stored one.

    By default entries are kept for the lifetime of the cache. ``max_entries``
    evicts the oldest stored entries first; ``ttl_s`` makes entries older
    than that many seconds invisible and drops them on the next access.
    """

    def __init__(
        self,
        max_entries: Optional[int] = None,
        ttl_s: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_entries is not None and max_entries < 1:
            raise ValueError(f"max_entries must be at least 1, got {max_entries}")
        if ttl_s is not None and ttl_s <= 0:
            raise ValueError(f"ttl_s must be positive, got {ttl_s}")
        self.max_entries = max_entries
        self.ttl_s = ttl_s
        self._clock = clock
        self._entries: "OrderedDict[Bounds, CacheEntry]" = OrderedDict()
        self._lock = asyncio.Lock()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, bounds: Bounds) -> bool:
        return bounds in self._entries

    def get_exact(self, bounds: Bounds) -> Optional[list[Facility]]:
        """The full list stored under exactly ``bounds``, if any."""
        entry = self._entries.get(bounds)
        return list(entry.facilities) if entry else None

    def _drop_expired(self) -> None:
        if self.ttl_s is None:
            return
        cutoff = self._clock() - self.ttl_s
        stale = [b for b, entry in self._entries.items() if entry.stored_at < cutoff]
        for b in stale:
            del self._entries[b]
        if stale:
            logger.debug("Dropped %d expired cache entries", len(stale))

    async def lookup(self, bounds: Bounds) -> Optional[list[Facility]]:
        """Facilities inside ``bounds`` from a containing entry, or None on a miss."""
        async with self._lock:
            self._drop_expired()
            best: Optional[tuple[Bounds, CacheEntry]] = None
            # Insertion order is oldest first, so <= hands ties to newer entries
            for key, entry in self._entries.items():
                if key.contains_bounds(bounds) and (best is None or key.area <= best[0].area):
                    best = (key, entry)

            if best is None:
                self.misses += 1
                return None

            self.hits += 1
            return [
                f for f in best[1].facilities
                if bounds.contains_coordinate(f.coordinates.lat, f.coordinates.lon)
            ]

    async def store(self, bounds: Bounds, facilities: list[Facility]) -> None:
        async with self._lock:
            self._entries.pop(bounds, None)
            self._entries[bounds] = CacheEntry(list(facilities), self._clock())
            if self.max_entries is not None:
                while len(self._entries) > self.max_entries:
                    evicted, _ = self._entries.popitem(last=False)
                    logger.debug("Evicted cache entry %s", evicted.to_overpass_bbox())

    async def clear(self) -> None:
        async with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0

    def stats(self) -> dict:
        return {
            "entries": len(self._entries),
            "facilities": sum(len(e.facilities) for e in self._entries.values()),
            "hits": self.hits,
            "misses": self.misses,
            "max_entries": self.max_entries,
            "ttl_s": self.ttl_s,
        }
