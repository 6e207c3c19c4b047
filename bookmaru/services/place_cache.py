"""Short-lived, process-local cache for public place listings.

One ``PlaceReadCache`` lives in ``app.extensions['place_cache']``. Entries
are keyed by (page, limit, search, language) and hold the display-shaped
listing, so a language switch needs fresh entries rather than reusing
another language's.

Entries are never older than the TTL. They are not kept consistent with
writes: a place approved mid-window shows up once its entry expires or the
cache is invalidated.
"""

import logging
import threading
import time
from dataclasses import dataclass, field

from bookmaru.utils.place_helpers import place_row_to_ui_place

logger = logging.getLogger(__name__)

CACHE_TTL_SECONDS = 5 * 60
# Search is free text from anonymous visitors, so the key space is unbounded
MAX_CACHE_ENTRIES = 500


@dataclass
class PlaceListing:
    places: list
    has_more: bool
    total: int


@dataclass
class CacheEntry:
    listing: PlaceListing
    timestamp: float
    language: str
    search: str = field(default='')


class PlaceReadCache:
    """
    Memoize listing reads for identical query shapes.

    Args:
        fetch: ``fetch(page, limit, search) -> list[dict]`` of raw place rows
        clock: returns seconds; monotonic by default, inject a fake in tests
        ttl_seconds: maximum entry age
        max_entries: size cap; the oldest entries are evicted past it
    """

    def __init__(self, fetch, clock=time.monotonic, ttl_seconds: float = CACHE_TTL_SECONDS,
                 max_entries: int = MAX_CACHE_ENTRIES):
        self._fetch = fetch
        self._clock = clock
        self.ttl_seconds = ttl_seconds
        self.max_entries = max(1, int(max_entries))
        self._entries = {}
        self._lock = threading.Lock()

    @staticmethod
    def make_key(page: int, limit: int, search: str, language: str) -> tuple:
        return (page, limit, search, language)

    def _is_fresh(self, entry: CacheEntry) -> bool:
        return self._clock() - entry.timestamp < self.ttl_seconds

    def _evict(self):
        """Drop expired entries, then the oldest ones past max_entries. Caller holds _lock."""
        expired = [key for key, entry in self._entries.items() if not self._is_fresh(entry)]
        for key in expired:
            del self._entries[key]

        overflow = len(self._entries) - self.max_entries + 1
        if overflow > 0:
            oldest = sorted(self._entries, key=lambda key: self._entries[key].timestamp)[:overflow]
            for key in oldest:
                del self._entries[key]

    def get(self, page: int = 0, limit: int = 20, search: str = '', language: str = 'en') -> PlaceListing:
        """Cached listing for this query shape, fetching on a miss.

        Fetch errors propagate and leave the cache untouched.
        """
        search = search or ''
        key = self.make_key(page, limit, search, language)

        with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                if self._is_fresh(entry):
                    logger.debug(f"[CACHE] Hit {key}")
                    return entry.listing
                del self._entries[key]

        logger.debug(f"[CACHE] Miss {key}")
        rows = self._fetch(page, limit, search)
        places = [place_row_to_ui_place(row, language) for row in rows]
        listing = PlaceListing(places=places, has_more=len(places) == limit, total=len(places))

        with self._lock:
            # Concurrent misses on one key: last write wins, data is re-derivable
            self._entries.pop(key, None)
            self._evict()
            self._entries[key] = CacheEntry(
                listing=listing,
                timestamp=self._clock(),
                language=language,
                search=search,
            )
        return listing

    def invalidate(self, language: str | None = None) -> int:
        """Drop entries for one language, or everything. Returns the count removed."""
        with self._lock:
            if language is None:
                removed = len(self._entries)
                self._entries.clear()
            else:
                keys = [key for key, entry in self._entries.items() if entry.language == language]
                for key in keys:
                    del self._entries[key]
                removed = len(keys)
        if removed:
            logger.info(f"[CACHE] Invalidated {removed} entr{'y' if removed == 1 else 'ies'}"
                        f"{f' for {language}' if language else ''}")
        return removed

    def stats(self) -> dict:
        """Cache size and keys, for debugging."""
        with self._lock:
            return {
                'size': len(self._entries),
                'entries': ['_'.join(str(part) for part in key) for key in self._entries],
            }

    def __len__(self):
        return len(self._entries)
