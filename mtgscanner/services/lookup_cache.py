"""
Bounded card lookup cache.

Maps a case-insensitive card name to the CardRecord Scryfall returned for
it, so repeated scans of the same card do not hit the network.

EVICTION:
- Oldest insertion goes first when the cache is full (FIFO, not LRU)
- Reads never change eviction order
- Re-inserting a key moves it to the newest position

INVARIANTS:
- len(cache) <= capacity
- Every key appears exactly once in insertion-order tracking
"""

import logging
from collections import OrderedDict

from mtgscanner.config import DEFAULT_CACHE_CAPACITY
from mtgscanner.models.card import CardRecord

logger = logging.getLogger(__name__)


def normalize_key(name: str) -> str:
    """Cache key for a card name."""
    return name.lower()


class LookupCache:
    """Capacity-bounded card record cache with insertion-order eviction."""

    def __init__(self, capacity: int = DEFAULT_CACHE_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError(f"Cache capacity must be at least 1, got {capacity}")
        self.capacity = capacity
        self._entries: OrderedDict[str, CardRecord] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and normalize_key(name) in self._entries

    def get(self, name: str) -> CardRecord | None:
        """Return the cached record for a name, or None."""
        return self._entries.get(normalize_key(name))

    def put(self, name: str, record: CardRecord) -> None:
        """
        Cache a record under a name.

        A new key evicts the oldest entry when the cache is full. An existing
        key is overwritten and becomes the newest entry without evicting
        anything.
        """
        key = normalize_key(name)

        if key in self._entries:
            self._entries.move_to_end(key)
        elif len(self._entries) >= self.capacity:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("CACHE_EVICT", extra={"key": evicted, "capacity": self.capacity})

        self._entries[key] = record

    def clear(self) -> None:
        """Drop every cached record."""
        self._entries.clear()

    def keys(self) -> list[str]:
        """Cached keys, oldest insertion first."""
        return list(self._entries)
