"""
Card lookup with caching.

Checks the LookupCache first and falls back to Scryfall. Successful remote
results are cached under the searched name. Failed lookups leave the cache
untouched.

Concurrent lookups of the same name share one in-flight request.
"""

import asyncio
import logging

from mtgscanner.models.card import CardRecord
from mtgscanner.models.failure import CardNotFoundError
from mtgscanner.services.lookup_cache import LookupCache, normalize_key
from mtgscanner.services.scryfall import ScryfallClient

logger = logging.getLogger(__name__)


class CardLookupService:
    """Resolves card names to records through a cache and Scryfall."""

    def __init__(self, client: ScryfallClient, cache: LookupCache | None = None) -> None:
        self.client = client
        self.cache = cache if cache is not None else LookupCache()
        self._in_flight: dict[str, asyncio.Task[CardRecord | None]] = {}
        self._generation = 0

    async def lookup(self, name: str) -> CardRecord:
        """
        Resolve a card name.

        Raises:
            CardNotFoundError: If Scryfall has no such card (or its response
                could not be decoded)
            NetworkFailureError: If Scryfall could not be reached
        """
        cached = self.cache.get(name)
        if cached is not None:
            logger.debug("CACHE_HIT", extra={"card_name": name})
            return cached

        key = normalize_key(name)
        task = self._in_flight.get(key)
        if task is None:
            task = asyncio.create_task(self._fetch(name, self._generation))
            self._in_flight[key] = task
            task.add_done_callback(lambda done: self._forget(key, done))
        else:
            logger.debug("LOOKUP_COALESCED", extra={"card_name": name})

        # Shield so one cancelled waiter does not cancel the shared request
        record = await asyncio.shield(task)
        if record is None:
            raise CardNotFoundError(name)
        return record

    async def _fetch(self, name: str, generation: int) -> CardRecord | None:
        record = await self.client.fetch_card_by_name(name)
        if record is not None and generation == self._generation:
            self.cache.put(name, record)
        return record

    def _forget(self, key: str, task: asyncio.Task[CardRecord | None]) -> None:
        if self._in_flight.get(key) is task:
            del self._in_flight[key]

    def clear(self) -> None:
        """
        Empty the cache.

        Requests already in flight still answer their callers but no longer
        write to the cache.
        """
        self._generation += 1
        self._in_flight.clear()
        self.cache.clear()
