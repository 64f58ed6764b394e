"""
Scanner session.

THE SINGLE OWNER OF SCAN STATE.

=============================================================================
CONCURRENCY MODEL
=============================================================================

A ScannerSession lives on one asyncio event loop and owns the intake gate,
the lookup cache (through CardLookupService), the collection and the status
message. Every mutation happens on that loop, with no await between reading
and writing shared state.

The Scryfall request is the only suspension point. When it completes, the
awaiting coroutine resumes on the owning loop and merges the result there.

Recognition callbacks running on other threads must enter through
submit_recognized_text(), which hops onto the owning loop.
"""

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from uuid import UUID

from mtgscanner.config import settings
from mtgscanner.models.card import CardCondition, CollectionEntry
from mtgscanner.models.collection import ScanCollection
from mtgscanner.models.failure import ExportError, KnownError
from mtgscanner.services.card_lookup import CardLookupService
from mtgscanner.services.csv_export import export_to_file, to_csv
from mtgscanner.services.intake_gate import IntakeGate
from mtgscanner.services.lookup_cache import LookupCache
from mtgscanner.services.scryfall import ScryfallClient

logger = logging.getLogger(__name__)

UNEXPECTED_FAILURE_MESSAGE = "Failed to lookup card: unexpected error"


@dataclass
class ScanOutcome:
    """Result of feeding one recognized text into the pipeline."""

    text: str
    admitted: bool
    entry: CollectionEntry | None = None
    failure: KnownError | None = None

    @property
    def added(self) -> bool:
        return self.entry is not None


class ScannerSession:
    """Owns the scan pipeline and the collection it builds."""

    def __init__(
        self,
        lookup: CardLookupService,
        gate: IntakeGate | None = None,
        collection: ScanCollection | None = None,
        export_dir: Path | None = None,
    ) -> None:
        self.lookup = lookup
        self.gate = gate if gate is not None else IntakeGate()
        self.collection = collection if collection is not None else ScanCollection()
        self.export_dir = export_dir
        self.error_message: str | None = None

        self._lookups_in_progress = 0
        self._generation = 0
        self._pending: set[asyncio.Task[None]] = set()
        self._loop: asyncio.AbstractEventLoop | None = None

    @property
    def is_loading(self) -> bool:
        return self._lookups_in_progress > 0

    # -------------------------------------------------------------------------
    # Recognized text intake
    # -------------------------------------------------------------------------

    def handle_recognized_text(self, text: str) -> None:
        """
        Accept recognized text from the camera side.

        Must be called on the owning event loop. The lookup runs as a
        background task; use drain() to wait for it.
        """
        self._loop = asyncio.get_running_loop()
        if not self.gate.admit(text):
            return

        task = self._loop.create_task(self._run_scheduled(text))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    def submit_recognized_text(self, text: str) -> None:
        """Thread-safe variant of handle_recognized_text()."""
        if self._loop is None:
            raise RuntimeError("ScannerSession is not attached to an event loop")
        self._loop.call_soon_threadsafe(self.handle_recognized_text, text)

    def attach(self, loop: asyncio.AbstractEventLoop) -> None:
        """Bind the session to the loop that owns it."""
        self._loop = loop

    async def drain(self) -> None:
        """Wait for all scheduled lookups to finish."""
        while self._pending:
            await asyncio.gather(*self._pending)

    async def process_text(self, text: str, now: float | None = None) -> ScanOutcome:
        """
        Run recognized text through the pipeline and wait for the result.

        Args:
            text: Recognized card name
            now: Monotonic timestamp for the intake gate (defaults to now)
        """
        if not self.gate.admit(text, now):
            return ScanOutcome(text=text, admitted=False)
        return await self._lookup_and_add(text)

    async def _run_scheduled(self, text: str) -> None:
        try:
            await self._lookup_and_add(text)
        except Exception:
            logger.exception("Unexpected failure processing %r", text)
            self.error_message = UNEXPECTED_FAILURE_MESSAGE

    async def _lookup_and_add(self, text: str) -> ScanOutcome:
        generation = self._generation
        self._lookups_in_progress += 1
        self.error_message = None

        try:
            record = await self.lookup.lookup(text)
        except KnownError as e:
            logger.info("LOOKUP_FAILED", extra={"text": text, "kind": e.kind.value})
            self.error_message = e.message
            return ScanOutcome(text=text, admitted=True, failure=e)
        finally:
            self._lookups_in_progress -= 1

        if generation != self._generation:
            logger.debug("Dropping result for %r: collection was cleared", text)
            return ScanOutcome(text=text, admitted=True)

        entry = self.collection.add_or_increment(record)
        logger.info(
            "CARD_ADDED",
            extra={"card_name": entry.name, "set_code": entry.set_code, "quantity": entry.quantity},
        )
        return ScanOutcome(text=text, admitted=True, entry=entry)

    # -------------------------------------------------------------------------
    # Collection edits
    # -------------------------------------------------------------------------

    def update_card(
        self,
        entry_id: UUID,
        condition: CardCondition,
        is_foil: bool,
        quantity: int,
    ) -> CollectionEntry | None:
        return self.collection.update_card(entry_id, condition, is_foil, quantity)

    def delete_cards(self, indices: list[int]) -> list[CollectionEntry]:
        return self.collection.delete_at(indices)

    def clear_all(self) -> None:
        """
        Start over: empty collection, cache, intake gate and status.

        Lookups still in flight finish but their results are discarded.
        """
        self._generation += 1
        self.collection.clear()
        self.lookup.clear()
        self.gate.reset()
        self.error_message = None

    # -------------------------------------------------------------------------
    # Export
    # -------------------------------------------------------------------------

    def to_csv(self) -> str:
        return to_csv(self.collection)

    def export_csv(self) -> Path | None:
        """Write the collection CSV to disk. Returns None on failure."""
        try:
            return export_to_file(self.collection, self.export_dir)
        except ExportError as e:
            self.error_message = e.message
            return None


def create_scanner(client: ScryfallClient) -> ScannerSession:
    """Build a scanner session configured from settings."""
    cache = LookupCache(capacity=settings.cache_capacity)
    return ScannerSession(
        lookup=CardLookupService(client, cache),
        gate=IntakeGate(cooldown=settings.intake_cooldown),
        export_dir=Path(settings.export_dir) if settings.export_dir else None,
    )
