"""
Tests for the scanner session.

The session is the only writer of scan state: lookups suspend on the
network, then merge their result on the owning event loop.
"""

import asyncio
from pathlib import Path

from conftest import FakeScryfallClient

from mtgscanner.models.card import CardCondition
from mtgscanner.models.failure import FailureKind, NetworkFailureError
from mtgscanner.services.scanner import UNEXPECTED_FAILURE_MESSAGE, ScannerSession


class TestProcessText:
    async def test_scan_adds_card(self, scanner: ScannerSession) -> None:
        outcome = await scanner.process_text("Lightning Bolt", now=0.0)

        assert outcome.admitted is True
        assert outcome.added is True
        assert outcome.entry is not None
        assert outcome.entry.name == "Lightning Bolt"
        assert len(scanner.collection) == 1

    async def test_repeat_within_cooldown_ignored(
        self, scanner: ScannerSession, fake_scryfall: FakeScryfallClient
    ) -> None:
        await scanner.process_text("Lightning Bolt", now=0.0)
        outcome = await scanner.process_text("Lightning Bolt", now=1.0)

        assert outcome.admitted is False
        assert outcome.entry is None
        assert scanner.collection.total_cards() == 1
        assert len(fake_scryfall.calls) == 1

    async def test_repeat_after_cooldown_increments_from_cache(
        self, scanner: ScannerSession, fake_scryfall: FakeScryfallClient
    ) -> None:
        await scanner.process_text("Lightning Bolt", now=0.0)
        outcome = await scanner.process_text("LIGHTNING BOLT", now=1.0)
        outcome = await scanner.process_text("Lightning Bolt", now=5.0)

        assert outcome.entry is not None
        assert outcome.entry.quantity == 3
        assert len(scanner.collection) == 1
        assert fake_scryfall.calls == ["Lightning Bolt"]

    async def test_not_found_sets_message_only(
        self, scanner: ScannerSession, fake_scryfall: FakeScryfallClient
    ) -> None:
        outcome = await scanner.process_text("Black Lotus", now=0.0)

        assert outcome.failure is not None
        assert outcome.failure.kind == FailureKind.NOT_FOUND
        assert scanner.error_message == "Card 'Black Lotus' not found"
        assert len(scanner.collection) == 0
        assert len(scanner.lookup.cache) == 0

    async def test_network_failure_sets_distinct_message(
        self, scanner: ScannerSession, fake_scryfall: FakeScryfallClient
    ) -> None:
        fake_scryfall.error = NetworkFailureError("Lightning Bolt", "The request timed out.")

        outcome = await scanner.process_text("Lightning Bolt", now=0.0)

        assert outcome.failure is not None
        assert outcome.failure.kind == FailureKind.NETWORK_FAILURE
        assert scanner.error_message == "Failed to lookup card: The request timed out."
        assert len(scanner.collection) == 0
        assert len(scanner.lookup.cache) == 0

    async def test_ready_for_next_scan_after_failure(
        self, scanner: ScannerSession, fake_scryfall: FakeScryfallClient
    ) -> None:
        fake_scryfall.error = NetworkFailureError("Lightning Bolt", "HTTP 500")
        await scanner.process_text("Lightning Bolt", now=0.0)

        fake_scryfall.error = None
        outcome = await scanner.process_text("Counterspell", now=0.5)

        assert outcome.added is True
        assert scanner.error_message is None

    async def test_is_loading_while_lookup_in_flight(
        self, scanner: ScannerSession, fake_scryfall: FakeScryfallClient
    ) -> None:
        fake_scryfall.release = asyncio.Event()

        pending = asyncio.create_task(scanner.process_text("Lightning Bolt", now=0.0))
        await asyncio.sleep(0)
        assert scanner.is_loading is True

        fake_scryfall.release.set()
        await pending
        assert scanner.is_loading is False


class TestHandleRecognizedText:
    async def test_schedules_lookup(self, scanner: ScannerSession) -> None:
        scanner.handle_recognized_text("Lightning Bolt")
        await scanner.drain()

        assert [e.name for e in scanner.collection] == ["Lightning Bolt"]

    async def test_rapid_repeats_counted_once(self, scanner: ScannerSession) -> None:
        for _ in range(5):
            scanner.handle_recognized_text("Lightning Bolt")
        await scanner.drain()

        assert scanner.collection.total_cards() == 1

    async def test_unexpected_error_recorded(
        self, scanner: ScannerSession, fake_scryfall: FakeScryfallClient
    ) -> None:
        fake_scryfall.error = RuntimeError("boom")

        scanner.handle_recognized_text("Lightning Bolt")
        await scanner.drain()

        assert scanner.error_message == UNEXPECTED_FAILURE_MESSAGE
        assert len(scanner.collection) == 0

    async def test_submit_from_other_thread(self, scanner: ScannerSession) -> None:
        loop = asyncio.get_running_loop()
        scanner.attach(loop)

        await loop.run_in_executor(None, scanner.submit_recognized_text, "Counterspell")
        await asyncio.sleep(0)
        await scanner.drain()

        assert [e.name for e in scanner.collection] == ["Counterspell"]


class TestEdits:
    async def test_update_card(self, scanner: ScannerSession) -> None:
        outcome = await scanner.process_text("Lightning Bolt", now=0.0)
        assert outcome.entry is not None

        entry = scanner.update_card(outcome.entry.id, CardCondition.LIGHTLY_PLAYED, True, 3)

        assert entry is outcome.entry
        assert entry.quantity == 3

    async def test_delete_cards(self, scanner: ScannerSession) -> None:
        await scanner.process_text("Lightning Bolt", now=0.0)
        await scanner.process_text("Counterspell", now=0.1)

        removed = scanner.delete_cards([0])

        assert [e.name for e in removed] == ["Counterspell"]
        assert [e.name for e in scanner.collection] == ["Lightning Bolt"]


class TestClearAll:
    async def test_clears_collection_cache_and_status(
        self, scanner: ScannerSession, fake_scryfall: FakeScryfallClient
    ) -> None:
        await scanner.process_text("Lightning Bolt", now=0.0)
        await scanner.process_text("Black Lotus", now=0.1)

        scanner.clear_all()

        assert len(scanner.collection) == 0
        assert scanner.lookup.cache.get("lightning bolt") is None
        assert scanner.error_message is None

    async def test_same_card_admitted_right_after_clear(self, scanner: ScannerSession) -> None:
        await scanner.process_text("Lightning Bolt", now=0.0)
        scanner.clear_all()

        outcome = await scanner.process_text("Lightning Bolt", now=0.1)

        assert outcome.added is True

    async def test_in_flight_result_discarded(
        self, scanner: ScannerSession, fake_scryfall: FakeScryfallClient
    ) -> None:
        fake_scryfall.release = asyncio.Event()

        pending = asyncio.create_task(scanner.process_text("Lightning Bolt", now=0.0))
        await asyncio.sleep(0)
        scanner.clear_all()
        fake_scryfall.release.set()
        outcome = await pending

        assert outcome.entry is None
        assert len(scanner.collection) == 0
        assert len(scanner.lookup.cache) == 0


class TestExport:
    async def test_to_csv(self, scanner: ScannerSession) -> None:
        await scanner.process_text("Lightning Bolt", now=0.0)

        lines = scanner.to_csv().splitlines()

        assert len(lines) == 2
        assert lines[1].startswith('"Lightning Bolt"')

    async def test_export_csv_writes_file(self, scanner: ScannerSession, tmp_path: Path) -> None:
        scanner.export_dir = tmp_path
        await scanner.process_text("Lightning Bolt", now=0.0)

        path = scanner.export_csv()

        assert path is not None
        assert path.read_text(encoding="utf-8") == scanner.to_csv()

    async def test_export_failure_sets_message(
        self, scanner: ScannerSession, tmp_path: Path
    ) -> None:
        scanner.export_dir = tmp_path / "missing"

        assert scanner.export_csv() is None
        assert scanner.error_message == "Failed to export CSV"
