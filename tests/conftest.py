import asyncio

import pytest

from mtgscanner.models.card import CardRecord
from mtgscanner.services.card_lookup import CardLookupService
from mtgscanner.services.intake_gate import IntakeGate
from mtgscanner.services.lookup_cache import LookupCache
from mtgscanner.services.scanner import ScannerSession


class FakeScryfallClient:
    """In-memory stand-in for ScryfallClient.

    Set `error` to make every lookup raise it. Set `release` to an
    asyncio.Event to hold lookups until the event is set.
    """

    def __init__(self, cards: list[CardRecord]) -> None:
        self.cards = {card.name.lower(): card for card in cards}
        self.error: BaseException | None = None
        self.release: asyncio.Event | None = None
        self.calls: list[str] = []

    async def fetch_card_by_name(self, name: str) -> CardRecord | None:
        self.calls.append(name)
        if self.release is not None:
            await self.release.wait()
        if self.error is not None:
            raise self.error
        return self.cards.get(name.lower())


@pytest.fixture
def lightning_bolt() -> CardRecord:
    return CardRecord(
        name="Lightning Bolt",
        set_name="Limited Edition Alpha",
        set_code="lea",
        external_id="1234",
        finishes=("nonfoil",),
    )


@pytest.fixture
def counterspell() -> CardRecord:
    return CardRecord(
        name="Counterspell",
        set_name="Limited Edition Alpha",
        set_code="lea",
        external_id="5678",
        finishes=("nonfoil",),
    )


@pytest.fixture
def fake_scryfall(lightning_bolt: CardRecord, counterspell: CardRecord) -> FakeScryfallClient:
    return FakeScryfallClient([lightning_bolt, counterspell])


@pytest.fixture
def scanner(fake_scryfall: FakeScryfallClient) -> ScannerSession:
    """Scanner session backed by the fake Scryfall client."""
    lookup = CardLookupService(fake_scryfall, LookupCache(capacity=10))  # type: ignore[arg-type]
    return ScannerSession(lookup=lookup, gate=IntakeGate(cooldown=3.0))


@pytest.fixture
def scryfall_response() -> dict:
    """Sample Scryfall search response for Lightning Bolt."""
    return {
        "object": "list",
        "total_cards": 2,
        "has_more": False,
        "data": [
            {
                "object": "card",
                "name": "Lightning Bolt",
                "set_name": "Limited Edition Alpha",
                "set": "lea",
                "tcgplayer_id": 1234,
                "finishes": ["nonfoil"],
            },
            {
                "object": "card",
                "name": "Lightning Bolt",
                "set_name": "Magic 2010",
                "set": "m10",
                "tcgplayer_id": 33456,
                "finishes": ["nonfoil", "foil"],
            },
        ],
    }
