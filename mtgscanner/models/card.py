from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from uuid import UUID, uuid4


class CardCondition(str, Enum):
    """Physical condition grade, valued by its export abbreviation."""

    NEAR_MINT = "NM"
    LIGHTLY_PLAYED = "LP"
    MODERATELY_PLAYED = "MP"
    HEAVILY_PLAYED = "HP"
    DAMAGED = "DMG"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    CardCondition.NEAR_MINT: "Near Mint",
    CardCondition.LIGHTLY_PLAYED: "Lightly Played",
    CardCondition.MODERATELY_PLAYED: "Moderately Played",
    CardCondition.HEAVILY_PLAYED: "Heavily Played",
    CardCondition.DAMAGED: "Damaged",
}


@dataclass(frozen=True, slots=True)
class CardRecord:
    """
    Canonical card identity resolved from Scryfall.

    Attributes:
        name: Card name as printed (e.g., "Lightning Bolt")
        set_name: Full set name (e.g., "Limited Edition Alpha")
        set_code: Scryfall set code (e.g., "lea")
        external_id: TCGplayer product id, used as the export SKU
        finishes: Available finishes (e.g., ("nonfoil", "foil"))
    """

    name: str
    set_name: str
    set_code: str
    external_id: str | None = None
    finishes: tuple[str, ...] = ()


@dataclass(slots=True)
class CollectionEntry:
    """
    A line item in the scanned collection.

    Identity is `id`. Two entries describe the same stack of cards when
    their merge_key values are equal.
    """

    name: str
    set_name: str
    set_code: str
    external_id: str | None = None
    condition: CardCondition = CardCondition.NEAR_MINT
    is_foil: bool = False
    quantity: int = 1
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def from_record(
        cls,
        record: CardRecord,
        condition: CardCondition = CardCondition.NEAR_MINT,
        is_foil: bool = False,
    ) -> "CollectionEntry":
        return cls(
            name=record.name,
            set_name=record.set_name,
            set_code=record.set_code,
            external_id=record.external_id,
            condition=condition,
            is_foil=is_foil,
        )

    @property
    def merge_key(self) -> tuple[str, str, CardCondition, bool]:
        return (self.name, self.set_code, self.condition, self.is_foil)

    @property
    def finish(self) -> str:
        return "Foil" if self.is_foil else "Normal"
