from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from uuid import UUID

from mtgscanner.models.card import CardCondition, CardRecord, CollectionEntry

# Quantity bounds enforced by callers (API validation, UI steppers).
# ScanCollection itself only guarantees quantity >= 1 for merged entries.
MIN_QUANTITY = 1
MAX_QUANTITY = 99


@dataclass
class ScanCollection:
    """
    Ordered list of scanned cards, most recently added first.

    INVARIANTS:
    - No two entries share (name, set_code, condition, is_foil)
    - Entries are removed, never stored with quantity 0
    """

    entries: list[CollectionEntry] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[CollectionEntry]:
        return iter(self.entries)

    def get(self, entry_id: UUID) -> CollectionEntry | None:
        """Find an entry by id."""
        for entry in self.entries:
            if entry.id == entry_id:
                return entry
        return None

    def add_or_increment(
        self,
        record: CardRecord,
        condition: CardCondition = CardCondition.NEAR_MINT,
        is_foil: bool = False,
    ) -> CollectionEntry:
        """
        Merge a scanned card into the collection.

        An existing entry with the same name, set, condition and finish gets
        one more copy. Otherwise a new single-copy entry is placed first.
        """
        key = (record.name, record.set_code, condition, is_foil)
        for entry in self.entries:
            if entry.merge_key == key:
                entry.quantity += 1
                return entry

        entry = CollectionEntry.from_record(record, condition=condition, is_foil=is_foil)
        self.entries.insert(0, entry)
        return entry

    def update_card(
        self,
        entry_id: UUID,
        condition: CardCondition,
        is_foil: bool,
        quantity: int,
    ) -> CollectionEntry | None:
        """
        Overwrite the editable fields of an entry.

        Unknown ids are ignored and return None. Callers are expected to
        clamp quantity to [MIN_QUANTITY, MAX_QUANTITY].

        If the edit makes the entry identical to another one, the other
        entry is folded into it.
        """
        entry = self.get(entry_id)
        if entry is None:
            return None

        entry.condition = condition
        entry.is_foil = is_foil
        entry.quantity = quantity

        for other in self.entries:
            if other is not entry and other.merge_key == entry.merge_key:
                entry.quantity += other.quantity
                self.entries.remove(other)
                break

        return entry

    def delete_at(self, indices: Iterable[int]) -> list[CollectionEntry]:
        """
        Remove entries at the given positions.

        Positions refer to the list as it was before the call. Out-of-range
        and repeated positions are ignored.

        Returns:
            The removed entries, in list order
        """
        doomed = {i for i in indices if 0 <= i < len(self.entries)}
        removed = [e for i, e in enumerate(self.entries) if i in doomed]
        self.entries = [e for i, e in enumerate(self.entries) if i not in doomed]
        return removed

    def clear(self) -> None:
        self.entries.clear()

    def total_cards(self) -> int:
        """Total number of physical cards."""
        return sum(entry.quantity for entry in self.entries)

    def unique_cards(self) -> int:
        """Number of distinct entries."""
        return len(self.entries)
