"""Response and request models shared by the API routers."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from mtgscanner.models.card import CardCondition, CollectionEntry
from mtgscanner.models.collection import MAX_QUANTITY, MIN_QUANTITY
from mtgscanner.models.failure import FailureDetail


class EntryResponse(BaseModel):
    """A collection entry as returned by the API."""

    id: UUID
    name: str
    set_name: str
    set_code: str
    external_id: str | None = None
    condition: CardCondition
    is_foil: bool
    finish: str
    quantity: int
    created_at: datetime

    @classmethod
    def from_entry(cls, entry: CollectionEntry) -> "EntryResponse":
        return cls(
            id=entry.id,
            name=entry.name,
            set_name=entry.set_name,
            set_code=entry.set_code,
            external_id=entry.external_id,
            condition=entry.condition,
            is_foil=entry.is_foil,
            finish=entry.finish,
            quantity=entry.quantity,
            created_at=entry.created_at,
        )


class ScanRequest(BaseModel):
    """Request model for submitting recognized text."""

    text: str = Field(
        ...,
        min_length=1,
        description="Card name as recognized by OCR",
        examples=["Lightning Bolt"],
    )


class ScanResponse(BaseModel):
    """Response model for a scan."""

    text: str
    admitted: bool = Field(
        ...,
        description="False if the text repeated the last scan within the cooldown",
    )
    entry: EntryResponse | None = None
    failure: FailureDetail | None = None


class CollectionResponse(BaseModel):
    """Response model for the scanned collection."""

    entries: list[EntryResponse] = Field(default_factory=list)
    total_cards: int = 0
    unique_cards: int = 0
    is_loading: bool = False
    error_message: str | None = None


class EntryUpdateRequest(BaseModel):
    """Request model for editing a collection entry."""

    condition: CardCondition = CardCondition.NEAR_MINT
    is_foil: bool = False
    quantity: int = Field(default=1, ge=MIN_QUANTITY, le=MAX_QUANTITY)


class DeleteRequest(BaseModel):
    """Request model for removing entries by position."""

    indices: list[int] = Field(
        ...,
        description="Positions in the current collection listing",
        examples=[[0, 2]],
    )


class DeleteResponse(BaseModel):
    """Response model for delete operations."""

    removed: int
    message: str = ""
