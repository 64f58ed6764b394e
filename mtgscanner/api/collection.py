"""
Collection API endpoints.

Read, edit, delete, clear and export the scanned collection.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response, status

from mtgscanner.api.deps import get_scanner
from mtgscanner.api.schemas import (
    CollectionResponse,
    DeleteRequest,
    DeleteResponse,
    EntryResponse,
    EntryUpdateRequest,
)
from mtgscanner.services.csv_export import export_filename
from mtgscanner.services.scanner import ScannerSession

router = APIRouter(prefix="/collection", tags=["collection"])


def _collection_response(scanner: ScannerSession) -> CollectionResponse:
    return CollectionResponse(
        entries=[EntryResponse.from_entry(e) for e in scanner.collection],
        total_cards=scanner.collection.total_cards(),
        unique_cards=scanner.collection.unique_cards(),
        is_loading=scanner.is_loading,
        error_message=scanner.error_message,
    )


@router.get("", response_model=CollectionResponse)
async def get_collection(
    scanner: Annotated[ScannerSession, Depends(get_scanner)],
) -> CollectionResponse:
    """
    Get the scanned collection.

    Entries are listed most recently added first, which is also the order
    positions in delete requests refer to.
    """
    return _collection_response(scanner)


@router.get("/export")
async def export_collection(
    scanner: Annotated[ScannerSession, Depends(get_scanner)],
) -> Response:
    """Download the collection as CSV."""
    return Response(
        content=scanner.to_csv(),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{export_filename()}"'},
    )


@router.patch("/{entry_id}", response_model=EntryResponse)
async def update_entry(
    entry_id: UUID,
    request: EntryUpdateRequest,
    scanner: Annotated[ScannerSession, Depends(get_scanner)],
) -> EntryResponse:
    """Change condition, finish and quantity of an entry."""
    entry = scanner.update_card(entry_id, request.condition, request.is_foil, request.quantity)
    if entry is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No collection entry with id {entry_id}",
        )
    return EntryResponse.from_entry(entry)


@router.post("/delete", response_model=DeleteResponse)
async def delete_entries(
    request: DeleteRequest,
    scanner: Annotated[ScannerSession, Depends(get_scanner)],
) -> DeleteResponse:
    """
    Remove entries by position.

    Positions refer to the listing before the call. Unknown positions are
    ignored.
    """
    removed = scanner.delete_cards(request.indices)
    return DeleteResponse(removed=len(removed), message=f"Removed {len(removed)} entries.")


@router.delete("", response_model=CollectionResponse)
async def clear_collection(
    scanner: Annotated[ScannerSession, Depends(get_scanner)],
) -> CollectionResponse:
    """Remove every entry and forget all cached lookups."""
    scanner.clear_all()
    return _collection_response(scanner)
