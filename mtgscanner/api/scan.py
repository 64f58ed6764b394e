"""
Scan API endpoint.

Accepts recognized text from a camera client and runs it through the
intake gate and card lookup.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from mtgscanner.api.deps import get_scanner
from mtgscanner.api.schemas import EntryResponse, ScanRequest, ScanResponse
from mtgscanner.services.scanner import ScannerSession

router = APIRouter(tags=["scan"])


@router.post("/scan", response_model=ScanResponse)
async def scan_text(
    request: ScanRequest,
    scanner: Annotated[ScannerSession, Depends(get_scanner)],
) -> ScanResponse:
    """
    Submit one recognized card name.

    Repeats of the previous scan within the cooldown are not processed
    (`admitted` is false). Lookup failures are reported in `failure` and
    leave the collection unchanged.
    """
    outcome = await scanner.process_text(request.text)

    return ScanResponse(
        text=outcome.text,
        admitted=outcome.admitted,
        entry=EntryResponse.from_entry(outcome.entry) if outcome.entry else None,
        failure=outcome.failure.to_detail() if outcome.failure else None,
    )
