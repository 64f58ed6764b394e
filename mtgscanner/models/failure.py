"""
Lookup failure classification.

Every failure in the scan pipeline is one of a small set of known kinds.
None of them is fatal: the scanner records a user-facing message and is
ready for the next recognized text.

Failure kinds:
- NOT_FOUND: Scryfall has no card with that exact name
- NETWORK_FAILURE: timeout, connectivity, or unexpected HTTP status
- DECODE_FAILURE: response body was not the expected JSON shape

INVARIANT: a failed lookup never changes the lookup cache or the collection.
"""

from enum import Enum

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Classification of failure types."""

    NOT_FOUND = "not_found"
    NETWORK_FAILURE = "network_failure"
    DECODE_FAILURE = "decode_failure"
    EXPORT_FAILURE = "export_failure"


class FailureDetail(BaseModel):
    """Detailed information about a failure."""

    kind: FailureKind = Field(
        ...,
        description="Classification of the failure",
    )
    message: str = Field(
        ...,
        description="User-appropriate explanation of what went wrong",
    )
    detail: str | None = Field(
        default=None,
        description="Additional technical detail (optional)",
    )


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        status_code: int = 400,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.status_code = status_code
        super().__init__(message)

    def to_detail(self) -> FailureDetail:
        """Convert to a FailureDetail for API responses."""
        return FailureDetail(kind=self.kind, message=self.message, detail=self.detail)


class CardNotFoundError(KnownError):
    """Raised when Scryfall returns no card for the searched name."""

    def __init__(self, card_name: str, detail: str | None = None):
        self.card_name = card_name
        super().__init__(
            kind=FailureKind.NOT_FOUND,
            message=f"Card '{card_name}' not found",
            detail=detail,
            status_code=404,
        )


class NetworkFailureError(KnownError):
    """
    Raised when the remote lookup could not complete.

    Covers timeouts, connection errors and non-404 HTTP statuses.
    No automatic retry is attempted.
    """

    def __init__(self, card_name: str, detail: str):
        self.card_name = card_name
        super().__init__(
            kind=FailureKind.NETWORK_FAILURE,
            message=f"Failed to lookup card: {detail}",
            detail=detail,
            status_code=502,
        )


class DecodeFailureError(CardNotFoundError):
    """
    Raised when the Scryfall response body cannot be decoded.

    Users see the same message as for a missing card; the decode problem
    is only visible in logs and in `detail`.
    """

    def __init__(self, card_name: str, detail: str):
        super().__init__(card_name, detail=detail)
        self.kind = FailureKind.DECODE_FAILURE


class ExportError(KnownError):
    """Raised when the CSV export file cannot be written."""

    def __init__(self, detail: str):
        super().__init__(
            kind=FailureKind.EXPORT_FAILURE,
            message="Failed to export CSV",
            detail=detail,
            status_code=500,
        )
