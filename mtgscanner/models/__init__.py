from mtgscanner.models.card import CardCondition, CardRecord, CollectionEntry
from mtgscanner.models.collection import MAX_QUANTITY, MIN_QUANTITY, ScanCollection
from mtgscanner.models.failure import (
    CardNotFoundError,
    DecodeFailureError,
    ExportError,
    FailureDetail,
    FailureKind,
    KnownError,
    NetworkFailureError,
)

__all__ = [
    "CardCondition",
    "CardNotFoundError",
    "CardRecord",
    "CollectionEntry",
    "DecodeFailureError",
    "ExportError",
    "FailureDetail",
    "FailureKind",
    "KnownError",
    "MAX_QUANTITY",
    "MIN_QUANTITY",
    "NetworkFailureError",
    "ScanCollection",
]
