"""
MTG Scanner services.

Scan pipeline: intake gate, card lookup with caching, and CSV export.
"""

from mtgscanner.services.card_lookup import CardLookupService
from mtgscanner.services.csv_export import export_to_file, sanitize_field, to_csv
from mtgscanner.services.intake_gate import IntakeGate
from mtgscanner.services.lookup_cache import LookupCache, normalize_key
from mtgscanner.services.recognition import (
    RecognitionThrottle,
    extract_card_name,
)
from mtgscanner.services.scanner import ScannerSession, ScanOutcome, create_scanner
from mtgscanner.services.scryfall import ScryfallClient

__all__ = [
    # Lookup
    "CardLookupService",
    "LookupCache",
    "normalize_key",
    "ScryfallClient",
    # Intake
    "IntakeGate",
    "RecognitionThrottle",
    "extract_card_name",
    # Session
    "ScannerSession",
    "ScanOutcome",
    "create_scanner",
    # Export
    "export_to_file",
    "sanitize_field",
    "to_csv",
]
