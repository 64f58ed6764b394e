"""
Collection CSV export.

Produces a TCGplayer-style inventory CSV:

    Card Name,Set Name,Set Code,SKU,Quantity,Condition,Finish
    "Lightning Bolt","Limited Edition Alpha","lea","1234","4","NM","Normal"

Every data field is quoted with embedded quotes doubled. Leading formula
characters (= + - @ tab CR) are stripped from each field so spreadsheet
apps never evaluate scanned text.
"""

import csv
import logging
import tempfile
import time
from collections.abc import Iterable
from io import StringIO
from pathlib import Path

from mtgscanner.models.card import CollectionEntry
from mtgscanner.models.failure import ExportError

logger = logging.getLogger(__name__)

CSV_HEADER = "Card Name,Set Name,Set Code,SKU,Quantity,Condition,Finish"

FORMULA_PREFIXES = "=+-@\t\r"


def sanitize_field(value: object) -> str:
    """Render a value for export, stripping leading formula characters."""
    return str(value).lstrip(FORMULA_PREFIXES)


def _entry_row(entry: CollectionEntry) -> list[str]:
    fields = [
        entry.name,
        entry.set_name,
        entry.set_code,
        entry.external_id or "",
        entry.quantity,
        entry.condition.value,
        entry.finish,
    ]
    return [sanitize_field(f) for f in fields]


def to_csv(entries: Iterable[CollectionEntry]) -> str:
    """
    Render collection entries as CSV text.

    Args:
        entries: Entries in display order

    Returns:
        CSV with header, one row per entry, each line ending in a newline
    """
    output = StringIO()
    output.write(CSV_HEADER + "\n")

    writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for entry in entries:
        writer.writerow(_entry_row(entry))

    return output.getvalue()


def export_filename(timestamp: float | None = None) -> str:
    """File name for an export taken at `timestamp` (defaults to now)."""
    if timestamp is None:
        timestamp = time.time()
    return f"mtg-collection-{timestamp}.csv"


def export_to_file(
    entries: Iterable[CollectionEntry],
    directory: Path | None = None,
) -> Path:
    """
    Write the collection CSV to a new file.

    Args:
        entries: Entries to export
        directory: Target directory. Defaults to the system temp directory.

    Returns:
        Path to the written file

    Raises:
        ExportError: If the file cannot be written
    """
    if directory is None:
        directory = Path(tempfile.gettempdir())

    path = directory / export_filename()
    try:
        path.write_text(to_csv(entries), encoding="utf-8", newline="")
    except OSError as e:
        logger.error("Failed to write CSV to %s: %s", path, e)
        raise ExportError(str(e)) from e

    logger.info("Exported collection to %s", path)
    return path
