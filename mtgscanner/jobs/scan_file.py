"""
Scan a file of recognized text.

Replays a capture log (one OCR result per line, captured at a fixed
interval) through the scan pipeline and writes the resulting collection
as CSV. Blank lines are captures where nothing was recognized.

    python -m mtgscanner.jobs.scan_file captures.txt --interval 2.0
"""

import argparse
import asyncio
import logging
from pathlib import Path

from mtgscanner.config import settings
from mtgscanner.services.recognition import RecognitionThrottle, extract_card_name
from mtgscanner.services.scanner import create_scanner
from mtgscanner.services.scryfall import ScryfallClient

logger = logging.getLogger(__name__)

DEFAULT_CAPTURE_INTERVAL = 2.0


async def run_scan(
    input_path: Path,
    output_dir: Path | None = None,
    interval: float = DEFAULT_CAPTURE_INTERVAL,
    client: ScryfallClient | None = None,
) -> Path | None:
    """
    Feed every capture in `input_path` through a fresh scanner session.

    Captures arriving while the recognition throttle is still cooling down
    are dropped, the same as frames the camera skips.

    Args:
        input_path: Text file, one recognized line per capture
        output_dir: Where to write the CSV. Defaults to settings/temp dir.
        interval: Seconds between captures, used as the throttle and intake gate clock
        client: Scryfall client to use. A new one is created (and closed) if omitted.
            A client passed in is left open.

    Returns:
        Path of the exported CSV, or None if the export failed
    """
    lines = input_path.read_text(encoding="utf-8").splitlines()
    logger.info("Replaying %d captures from %s", len(lines), input_path)

    owns_client = client is None
    scryfall = client or ScryfallClient()
    try:
        scanner = create_scanner(scryfall)
        if output_dir is not None:
            scanner.export_dir = output_dir
        throttle = RecognitionThrottle(cooldown=settings.recognition_cooldown)

        for capture, line in enumerate(lines):
            now = capture * interval
            if not throttle.try_begin(now=now):
                logger.debug("Capture %d skipped, recognizer cooling down", capture + 1)
                continue

            try:
                name = extract_card_name([line])
                if name is None:
                    continue
                outcome = await scanner.process_text(name, now=now)
            finally:
                throttle.finish()

            if outcome.failure is not None:
                logger.warning("Capture %d: %s", capture + 1, outcome.failure.message)
            elif outcome.entry is not None:
                logger.info(
                    "Capture %d: %s (%s) x%d",
                    capture + 1,
                    outcome.entry.name,
                    outcome.entry.set_code,
                    outcome.entry.quantity,
                )

        logger.info(
            "Scanned %d cards (%d unique)",
            scanner.collection.total_cards(),
            scanner.collection.unique_cards(),
        )
        path = scanner.export_csv()
    finally:
        if owns_client:
            await scryfall.aclose()

    if path is None:
        logger.error("Export failed: %s", scanner.error_message)
    return path


def main() -> None:
    """CLI entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Replay OCR captures into a collection CSV")
    parser.add_argument("input", type=Path, help="File with one recognized line per capture")
    parser.add_argument("--output-dir", type=Path, default=None, help="Directory for the CSV")
    parser.add_argument(
        "--interval",
        type=float,
        default=DEFAULT_CAPTURE_INTERVAL,
        help="Seconds between captures (default: %(default)s)",
    )
    args = parser.parse_args()

    path = asyncio.run(run_scan(args.input, args.output_dir, args.interval))
    if path is None:
        raise SystemExit(1)
    print(path)


if __name__ == "__main__":
    main()
