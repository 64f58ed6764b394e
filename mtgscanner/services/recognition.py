"""
Recognition collaborator contract.

OCR itself runs outside this package. This module holds the pieces of the
camera side that the scan pipeline depends on:

- RecognitionThrottle: single-flight cooldown between OCR passes
- extract_card_name: picks the card name out of recognized lines

Callers must not submit more than one recognized text per capture cycle
while the throttle reports itself busy.
"""

import math
import time
from collections.abc import Iterable

from mtgscanner.config import DEFAULT_RECOGNITION_COOLDOWN

# Recognized lines this short are rarely card names
MIN_NAME_LENGTH = 3


class RecognitionThrottle:
    """
    Gate for starting OCR passes.

    A pass may begin only when no pass is running and more than `cooldown`
    seconds have passed since the previous pass began.
    """

    def __init__(self, cooldown: float = DEFAULT_RECOGNITION_COOLDOWN) -> None:
        self.cooldown = cooldown
        self.is_processing = False
        self.last_scan_time: float = -math.inf

    def try_begin(self, now: float | None = None) -> bool:
        """Claim the recognizer for one pass. Returns False if not allowed."""
        if self.is_processing:
            return False

        if now is None:
            now = time.monotonic()
        if now - self.last_scan_time <= self.cooldown:
            return False

        self.is_processing = True
        self.last_scan_time = now
        return True

    def finish(self) -> None:
        """Release the recognizer after a pass."""
        self.is_processing = False


def extract_card_name(lines: Iterable[str]) -> str | None:
    """
    Pick the card name from OCR output.

    The name is the first line long enough to be a name and free of numerals
    (they show up in collector numbers, power/toughness, copyright and
    fractional Un-set stats).
    """
    for line in lines:
        text = line.strip()
        if len(text) < MIN_NAME_LENGTH:
            continue
        if any(ch.isnumeric() for ch in text):
            continue
        return text
    return None
