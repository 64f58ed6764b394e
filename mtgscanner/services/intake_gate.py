"""
Intake gate for recognized text.

The camera produces a fresh OCR result every couple of seconds while a card
sits in frame. The gate drops a result when it repeats the last accepted
text within the cooldown window, so one physical card is counted once.

Only the most recently accepted text is remembered. Scanning a different
card in between re-opens the gate for the first one.
"""

import logging
import math
import time

from mtgscanner.config import DEFAULT_INTAKE_COOLDOWN

logger = logging.getLogger(__name__)


class IntakeGate:
    """Single-slot debounce keyed on the last accepted text."""

    def __init__(self, cooldown: float = DEFAULT_INTAKE_COOLDOWN) -> None:
        self.cooldown = cooldown
        self.last_text: str | None = None
        self.last_time: float = -math.inf

    def admit(self, text: str, now: float | None = None) -> bool:
        """
        Decide whether recognized text should be processed.

        Args:
            text: Recognized card name
            now: Monotonic timestamp in seconds. Defaults to time.monotonic().

        Returns:
            False if `text` repeats the last accepted text within the
            cooldown, True otherwise. Only an accept updates the gate.
        """
        if now is None:
            now = time.monotonic()

        if text == self.last_text and now - self.last_time < self.cooldown:
            logger.debug("INTAKE_SUPPRESSED", extra={"text": text})
            return False

        self.last_text = text
        self.last_time = now
        return True

    def reset(self) -> None:
        """Forget the last accepted text."""
        self.last_text = None
        self.last_time = -math.inf
