"""Suppression of repeated error reports across watch passes."""


class ErrorDebouncer:
    """Remembers the last reported error message.

    A message is reported only when it differs from the previous report.
    Clearing (after a successful pass) makes any message reportable again.
    """

    def __init__(self) -> None:
        self.last_message: str | None = None

    def should_report(self, message: str) -> bool:
        """Return True if ``message`` should be shown, and remember it."""
        if message == self.last_message:
            return False
        self.last_message = message
        return True

    def clear(self) -> None:
        self.last_message = None
