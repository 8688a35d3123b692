"""
Cooperative cancellation for long-running scraping batches.
"""

import threading
from typing import Optional

from .errors import OperationCancelled


class CancellationToken:
    """
    Flag observed at every suspension point of a run.

    Delays are taken through wait() so that cancelling interrupts them
    immediately instead of after the full sleep.
    """

    def __init__(self):
        self._event = threading.Event()
        self.reason: Optional[str] = None

    def cancel(self, reason: str = "cancelled") -> None:
        """Request cancellation."""
        self.reason = reason
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        """Raise OperationCancelled if cancellation was requested."""
        if self._event.is_set():
            raise OperationCancelled(f"Operation cancelled: {self.reason}")

    def wait(self, seconds: float) -> None:
        """
        Sleep for the given number of seconds unless cancelled first.

        Raises:
            OperationCancelled: If cancellation is requested before or during the wait
        """
        self.raise_if_cancelled()
        if seconds > 0 and self._event.wait(seconds):
            self.raise_if_cancelled()
