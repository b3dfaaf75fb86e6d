import time
from concurrent.futures import CancelledError
from threading import Event
from typing import Optional


class CancellationToken:
    """Cancellation signal for long running walks.

    Can be cancelled from any thread and optionally expires after `timeout` seconds.
    """

    def __init__(self, timeout: Optional[float] = None) -> None:
        self._event = Event()
        self.deadline: Optional[float] = time.monotonic() + timeout if timeout is not None else None

    def cancel(self) -> None:
        self._event.set()

    @property
    def is_expired(self) -> bool:
        return self.deadline is not None and time.monotonic() >= self.deadline

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set() or self.is_expired

    def check(self) -> None:
        if self._event.is_set():
            raise CancelledError("Operation cancelled")

        if self.is_expired:
            raise CancelledError("Operation deadline exceeded")


def check_canceled(token: Optional[CancellationToken] = None) -> None:
    """Raises `CancelledError` if `token` was cancelled or its deadline passed."""
    if token is not None:
        token.check()
