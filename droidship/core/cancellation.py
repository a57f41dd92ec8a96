"""Cooperative cancellation for a running deployment."""

from __future__ import annotations

import threading

from .errors import DeploymentCancelled


class CancellationToken:
    """Flag shared between the deploy flow and whoever may interrupt it.

    The CLI cancels it from a SIGINT handler; an embedding application can
    cancel it from any thread.
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self.reason: str | None = None

    def cancel(self, reason: str = "cancelled") -> None:
        if not self._event.is_set():
            self.reason = reason
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: float) -> bool:
        """Sleep up to ``timeout`` seconds, returning early when cancelled."""
        return self._event.wait(timeout)

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise DeploymentCancelled(self.reason or "cancelled")
