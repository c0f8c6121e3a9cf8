"""Advisory cancellation token handed to handlers that ask for one."""

from __future__ import annotations

import threading


class CancellationToken:
    """Cooperative cancellation signal.

    The framework creates one token per tool call and never cancels it
    itself; handlers may poll :attr:`cancelled` or block on :meth:`wait`.
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self._reason = ""

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> str:
        return self._reason

    def cancel(self, reason: str = "") -> None:
        """Signal cancellation. Later calls keep the first reason."""
        if not self._event.is_set():
            self._reason = reason
            self._event.set()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until cancelled or *timeout* elapses; return whether cancelled."""
        return self._event.wait(timeout)

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self.cancelled})"
