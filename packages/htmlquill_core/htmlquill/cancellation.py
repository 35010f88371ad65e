"""Cancellation token shared between a caller and a running conversion."""

from __future__ import annotations

import threading
from typing import Optional

from .exceptions import ConversionCancelled


class CancellationToken:
    """Thread-safe, one-way cancellation flag.

    The caller keeps a reference and calls :meth:`cancel`; the converter and its
    fetch workers poll :attr:`cancelled` or call :meth:`raise_if_cancelled`.
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self._reason: Optional[str] = None

    def cancel(self, reason: Optional[str] = None) -> None:
        """Request cancellation. Calling it more than once keeps the first reason."""
        if not self._event.is_set():
            self._reason = reason
            self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> Optional[str]:
        return self._reason

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until cancelled or until ``timeout`` elapses."""
        return self._event.wait(timeout)

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise ConversionCancelled(details=self._reason)

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self.cancelled})"
