"""Cooperative cancellation token for fetch cycles."""

from __future__ import annotations

import asyncio
import logging

_logger = logging.getLogger(__name__)


class FetchCancelledError(asyncio.CancelledError):
    """Raised by :meth:`CancellationToken.raise_if_cancelled`."""


class CancellationToken:
    """Signal that an in-flight cycle should stop and discard its result.

    The token is a first-class flag: code that is about to publish a result
    checks :attr:`cancelled` explicitly. Cancelling also requests an abort of
    the attached task, which interrupts any pending network await.
    """

    def __init__(self, label: str = "") -> None:
        self.label = label
        self._cancelled = False
        self._event = asyncio.Event()
        self._task: asyncio.Task[None] | None = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def attach(self, task: asyncio.Task[None]) -> None:
        """Bind the task that performs the cycle guarded by this token."""
        self._task = task
        if self._cancelled:
            task.cancel()

    def cancel(self) -> bool:
        """Request cancellation. Returns ``False`` if already cancelled."""
        if self._cancelled:
            return False
        self._cancelled = True
        self._event.set()
        task = self._task
        if task is not None and not task.done():
            _logger.debug("Aborting in-flight request %s", self.label)
            task.cancel()
        return True

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise FetchCancelledError(self.label)

    async def wait(self) -> None:
        """Block until the token is cancelled."""
        await self._event.wait()
