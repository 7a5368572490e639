"""Cooperative cancellation for a running orchestration."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Optional, TypeVar

from reactAgent.utils.error_handler import OrchestrationCancelled

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


class CancellationToken:
    """Signal shared between a caller and one ``orchestrate()`` run.

    Every suspension point (model request, tool call, backoff sleep, node
    entry) checks or races against the token, so ``cancel()`` aborts the
    in-flight await instead of waiting for it to time out.

    Examples:
        >>> token = CancellationToken()
        >>> task = asyncio.create_task(orchestrator.orchestrate(..., cancel_token=token))
        >>> token.cancel("user pressed stop")
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self._reason: Optional[str] = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> str:
        return self._reason or "Orchestration cancelled"

    def cancel(self, reason: Optional[str] = None) -> None:
        if not self._event.is_set():
            self._reason = reason
            LOGGER.info(f"Cancellation requested: {self.reason}")
            self._event.set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise OrchestrationCancelled(self.reason)

    async def sleep(self, delay: float) -> None:
        """Sleep for ``delay`` seconds unless cancelled first."""
        self.raise_if_cancelled()
        if delay <= 0:
            return
        try:
            await asyncio.wait_for(self._event.wait(), timeout=delay)
        except asyncio.TimeoutError:
            return
        raise OrchestrationCancelled(self.reason)

    async def run(self, awaitable: Awaitable[T]) -> T:
        """Await ``awaitable``, abandoning it as soon as the token fires."""
        self.raise_if_cancelled()
        task = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            done, _ = await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            waiter.cancel()
            if not task.done():
                task.cancel()
        if task in done:
            return task.result()
        raise OrchestrationCancelled(self.reason)


__all__ = ["CancellationToken"]
