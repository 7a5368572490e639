"""Caller-facing notification sinks and the consumed tool-provider contract."""

from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Protocol, Set, runtime_checkable

from reactAgent.orchestration.session import ToolCall, ToolResult

LOGGER = logging.getLogger(__name__)


@runtime_checkable
class ToolProvider(Protocol):
    """Executes and parses tool calls on behalf of the engine."""

    async def execute_tool(self, tool_call: ToolCall) -> ToolResult:
        ...

    def parse_tool_calls(self, text: str) -> List[ToolCall]:
        ...


@dataclass
class OrchestrationCallbacks:
    """Fire-and-forget sinks; the engine never waits on them.

    Coroutine-returning callbacks are scheduled on the running loop and not
    awaited; the pending tasks are held until they finish. A callback that
    raises, synchronously or from its coroutine, is logged and otherwise ignored.
    """

    on_progress: Optional[Callable[[str], Any]] = None
    on_tool_execution: Optional[Callable[[ToolCall, ToolResult], Any]] = None
    on_message: Optional[Callable[[str, str], Any]] = None
    _pending: Set[asyncio.Future] = field(default_factory=set, init=False, repr=False, compare=False)

    def progress(self, text: str) -> None:
        LOGGER.debug(f"Progress: {text}")
        self._emit(self.on_progress, text)

    def tool_execution(self, tool_call: ToolCall, result: ToolResult) -> None:
        self._emit(self.on_tool_execution, tool_call, result)

    def message(self, role: str, content: str) -> None:
        LOGGER.info(f"Message to caller [{role}]: {content[:200]}")
        self._emit(self.on_message, role, content)

    def _emit(self, callback: Optional[Callable[..., Any]], *args: Any) -> None:
        if callback is None:
            return
        try:
            outcome = callback(*args)
        except Exception:
            LOGGER.exception(f"Callback {getattr(callback, '__name__', callback)!r} raised")
            return
        if inspect.isawaitable(outcome):
            task = asyncio.ensure_future(outcome)
            self._pending.add(task)
            task.add_done_callback(self._finished)

    def _finished(self, task: asyncio.Future) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            LOGGER.error(f"Async callback raised: {type(error).__name__}: {error}", exc_info=error)


__all__ = ["OrchestrationCallbacks", "ToolProvider"]
