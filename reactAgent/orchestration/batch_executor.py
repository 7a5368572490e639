"""Parallel batch executor for the tool calls of one model turn."""

from __future__ import annotations

import asyncio
import json
import logging
import time
from typing import List, Optional, Tuple

from reactAgent.orchestration.arguments import validate_and_fix_arguments
from reactAgent.orchestration.callbacks import OrchestrationCallbacks, ToolProvider
from reactAgent.orchestration.session import SessionState, ToolCall, ToolResult
from reactAgent.utils.cancellation import CancellationToken
from reactAgent.utils.error_handler import OrchestrationCancelled
from reactAgent.utils.logging_utils import log_tool_call, log_tool_result

LOGGER = logging.getLogger(__name__)

#: Read-only tools; running them concurrently cannot corrupt workspace state.
PARALLEL_SAFE_TOOLS = frozenset({"read_file", "list_files", "get_file_info", "search_files"})


def is_parallel_safe(tool_call: ToolCall) -> bool:
    return tool_call.name in PARALLEL_SAFE_TOOLS


async def invoke_tool(
    tools: ToolProvider,
    tool_call: ToolCall,
    cancel_token: Optional[CancellationToken] = None,
) -> Tuple[ToolResult, float]:
    """Run one tool call, returning its result and duration in milliseconds.

    Exceptions escaping the provider are converted into failed results so a
    tool can never abort the loop; cancellation still propagates.
    """
    log_tool_call(LOGGER, tool_call.name, tool_call.arguments)
    started = time.perf_counter()
    try:
        if cancel_token is not None:
            result = await cancel_token.run(tools.execute_tool(tool_call))
        else:
            result = await tools.execute_tool(tool_call)
    except (OrchestrationCancelled, asyncio.CancelledError):
        raise
    except Exception as e:
        LOGGER.error(f"Tool provider raised for {tool_call.name}: {e}")
        result = ToolResult.fail(str(e) or type(e).__name__)
    duration_ms = (time.perf_counter() - started) * 1000
    log_tool_result(LOGGER, tool_call.name, result.content if result.success else result.error, result.success)
    return result, duration_ms


class BatchExecutor:
    """Runs read-only calls concurrently, then the rest one at a time in reply order."""

    def __init__(
        self,
        tools: ToolProvider,
        callbacks: OrchestrationCallbacks,
        cancel_token: Optional[CancellationToken] = None,
    ):
        self.tools = tools
        self.callbacks = callbacks
        self.cancel_token = cancel_token

    def _prepare(self, tool_call: ToolCall) -> ToolCall:
        arguments = validate_and_fix_arguments(tool_call.name, tool_call.arguments, "")
        if arguments == tool_call.arguments:
            return tool_call
        return ToolCall(name=tool_call.name, arguments=arguments)

    def _record(self, session: SessionState, tool_call: ToolCall, result: ToolResult, duration_ms: float) -> None:
        session.record_tool_execution(tool_call, result, duration_ms)
        self.callbacks.tool_execution(tool_call, result)

    async def execute_batch(
        self,
        session: SessionState,
        tool_calls: List[ToolCall],
    ) -> List[Tuple[ToolCall, ToolResult]]:
        """Execute ``tool_calls`` and return ``(call, result)`` pairs in request order.

        The returned calls are the ones actually executed, after argument repair.
        """
        prepared = [self._prepare(call) for call in tool_calls]
        results: List[Optional[Tuple[ToolCall, ToolResult]]] = [None] * len(prepared)

        parallel = [(idx, call) for idx, call in enumerate(prepared) if is_parallel_safe(call)]
        sequential = [(idx, call) for idx, call in enumerate(prepared) if not is_parallel_safe(call)]
        LOGGER.info(f"Batch of {len(prepared)} call(s): {len(parallel)} parallel, {len(sequential)} sequential")

        if parallel:
            self.callbacks.progress(f"Executing {len(parallel)} tool(s) in parallel...")
            outcomes = await asyncio.gather(
                *(invoke_tool(self.tools, call, self.cancel_token) for _, call in parallel)
            )
            for (idx, call), (result, duration_ms) in zip(parallel, outcomes):
                self._record(session, call, result, duration_ms)
                results[idx] = (call, result)

        for idx, call in sequential:
            if self.cancel_token is not None:
                self.cancel_token.raise_if_cancelled()
            self.callbacks.progress(f"Executing: {call.name}...")
            result, duration_ms = await invoke_tool(self.tools, call, self.cancel_token)
            self._record(session, call, result, duration_ms)
            results[idx] = (call, result)

        return [pair for pair in results if pair is not None]


def format_tool_results(executed: List[Tuple[ToolCall, ToolResult]]) -> str:
    """Render executed calls as the ``Tool execution results`` transcript message."""
    blocks = []
    for call, result in executed:
        lines = [
            f"Tool: {call.name}",
            f"Arguments: {json.dumps(call.arguments, ensure_ascii=False, default=str)}",
            f"Success: {'true' if result.success else 'false'}",
        ]
        if result.success:
            lines.append(f"Result: {result.content or ''}")
        else:
            lines.append(f"Error: {result.error or 'Unknown error'}")
        blocks.append("\n".join(lines))

    return (
        "Tool execution results:\n"
        + "\n\n".join(blocks)
        + "\n\nContinue with the task. If more steps are needed, use tools to complete them."
    )


__all__ = ["PARALLEL_SAFE_TOOLS", "BatchExecutor", "format_tool_results", "invoke_tool", "is_parallel_safe"]
