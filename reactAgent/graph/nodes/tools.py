"""Tools node: direct execution of the calls found in a reply."""

from __future__ import annotations

import logging

from reactAgent.graph.state import LoopState
from reactAgent.orchestration.batch_executor import BatchExecutor, format_tool_results
from reactAgent.orchestration.callbacks import ToolProvider
from reactAgent.utils.error_handler import with_error_boundary
from reactAgent.utils.logging_utils import log_node_entry, log_node_exit

LOGGER = logging.getLogger(__name__)


def build_tools_node(*, tools: ToolProvider):

    @with_error_boundary("tools")
    async def tools_node(state: LoopState) -> LoopState:
        log_node_entry(LOGGER, "tools", state)

        session = state["session"]
        callbacks = state["callbacks"]
        state["cancel_token"].raise_if_cancelled()

        tool_calls = state.get("tool_calls") or []
        executor = BatchExecutor(tools, callbacks, state["cancel_token"])
        executed = await executor.execute_batch(session, tool_calls)

        session.append_message("user", format_tool_results(executed))
        callbacks.message("system", f"🔧 Executed {len(executed)} tool(s)")

        updates = {"consecutive_failures": 0, "tool_calls": [], "phase_failed": False}
        log_node_exit(LOGGER, "tools", updates)
        return updates

    return tools_node
