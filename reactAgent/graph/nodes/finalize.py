"""Finalize node: budget notice and execution summary."""

from __future__ import annotations

import logging

from reactAgent.graph.state import LoopState
from reactAgent.utils.logging_utils import log_node_entry, log_node_exit

LOGGER = logging.getLogger(__name__)


def build_finalize_node():

    async def finalize_node(state: LoopState) -> LoopState:
        log_node_entry(LOGGER, "finalize", state)

        session = state["session"]
        callbacks = state["callbacks"]
        completed = bool(state.get("completed"))

        if not completed:
            max_iterations = state.get("max_iterations", 20)
            LOGGER.warning(f"Stopped after reaching the iteration budget ({max_iterations})")
            callbacks.message("system", f"⚠️ Maximum iterations ({max_iterations}) reached")

        if session.file_changes:
            callbacks.message("system", session.execution_summary())

        updates = {"completed": completed}
        log_node_exit(LOGGER, "finalize", updates)
        return updates

    return finalize_node
