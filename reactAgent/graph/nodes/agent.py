"""Agent node: one model turn at the start of every iteration."""

from __future__ import annotations

import asyncio
import logging

from reactAgent.graph.state import LoopState
from reactAgent.models.ollama_client import ChatModel
from reactAgent.orchestration.callbacks import ToolProvider
from reactAgent.orchestration.classifiers import ResponseClassifier
from reactAgent.utils.error_handler import OrchestrationCancelled, record_phase_failure
from reactAgent.utils.logging_utils import log_agent_response, log_node_entry, log_node_exit

LOGGER = logging.getLogger(__name__)


def build_agent_node(*, model: ChatModel, tools: ToolProvider, classifier: ResponseClassifier):
    """Create the agent node bound to a model client and tool provider."""

    async def agent_node(state: LoopState) -> LoopState:
        log_node_entry(LOGGER, "agent", state)

        session = state["session"]
        callbacks = state["callbacks"]
        cancel_token = state["cancel_token"]
        cancel_token.raise_if_cancelled()

        # The iteration counts even when the model call fails
        iteration = state.get("iteration", 0) + 1
        status = "executing" if session.plan is not None else "planning"
        callbacks.progress(f"Iteration {iteration}/{state.get('max_iterations', 20)} - {status}")

        try:
            reply = await model.chat(session.transcript(), cancel_token=cancel_token)
        except (OrchestrationCancelled, asyncio.CancelledError):
            raise
        except Exception as e:
            updates = record_phase_failure("agent", state, e)
            updates.update({"iteration": iteration, "tool_calls": [], "last_reply": None, "action_intent": False})
            log_node_exit(LOGGER, "agent", updates)
            return updates

        session.append_message("assistant", reply)
        log_agent_response(LOGGER, reply)

        tool_calls = tools.parse_tool_calls(reply)
        updates = {
            "iteration": iteration,
            "last_reply": reply,
            "tool_calls": tool_calls,
            "action_intent": classifier.has_action_intent(reply),
            "phase_failed": False,
        }
        log_node_exit(LOGGER, "agent", updates)
        return updates

    return agent_node
