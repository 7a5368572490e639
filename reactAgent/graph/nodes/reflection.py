"""Reflection node: corrective meta-prompt after repeated failure."""

from __future__ import annotations

import asyncio
import logging

from reactAgent.graph.state import LoopState
from reactAgent.models.ollama_client import ChatModel
from reactAgent.orchestration.reflection import ReflectionEngine
from reactAgent.utils.error_handler import OrchestrationCancelled, record_phase_failure
from reactAgent.utils.logging_utils import log_node_entry, log_node_exit

LOGGER = logging.getLogger(__name__)


def build_reflection_node(*, model: ChatModel, prompt_log_length: int = 500):

    async def reflection_node(state: LoopState) -> LoopState:
        log_node_entry(LOGGER, "reflection", state)

        cancel_token = state["cancel_token"]
        cancel_token.raise_if_cancelled()

        engine = ReflectionEngine(model, state["callbacks"], cancel_token, prompt_log_length)
        try:
            await engine.reflect(state["session"])
        except (OrchestrationCancelled, asyncio.CancelledError):
            raise
        except Exception as e:
            record_phase_failure("reflection", state, e)

        # The counter resets whether or not the reflection call itself succeeded
        updates = {"consecutive_failures": 0, "phase_failed": False}
        log_node_exit(LOGGER, "reflection", updates)
        return updates

    return reflection_node
