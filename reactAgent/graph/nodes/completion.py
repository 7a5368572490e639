"""Completion node: consult the oracle when a reply neither acts nor plans."""

from __future__ import annotations

import logging

from reactAgent.graph.prompts import CORRECTIVE_INSTRUCTION
from reactAgent.graph.state import LoopState
from reactAgent.models.ollama_client import ChatModel
from reactAgent.orchestration.classifiers import ResponseClassifier
from reactAgent.orchestration.completion import CompletionOracle
from reactAgent.utils.error_handler import with_error_boundary
from reactAgent.utils.logging_utils import log_node_entry, log_node_exit

LOGGER = logging.getLogger(__name__)


def build_completion_node(*, model: ChatModel, classifier: ResponseClassifier, prompt_log_length: int = 500):

    @with_error_boundary("completion")
    async def completion_node(state: LoopState) -> LoopState:
        log_node_entry(LOGGER, "completion", state)

        session = state["session"]
        cancel_token = state["cancel_token"]
        cancel_token.raise_if_cancelled()

        last_reply = state.get("last_reply") or ""
        oracle = CompletionOracle(model, classifier, cancel_token, prompt_log_length)
        verdict = await oracle.check(session, state.get("task", ""), last_reply)

        if verdict.complete:
            state["callbacks"].message("assistant", last_reply)
            updates = {"completed": True, "phase_failed": False}
        else:
            session.append_message("user", CORRECTIVE_INSTRUCTION)
            updates = {"completed": False, "phase_failed": False}

        log_node_exit(LOGGER, "completion", updates)
        return updates

    return completion_node
