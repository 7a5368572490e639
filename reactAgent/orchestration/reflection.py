"""Reflection engine: asks the model for corrective guidance after repeated failure."""

from __future__ import annotations

import logging
from typing import Optional

from reactAgent.models.ollama_client import ChatModel
from reactAgent.orchestration.callbacks import OrchestrationCallbacks
from reactAgent.orchestration.prompts import REFLECTION_PROMPT
from reactAgent.orchestration.session import SessionState
from reactAgent.utils.cancellation import CancellationToken
from reactAgent.utils.logging_utils import log_agent_response, log_prompt
from reactAgent.utils.prompt_builder import PromptBuilder

LOGGER = logging.getLogger(__name__)

RECENT_ERRORS = 5
RECENT_TOOL_EXECUTIONS = 10
RECENT_FILE_CHANGES = 10
PREVIEW_CHARS = 200


def build_reflection_prompt(session: SessionState) -> str:
    return PromptBuilder.render(
        REFLECTION_PROMPT,
        errors=session.errors[-RECENT_ERRORS:],
        recent_history=session.recent_tool_history(RECENT_TOOL_EXECUTIONS),
        file_changes=session.file_changes[-RECENT_FILE_CHANGES:],
        plan_active=session.plan is not None,
    )


class ReflectionEngine:
    """Sends one reflection prompt and folds the answer into the transcript.

    The plan is left untouched; corrections arrive through the model's
    ordinary replies afterwards.
    """

    def __init__(
        self,
        model: ChatModel,
        callbacks: OrchestrationCallbacks,
        cancel_token: Optional[CancellationToken] = None,
        prompt_log_length: int = 500,
    ):
        self.model = model
        self.callbacks = callbacks
        self.cancel_token = cancel_token
        self.prompt_log_length = prompt_log_length

    async def reflect(self, session: SessionState) -> str:
        prompt = build_reflection_prompt(session)
        log_prompt(LOGGER, "reflection", prompt, self.prompt_log_length)

        session.append_message("user", prompt)
        reflection = await self.model.chat(session.transcript(), cancel_token=self.cancel_token)
        session.append_message("assistant", reflection)
        log_agent_response(LOGGER, reflection)

        preview = reflection[:PREVIEW_CHARS]
        self.callbacks.message("system", f"🤔 Reflection: {preview}{'...' if len(reflection) > PREVIEW_CHARS else ''}")

        LOGGER.info(f"Reflection consumed {len(session.errors)} error(s)")
        session.clear_errors()
        return reflection


__all__ = ["ReflectionEngine", "build_reflection_prompt"]
