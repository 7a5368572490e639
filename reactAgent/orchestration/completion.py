"""Completion oracle: asks the model whether the task is finished."""

from __future__ import annotations

import logging
from typing import Optional

from reactAgent.models.ollama_client import ChatModel
from reactAgent.orchestration.classifiers import (
    CompletionVerdict,
    RegexResponseClassifier,
    ResponseClassifier,
)
from reactAgent.orchestration.prompts import COMPLETION_PROMPT
from reactAgent.orchestration.session import SessionState
from reactAgent.utils.cancellation import CancellationToken
from reactAgent.utils.logging_utils import log_prompt
from reactAgent.utils.prompt_builder import PromptBuilder

LOGGER = logging.getLogger(__name__)


def build_completion_prompt(session: SessionState, task: str, last_reply: str) -> str:
    return PromptBuilder.render(
        COMPLETION_PROMPT,
        task=task,
        last_reply=last_reply,
        tool_executions=len(session.tool_history),
        file_changes=len(session.file_changes),
    )


class CompletionOracle:
    """The question is asked on a copy of the transcript and is never recorded in it."""

    def __init__(
        self,
        model: ChatModel,
        classifier: Optional[ResponseClassifier] = None,
        cancel_token: Optional[CancellationToken] = None,
        prompt_log_length: int = 500,
    ):
        self.model = model
        self.classifier = classifier or RegexResponseClassifier()
        self.cancel_token = cancel_token
        self.prompt_log_length = prompt_log_length

    async def check(self, session: SessionState, task: str, last_reply: str) -> CompletionVerdict:
        prompt = build_completion_prompt(session, task, last_reply)
        log_prompt(LOGGER, "completion", prompt, self.prompt_log_length)

        messages = session.transcript() + [{"role": "user", "content": prompt}]
        answer = await self.model.chat(messages, cancel_token=self.cancel_token)

        verdict = self.classifier.parse_completion(answer)
        LOGGER.info(f"Completion verdict: complete={verdict.complete}, reason={verdict.reason}")
        return verdict


__all__ = ["CompletionOracle", "build_completion_prompt"]
