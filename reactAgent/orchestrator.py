"""Public entry point: ``Orchestrator.orchestrate()``."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from reactAgent.config.settings import Settings, get_settings
from reactAgent.graph.builder import build_dialogue_graph, recursion_limit_for
from reactAgent.graph.prompts import build_system_message
from reactAgent.graph.state import LoopState
from reactAgent.models.ollama_client import ChatModel, OllamaChatClient
from reactAgent.orchestration.callbacks import OrchestrationCallbacks, ToolProvider
from reactAgent.orchestration.classifiers import ResponseClassifier
from reactAgent.orchestration.execution_engine import DependencyGate, SleepFn
from reactAgent.orchestration.plan_builder import KNOWN_TOOLS, PlanBuilder
from reactAgent.orchestration.session import MAX_STEP_RETRIES, SessionState, ToolCall, ToolResult
from reactAgent.utils.cancellation import CancellationToken
from reactAgent.utils.error_handler import OrchestrationCancelled
from reactAgent.utils.logging_utils import log_user_message

LOGGER = logging.getLogger(__name__)

ModelFactory = Callable[[str, str], ChatModel]


class Orchestrator:
    """Drives the dialogue loop for one conversation.

    An orchestrator owns exactly one ``SessionState``; successive
    ``orchestrate()`` calls continue the same transcript and logs. Calls must
    be serialized: running two ``orchestrate()`` coroutines on the same
    instance concurrently is unsupported. Use one instance per conversation,
    or ``reset()`` to start over.

    Args:
        tools: Tool provider (default: ``LocalToolkit`` over the workspace)
        model_factory: ``(endpoint, model) -> ChatModel`` (default: ``OllamaChatClient``)
        classifier: Action-intent / completion classifier
        max_iterations: Iteration budget (default from settings: 20)
        reflection_threshold: Consecutive failures before reflecting (default: 3)
        step_max_retries: Attempts per plan step and engine call (default: 3)
        retry_backoff_base: Seconds; delay before attempt n is base**n (default: 2.0)
        dependency_gate: Plan dependency policy (default: gate-by-attempt)
        sleep: Backoff sleep override
        settings: Settings instance (default: ``get_settings()``)
    """

    def __init__(
        self,
        *,
        tools: Optional[ToolProvider] = None,
        model_factory: Optional[ModelFactory] = None,
        classifier: Optional[ResponseClassifier] = None,
        max_iterations: Optional[int] = None,
        reflection_threshold: Optional[int] = None,
        step_max_retries: Optional[int] = None,
        retry_backoff_base: Optional[float] = None,
        dependency_gate: Optional[DependencyGate] = None,
        sleep: Optional[SleepFn] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        policy = self.settings.orchestration

        if tools is None:
            from reactAgent.tools import LocalToolkit

            tools = LocalToolkit()
        self.tools = tools
        self.model_factory = model_factory or self._default_model_factory
        self.classifier = classifier
        self.max_iterations = max_iterations if max_iterations is not None else policy.max_iterations
        self.reflection_threshold = (
            reflection_threshold if reflection_threshold is not None else policy.reflection_threshold
        )
        self.step_max_retries = step_max_retries if step_max_retries is not None else policy.step_max_retries
        self.retry_backoff_base = retry_backoff_base if retry_backoff_base is not None else policy.retry_backoff_base
        if not 1 <= self.step_max_retries <= MAX_STEP_RETRIES:
            raise ValueError(f"step_max_retries must be between 1 and {MAX_STEP_RETRIES}, got {self.step_max_retries}")
        if self.max_iterations < 1 or self.reflection_threshold < 1:
            raise ValueError("max_iterations and reflection_threshold must be at least 1")
        self.dependency_gate = DependencyGate(dependency_gate or policy.dependency_gate)
        self.sleep = sleep
        self._session = SessionState()

    @property
    def session(self) -> SessionState:
        return self._session

    @property
    def tool_names(self):
        return list(getattr(self.tools, "tool_names", None) or sorted(KNOWN_TOOLS))

    def reset(self) -> None:
        """Discard the conversation and start a fresh session."""
        LOGGER.info("Session reset")
        self._session = SessionState()

    def _default_model_factory(self, endpoint: str, model: str) -> ChatModel:
        return OllamaChatClient.from_settings(endpoint, model, settings=self.settings)

    async def orchestrate(
        self,
        user_message: str,
        system_message: str,
        model: Optional[str] = None,
        endpoint: Optional[str] = None,
        on_progress: Optional[Callable[[str], Any]] = None,
        on_tool_execution: Optional[Callable[[ToolCall, ToolResult], Any]] = None,
        on_message: Optional[Callable[[str, str], Any]] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> None:
        """Run the dialogue loop for one user message.

        Results are delivered only through the callbacks. Returns when the
        task is confirmed complete, the iteration budget is spent, or the
        token is cancelled.
        """
        cancel_token = cancel_token or CancellationToken()
        callbacks = OrchestrationCallbacks(
            on_progress=on_progress,
            on_tool_execution=on_tool_execution,
            on_message=on_message,
        )
        session = self._session
        model = model or self.settings.model.model
        endpoint = endpoint or self.settings.model.endpoint

        log_user_message(LOGGER, user_message)
        session.set_system_message(build_system_message(system_message, session, self.tool_names))
        session.append_message("user", user_message)

        graph = build_dialogue_graph(
            model=self.model_factory(endpoint, model),
            tools=self.tools,
            tool_names=self.tool_names,
            classifier=self.classifier,
            plan_builder=PlanBuilder(max_retries=self.step_max_retries),
            dependency_gate=self.dependency_gate,
            retry_backoff_base=self.retry_backoff_base,
            sleep=self.sleep,
            prompt_log_length=self.settings.observability.log_prompt_max_length,
        )

        state: LoopState = {
            "session": session,
            "callbacks": callbacks,
            "cancel_token": cancel_token,
            "task": user_message,
            "iteration": 0,
            "max_iterations": self.max_iterations,
            "reflection_threshold": self.reflection_threshold,
            "consecutive_failures": 0,
            "completed": False,
            "last_reply": None,
            "tool_calls": [],
            "action_intent": False,
            "phase_failed": False,
        }

        LOGGER.info(f"Orchestration started: model={model}, endpoint={endpoint}, max_iterations={self.max_iterations}")
        try:
            final_state = await graph.ainvoke(
                state,
                config={"recursion_limit": recursion_limit_for(self.max_iterations)},
            )
        except OrchestrationCancelled as e:
            LOGGER.warning(f"Orchestration cancelled: {e}")
            callbacks.message("system", "⏹️ Orchestration cancelled")
            return

        LOGGER.info(
            f"Orchestration finished after {final_state.get('iteration', 0)} iteration(s), "
            f"completed={final_state.get('completed', False)}"
        )


__all__ = ["Orchestrator", "ModelFactory"]
