"""Step executor node: advance the active plan by one step."""

from __future__ import annotations

import logging
from typing import Optional

from reactAgent.graph.state import LoopState
from reactAgent.orchestration.callbacks import ToolProvider
from reactAgent.orchestration.execution_engine import DependencyGate, ExecutionEngine, SleepFn
from reactAgent.utils.error_handler import with_error_boundary
from reactAgent.utils.logging_utils import log_node_entry, log_node_exit

LOGGER = logging.getLogger(__name__)


def build_step_executor_node(
    *,
    tools: ToolProvider,
    gate: DependencyGate = DependencyGate.ATTEMPTED,
    backoff_base: float = 2.0,
    sleep: Optional[SleepFn] = None,
):

    @with_error_boundary("step_executor")
    async def step_executor_node(state: LoopState) -> LoopState:
        log_node_entry(LOGGER, "step_executor", state)

        cancel_token = state["cancel_token"]
        cancel_token.raise_if_cancelled()

        engine = ExecutionEngine(
            tools,
            state["callbacks"],
            gate=gate,
            backoff_base=backoff_base,
            sleep=sleep,
            cancel_token=cancel_token,
        )
        outcome = await engine.execute_next_step(state["session"])

        failures = 0 if outcome.success else state.get("consecutive_failures", 0) + 1
        updates = {"consecutive_failures": failures, "phase_failed": False}
        log_node_exit(LOGGER, "step_executor", updates)
        return updates

    return step_executor_node
