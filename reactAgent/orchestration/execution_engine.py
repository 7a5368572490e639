"""Plan-driven execution: one step per call, with dependency gating and retry."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, List, Optional

from reactAgent.orchestration.arguments import validate_and_fix_arguments
from reactAgent.orchestration.batch_executor import invoke_tool
from reactAgent.orchestration.callbacks import OrchestrationCallbacks, ToolProvider
from reactAgent.orchestration.session import (
    PlanStep,
    SessionState,
    StepStatus,
    ToolCall,
    ToolResult,
)
from reactAgent.utils.cancellation import CancellationToken
from reactAgent.utils.logging_utils import log_step_execution

LOGGER = logging.getLogger(__name__)

SleepFn = Callable[[float], Awaitable[None]]


class DependencyGate(str, Enum):
    """When a dependency counts as satisfied.

    ``ATTEMPTED`` (gate-by-attempt) only requires the dependency to have been
    tried once, so a step may run after its dependency ultimately failed.
    ``SUCCEEDED`` requires the dependency to have succeeded.
    """

    ATTEMPTED = "attempted"
    SUCCEEDED = "succeeded"


@dataclass
class StepOutcome:
    success: bool
    step: Optional[PlanStep] = None
    result: Optional[ToolResult] = None
    waiting: bool = False
    plan_complete: bool = False


class ExecutionEngine:
    """Advances the active plan of a session by one step at a time.

    Args:
        tools: Provider that executes tool calls
        callbacks: Caller notification sinks
        gate: Dependency satisfaction policy
        backoff_base: Delay before attempt ``n`` (zero-based, n > 0) is ``backoff_base ** n`` seconds
        sleep: Awaitable sleep used for backoff; defaults to the cancel token's sleep
        cancel_token: Cancellation signal for tool calls and backoff
    """

    def __init__(
        self,
        tools: ToolProvider,
        callbacks: OrchestrationCallbacks,
        *,
        gate: DependencyGate = DependencyGate.ATTEMPTED,
        backoff_base: float = 2.0,
        sleep: Optional[SleepFn] = None,
        cancel_token: Optional[CancellationToken] = None,
    ):
        self.tools = tools
        self.callbacks = callbacks
        self.gate = DependencyGate(gate)
        self.backoff_base = backoff_base
        self.cancel_token = cancel_token or CancellationToken()
        self._sleep = sleep or self.cancel_token.sleep

    def unmet_dependencies(self, session: SessionState, step: PlanStep) -> List[str]:
        unmet = []
        for dep_id in step.dependencies:
            dep = session.plan.get_step(dep_id) if session.plan else None
            if dep is None:
                unmet.append(dep_id)
            elif self.gate is DependencyGate.ATTEMPTED and dep.retry_count == 0:
                unmet.append(dep_id)
            elif self.gate is DependencyGate.SUCCEEDED and dep.status is not StepStatus.SUCCEEDED:
                unmet.append(dep_id)
        return unmet

    async def execute_with_retry(self, session: SessionState, step: PlanStep) -> ToolResult:
        """Run ``step`` up to ``max_retries`` times; every attempt is recorded."""
        step.arguments = validate_and_fix_arguments(step.tool, step.arguments, step.description)
        tool_call = ToolCall(name=step.tool, arguments=step.arguments)

        result = ToolResult.fail("Step was not attempted")
        for attempt in range(step.max_retries):
            if attempt > 0:
                delay = self.backoff_base ** attempt
                LOGGER.info(f"Retrying {step.id} in {delay:.1f}s (attempt {attempt + 1}/{step.max_retries})")
                await self._sleep(delay)
            self.cancel_token.raise_if_cancelled()

            step.retry_count += 1
            result, duration_ms = await invoke_tool(self.tools, tool_call, self.cancel_token)
            session.record_tool_execution(tool_call, result, duration_ms)
            self.callbacks.tool_execution(tool_call, result)
            if result.success:
                break
            LOGGER.warning(f"Step {step.id} attempt {attempt + 1} failed: {result.error}")
        return result

    async def execute_next_step(self, session: SessionState) -> StepOutcome:
        """Attempt the current step of the active plan.

        Returns a successful outcome when the step succeeded (the plan
        advances) and a failed one when it was gated or exhausted its retries
        (the step stays current).
        """
        if session.plan is None:
            return StepOutcome(success=False)

        step = session.current_plan_step()
        if step is None:
            self._complete_plan(session)
            return StepOutcome(success=True, plan_complete=True)

        unmet = self.unmet_dependencies(session, step)
        if unmet:
            LOGGER.info(f"Step {step.id} gated ({self.gate.value}) on: {unmet}")
            self.callbacks.progress(f"Waiting for dependencies: {', '.join(unmet)}")
            return StepOutcome(success=False, step=step, waiting=True)

        total = len(session.plan.steps)
        log_step_execution(LOGGER, session.current_step, step)
        self.callbacks.progress(f"Executing step {session.current_step + 1}/{total}: {step.description}")

        result = await self.execute_with_retry(session, step)

        if result.success:
            step.status = StepStatus.SUCCEEDED
            session.current_step += 1
            if session.current_step >= total:
                self._complete_plan(session)
                return StepOutcome(success=True, step=step, result=result, plan_complete=True)
            return StepOutcome(success=True, step=step, result=result)

        step.status = StepStatus.FAILED
        session.record_error(f"Step {step.id} ({step.tool}) failed: {result.error}")
        self.callbacks.message("system", f"❌ Step failed after {step.max_retries} retries: {step.description}")
        return StepOutcome(success=False, step=step, result=result)

    def _complete_plan(self, session: SessionState) -> None:
        LOGGER.info("Execution plan complete")
        self.callbacks.message("system", "✅ Execution plan complete")
        session.clear_plan()


__all__ = ["DependencyGate", "ExecutionEngine", "StepOutcome"]
