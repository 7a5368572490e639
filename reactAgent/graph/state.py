"""Dialogue loop state.

The graph state only carries loop control. Everything that outlives one
``orchestrate()`` call (transcript, plan, tool and file logs, errors) lives in
the ``SessionState`` object referenced by ``session``, which nodes mutate in
place.
"""

from __future__ import annotations

from typing import List, Optional, TypedDict

from reactAgent.orchestration.callbacks import OrchestrationCallbacks
from reactAgent.orchestration.session import SessionState, ToolCall
from reactAgent.utils.cancellation import CancellationToken


class LoopState(TypedDict, total=False):
    """State for one run of the dialogue loop."""

    # ========== Shared Objects ==========
    session: SessionState
    """Session aggregate owned by the orchestrator (mutated in place)."""

    callbacks: OrchestrationCallbacks
    """Caller notification sinks (progress, tool execution, messages)."""

    cancel_token: CancellationToken
    """Cancellation signal checked at every node entry and suspension point."""

    task: str
    """User message of this ``orchestrate()`` call, quoted by the completion prompt."""

    # ========== Loop Control ==========
    iteration: int
    """Iterations started so far (incremented by the agent node)."""

    max_iterations: int
    """Iteration budget (default: 20)."""

    reflection_threshold: int
    """Consecutive failures that trigger reflection (default: 3)."""

    consecutive_failures: int
    """Sequential unsuccessful iterations/steps, reset on any success."""

    completed: bool
    """Set once the completion oracle confirms the task is finished."""

    # ========== Current Iteration ==========
    last_reply: Optional[str]
    """Latest model reply of the agent node."""

    tool_calls: List[ToolCall]
    """Tool calls parsed from ``last_reply``."""

    action_intent: bool
    """Whether ``last_reply`` announces an action (classifier verdict)."""

    phase_failed: bool
    """True when the last node hit an error boundary."""
