"""Routing logic for the dialogue loop graph.

    agent ──┬─ tools ──────────┐
            ├─ planner ────────┤
            ├─ step_executor ──┼─→ iteration check ─┬─ agent
            └─ completion ─────┘                    ├─ reflection ─→ agent | finalize
                                                    └─ finalize ─→ END
"""

from __future__ import annotations

import logging
from typing import Literal

from reactAgent.graph.state import LoopState
from reactAgent.utils.logging_utils import log_routing_decision

LOGGER = logging.getLogger(__name__)


def iteration_route(state: LoopState, from_node: str = "phase") -> Literal["agent", "reflection", "finalize"]:
    """Close an iteration: finish, reflect, stop on budget, or start the next one.

    Decision logic:
    1. Task confirmed complete → finalize
    2. Consecutive failures reached the threshold → reflection
    3. Iteration budget exhausted → finalize
    4. Otherwise → agent (next iteration)
    """
    failures = state.get("consecutive_failures", 0)
    threshold = state.get("reflection_threshold", 3)
    iteration = state.get("iteration", 0)
    max_iterations = state.get("max_iterations", 20)

    if state.get("completed"):
        decision, reason = "finalize", "Task confirmed complete"
    elif failures >= threshold:
        decision, reason = "reflection", f"{failures} consecutive failure(s) (threshold {threshold})"
    elif iteration >= max_iterations:
        decision, reason = "finalize", f"Iteration budget exhausted ({iteration}/{max_iterations})"
    else:
        decision, reason = "agent", f"Next iteration ({iteration + 1}/{max_iterations})"

    log_routing_decision(LOGGER, from_node, decision, reason)
    return decision


def iteration_route_from(from_node: str):
    """Bind ``iteration_route`` to the node it closes, for routing logs."""

    def route(state: LoopState) -> Literal["agent", "reflection", "finalize"]:
        return iteration_route(state, from_node)

    route.__name__ = f"{from_node}_iteration_route"
    return route


def agent_route(state: LoopState) -> Literal["tools", "planner", "step_executor", "completion", "agent", "reflection", "finalize"]:
    """Pick the phase for the reply the agent node just received.

    Decision logic:
    1. Model call failed → close the iteration
    2. Reply contains tool calls → tools (direct execution, no planning)
    3. Action intent and no active plan → planner
    4. Active plan → step_executor
    5. Otherwise → completion
    """
    if state.get("phase_failed"):
        return iteration_route(state, "agent")

    session = state["session"]
    tool_calls = state.get("tool_calls") or []

    if tool_calls:
        decision = "tools"
        reason = f"Reply contains {len(tool_calls)} tool call(s): {', '.join(call.name for call in tool_calls)}"
    elif state.get("action_intent") and session.plan is None:
        decision = "planner"
        reason = "Action intent without an active plan"
    elif session.plan is not None:
        decision = "step_executor"
        reason = f"Active plan at step {session.current_step + 1}/{len(session.plan.steps)}"
    else:
        decision = "completion"
        reason = "No tool calls, no plan, no action intent"

    log_routing_decision(LOGGER, "agent", decision, reason)
    return decision


def reflection_route(state: LoopState) -> Literal["agent", "finalize"]:
    """After reflecting, continue unless the budget is spent."""
    iteration = state.get("iteration", 0)
    max_iterations = state.get("max_iterations", 20)

    if iteration >= max_iterations:
        decision, reason = "finalize", f"Iteration budget exhausted ({iteration}/{max_iterations})"
    else:
        decision, reason = "agent", "Reflection done, continuing"

    log_routing_decision(LOGGER, "reflection", decision, reason)
    return decision


__all__ = ["agent_route", "iteration_route", "iteration_route_from", "reflection_route"]
