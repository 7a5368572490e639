"""Planner node: ask the model for a ``PLAN:`` block and activate it."""

from __future__ import annotations

import logging
from typing import Iterable

from reactAgent.graph.state import LoopState
from reactAgent.models.ollama_client import ChatModel
from reactAgent.orchestration.plan_builder import PlanBuilder
from reactAgent.orchestration.prompts import PLANNING_PROMPT
from reactAgent.utils.error_handler import with_error_boundary
from reactAgent.utils.logging_utils import (
    log_agent_response,
    log_node_entry,
    log_node_exit,
    log_plan_created,
    log_prompt,
)
from reactAgent.utils.prompt_builder import PromptBuilder

LOGGER = logging.getLogger(__name__)


def build_planner_node(
    *,
    model: ChatModel,
    plan_builder: PlanBuilder,
    tool_names: Iterable[str],
    prompt_log_length: int = 500,
):
    """Create the planner node bound to a model client and plan builder."""

    tool_names = sorted(tool_names)

    @with_error_boundary("planner")
    async def planner_node(state: LoopState) -> LoopState:
        log_node_entry(LOGGER, "planner", state)

        session = state["session"]
        callbacks = state["callbacks"]
        cancel_token = state["cancel_token"]
        cancel_token.raise_if_cancelled()

        prompt = PromptBuilder.render(
            PLANNING_PROMPT,
            tools=tool_names,
            context_summary=session.context_summary(),
            recent_history=session.recent_tool_history(5),
        )
        log_prompt(LOGGER, "planning", prompt, prompt_log_length)

        session.append_message("user", prompt)
        reply = await model.chat(session.transcript(), cancel_token=cancel_token)
        session.append_message("assistant", reply)
        log_agent_response(LOGGER, reply)

        plan = plan_builder.parse_plan(reply)
        if plan.steps:
            session.activate_plan(plan)
            log_plan_created(LOGGER, plan)
        else:
            LOGGER.warning("Planning reply contained no usable steps; no plan activated")
        callbacks.message("system", f"📋 Created execution plan with {len(plan.steps)} steps")

        updates = {"phase_failed": False}
        log_node_exit(LOGGER, "planner", updates)
        return updates

    return planner_node
