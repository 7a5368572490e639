"""Graph builder for the dialogue loop.

    START → agent → {tools | planner | step_executor | completion}
                ↑                         │
                │                 iteration check ── reflection
                └─────────────────────────┤              │
                                          └── finalize ←─┘ → END

One pass through ``agent`` is one iteration of the loop. Phases that fail
never abort the graph; they bump the consecutive-failure counter through the
error boundary and the iteration check routes to reflection once the
threshold is reached.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from langgraph.graph import END, START, StateGraph

from reactAgent.graph.nodes import (
    build_agent_node,
    build_completion_node,
    build_finalize_node,
    build_planner_node,
    build_reflection_node,
    build_step_executor_node,
    build_tools_node,
)
from reactAgent.graph.routing import agent_route, iteration_route_from, reflection_route
from reactAgent.graph.state import LoopState
from reactAgent.models.ollama_client import ChatModel
from reactAgent.orchestration.callbacks import ToolProvider
from reactAgent.orchestration.classifiers import RegexResponseClassifier, ResponseClassifier
from reactAgent.orchestration.execution_engine import DependencyGate, SleepFn
from reactAgent.orchestration.plan_builder import KNOWN_TOOLS, PlanBuilder

LOGGER = logging.getLogger(__name__)

PHASE_NODES = ("tools", "planner", "step_executor", "completion")


def recursion_limit_for(max_iterations: int) -> int:
    """Supersteps needed for ``max_iterations`` (agent, phase, reflection each) plus finalize."""
    return max_iterations * 3 + 10


def build_dialogue_graph(
    *,
    model: ChatModel,
    tools: ToolProvider,
    tool_names: Optional[Iterable[str]] = None,
    classifier: Optional[ResponseClassifier] = None,
    plan_builder: Optional[PlanBuilder] = None,
    dependency_gate: DependencyGate = DependencyGate.ATTEMPTED,
    retry_backoff_base: float = 2.0,
    sleep: Optional[SleepFn] = None,
    prompt_log_length: int = 500,
):
    """Build the dialogue loop graph.

    Args:
        model: Chat model client used by every phase
        tools: Provider executing and parsing tool calls
        tool_names: Tool catalog advertised in the planning prompt
        classifier: Action-intent / completion classifier (default: regex)
        plan_builder: Plan text parser
        dependency_gate: Plan step dependency policy
        retry_backoff_base: Base of the exponential step retry delay (seconds)
        sleep: Backoff sleep override (tests)
        prompt_log_length: Characters of meta-prompts kept in logs

    Returns:
        Compiled LangGraph application
    """
    classifier = classifier or RegexResponseClassifier()
    plan_builder = plan_builder or PlanBuilder()
    tool_names = list(tool_names) if tool_names is not None else sorted(KNOWN_TOOLS)

    # ========== Build Nodes ==========
    agent_node = build_agent_node(model=model, tools=tools, classifier=classifier)
    tools_node = build_tools_node(tools=tools)
    planner_node = build_planner_node(
        model=model,
        plan_builder=plan_builder,
        tool_names=tool_names,
        prompt_log_length=prompt_log_length,
    )
    step_executor_node = build_step_executor_node(
        tools=tools,
        gate=dependency_gate,
        backoff_base=retry_backoff_base,
        sleep=sleep,
    )
    completion_node = build_completion_node(
        model=model,
        classifier=classifier,
        prompt_log_length=prompt_log_length,
    )
    reflection_node = build_reflection_node(model=model, prompt_log_length=prompt_log_length)
    finalize_node = build_finalize_node()

    # ========== Build Graph ==========
    graph = StateGraph(LoopState)

    graph.add_node("agent", agent_node)
    graph.add_node("tools", tools_node)
    graph.add_node("planner", planner_node)
    graph.add_node("step_executor", step_executor_node)
    graph.add_node("completion", completion_node)
    graph.add_node("reflection", reflection_node)
    graph.add_node("finalize", finalize_node)

    # ========== Routing ==========
    graph.add_edge(START, "agent")

    graph.add_conditional_edges(
        "agent",
        agent_route,
        {
            "tools": "tools",
            "planner": "planner",
            "step_executor": "step_executor",
            "completion": "completion",
            "agent": "agent",            # model call failed, next iteration
            "reflection": "reflection",  # model call failed, threshold reached
            "finalize": "finalize",      # model call failed, budget spent
        },
    )

    for phase in PHASE_NODES:
        graph.add_conditional_edges(
            phase,
            iteration_route_from(phase),
            {
                "agent": "agent",
                "reflection": "reflection",
                "finalize": "finalize",
            },
        )

    graph.add_conditional_edges(
        "reflection",
        reflection_route,
        {
            "agent": "agent",
            "finalize": "finalize",
        },
    )

    graph.add_edge("finalize", END)

    LOGGER.info(f"Dialogue graph built (gate={DependencyGate(dependency_gate).value}, tools={len(tool_names)})")
    return graph.compile()


__all__ = ["build_dialogue_graph", "recursion_limit_for"]
