"""Graph nodes exports."""

from .agent import build_agent_node
from .completion import build_completion_node
from .finalize import build_finalize_node
from .planner import build_planner_node
from .reflection import build_reflection_node
from .step_executor import build_step_executor_node
from .tools import build_tools_node

__all__ = [
    "build_agent_node",
    "build_completion_node",
    "build_finalize_node",
    "build_planner_node",
    "build_reflection_node",
    "build_step_executor_node",
    "build_tools_node",
]
