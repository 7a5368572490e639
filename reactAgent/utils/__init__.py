"""Utilities for reactAgent."""

from .logging_utils import (
    log_agent_response,
    log_error,
    log_node_entry,
    log_node_exit,
    log_plan_created,
    log_prompt,
    log_routing_decision,
    log_step_execution,
    log_tool_call,
    log_tool_result,
    log_user_message,
    setup_logging,
)
from .error_handler import (
    with_error_boundary,
    record_phase_failure,
    handle_model_error,
    ReactAgentError,
    ToolExecutionError,
    ModelInvocationError,
    PlanParseError,
    OrchestrationCancelled,
)
from .cancellation import CancellationToken
from .prompt_builder import PromptBuilder
from .message_utils import message_from_role, role_of, to_wire_messages

__all__ = [
    "setup_logging",
    "log_agent_response",
    "log_error",
    "log_node_entry",
    "log_node_exit",
    "log_plan_created",
    "log_prompt",
    "log_routing_decision",
    "log_step_execution",
    "log_tool_call",
    "log_tool_result",
    "log_user_message",
    "with_error_boundary",
    "record_phase_failure",
    "handle_model_error",
    "ReactAgentError",
    "ToolExecutionError",
    "ModelInvocationError",
    "PlanParseError",
    "OrchestrationCancelled",
    "CancellationToken",
    "PromptBuilder",
    "message_from_role",
    "role_of",
    "to_wire_messages",
]
