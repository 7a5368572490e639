"""Unified error handling for reactAgent graph nodes and tools."""

from __future__ import annotations

import asyncio
import functools
import logging
from typing import Any, Callable, Dict

import httpx

LOGGER = logging.getLogger(__name__)


class ReactAgentError(Exception):
    """Base exception for reactAgent errors."""

    def __init__(self, message: str, user_message: str = None):
        super().__init__(message)
        self.user_message = user_message or message


class ToolExecutionError(ReactAgentError):
    """Error during tool execution."""
    pass


class ModelInvocationError(ReactAgentError):
    """Error during model invocation."""
    pass


class PlanParseError(ReactAgentError):
    """Plan text could not be interpreted.

    The plan builder is best-effort and never raises this; it exists for
    callers that want to enforce a non-empty plan.
    """
    pass


class OrchestrationCancelled(ReactAgentError):
    """The caller cancelled a running orchestration."""
    pass


def handle_model_error(error: Exception) -> str:
    """Convert model invocation errors to user-friendly messages.

    Args:
        error: Exception raised during model invocation

    Returns:
        User-friendly error message
    """
    if isinstance(error, ReactAgentError) and error.user_message != str(error):
        return error.user_message

    if isinstance(error, httpx.TimeoutException):
        return "Connection to the model endpoint timed out. The model may be too large or slow."

    if isinstance(error, httpx.ConnectError):
        return "Cannot connect to the model endpoint. Make sure the server is running (try: ollama serve)."

    if isinstance(error, httpx.HTTPStatusError):
        status = error.response.status_code
        if status == 404:
            return "Model endpoint not found (404). Check the endpoint URL and model name."
        if status == 429:
            return "Too many requests, please retry later."
        return f"Model endpoint returned HTTP {status}."

    error_str = str(error).lower()

    if "rate_limit" in error_str or "429" in error_str:
        return "Too many requests, please retry later."

    if "timeout" in error_str or "timed out" in error_str:
        return "Model response timed out, please retry."

    if "context_length" in error_str or "context window" in error_str:
        return "Conversation is too long for the model context window."

    return str(error) or type(error).__name__


def record_phase_failure(node_name: str, state: Dict[str, Any], error: Exception) -> Dict[str, Any]:
    """Log a failed phase, append it to the session error log and notify the caller.

    Returns the loop-state updates for a failed phase.
    """
    if isinstance(error, ReactAgentError):
        LOGGER.error(f"{node_name} failed: {error}")
    else:
        LOGGER.exception(f"{node_name} unexpected error", exc_info=error)

    state["session"].record_error(f"{node_name}: {error}")

    callbacks = state.get("callbacks")
    if callbacks is not None:
        callbacks.message("system", f"⚠️ Error: {handle_model_error(error)}")

    return {"consecutive_failures": state.get("consecutive_failures", 0) + 1, "phase_failed": True}


def with_error_boundary(node_name: str):
    """Decorator to add an error boundary to dialogue-loop nodes.

    A failing phase never aborts the loop: the error is appended to the
    session error log, the consecutive-failure counter is bumped and the
    caller is notified with a system message. Cancellation always propagates.

    Args:
        node_name: Name of the node for logging and error messages

    Example:
        @with_error_boundary("planner")
        async def planner_node(state: LoopState) -> Dict[str, Any]:
            ...
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def async_wrapper(state: Dict[str, Any]) -> Dict[str, Any]:
            try:
                return await func(state)
            except (OrchestrationCancelled, asyncio.CancelledError):
                raise
            except Exception as e:
                return record_phase_failure(node_name, state, e)

        return async_wrapper

    return decorator


__all__ = [
    "ReactAgentError",
    "ToolExecutionError",
    "ModelInvocationError",
    "PlanParseError",
    "OrchestrationCancelled",
    "handle_model_error",
    "record_phase_failure",
    "with_error_boundary",
]
