"""Logging utilities for reactAgent.

Every helper emits a single record so that one loop event stays on one
(possibly multi-line) entry of the session log file.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

_RULE = "-" * 72
_NODE_RULE = "=" * 72


def setup_logging(level: int = logging.INFO, log_dir: Optional[str] = None) -> logging.Logger:
    """Attach a per-session log file and a quiet console handler to the ``reactAgent`` logger.

    The file receives everything from DEBUG up; the console only shows
    warnings and errors (or ``level`` when it is higher) so it does not
    interleave with the interactive output.
    """
    if log_dir is None:
        from reactAgent.config.settings import get_settings

        log_dir = get_settings().observability.log_dir

    directory = Path(log_dir)
    directory.mkdir(parents=True, exist_ok=True)
    log_file = directory / f"reactagent_{datetime.now():%Y%m%d_%H%M%S}.log"

    logger = logging.getLogger("reactAgent")
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    to_file = logging.FileHandler(log_file, encoding="utf-8")
    to_file.setLevel(logging.DEBUG)
    to_file.setFormatter(
        logging.Formatter("[%(asctime)s] %(levelname)s %(name)s: %(message)s", datefmt="%H:%M:%S")
    )

    to_console = logging.StreamHandler()
    to_console.setLevel(max(level, logging.WARNING))
    to_console.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))

    logger.addHandler(to_file)
    logger.addHandler(to_console)
    logger.info(f"reactAgent session log: {log_file}")
    return logger


def _truncate(text: str, limit: int = 100) -> str:
    return f"{text[:limit]}{'...' if len(text) > limit else ''}"


def _block(title: str, lines, rule: str = _RULE) -> str:
    body = "\n".join(f"  {line}" for line in lines)
    return f"{rule}\n{title}\n{body}\n{rule}" if body else f"{rule}\n{title}\n{rule}"


def log_tool_call(logger: logging.Logger, tool_name: str, args: Dict[str, Any]) -> None:
    logger.info(f"Invoking {tool_name}")
    logger.debug(f"{tool_name} arguments: {json.dumps(args, ensure_ascii=False, default=str)}")


def log_tool_result(logger: logging.Logger, tool_name: str, result: Any, success: bool = True) -> None:
    """Record a tool outcome; the payload goes to DEBUG, capped at 500 characters."""
    logger.info(f"{tool_name} {'succeeded' if success else 'failed'}")
    logger.debug(f"{tool_name} output: {_truncate(str(result), 500)}")


def log_error(logger: logging.Logger, error: Exception, context: str = "") -> None:
    where = f" while {context}" if context else ""
    logger.error(f"{type(error).__name__}{where}: {error}")
    logger.debug("Traceback", exc_info=error)


def log_user_message(logger: logging.Logger, content: str) -> None:
    logger.info(f"User message: {_truncate(content)}")


def log_agent_response(logger: logging.Logger, content: str) -> None:
    logger.info(f"Model reply: {_truncate(content)}")


def log_prompt(logger: logging.Logger, phase: str, prompt: str, max_length: int = 500) -> None:
    """Log a meta-prompt (planning, reflection, completion), cut to ``max_length`` characters."""
    logger.info(_block(f"{phase} prompt", _truncate(prompt, max_length).splitlines()))


def log_routing_decision(logger: logging.Logger, from_node: str, decision: str, reason: str = "") -> None:
    suffix = f" ({reason})" if reason else ""
    logger.info(f"route {from_node} -> {decision}{suffix}")


def log_plan_created(logger: logging.Logger, plan: Any) -> None:
    """Log every step of a freshly activated plan."""
    lines = [
        f"{step.id}: {step.tool}({json.dumps(step.arguments, ensure_ascii=False, default=str)})"
        f" after {list(step.dependencies) or 'nothing'} | {step.description}"
        for step in plan.steps
    ]
    if getattr(plan, "estimated_time", None):
        lines.append(f"estimated time: {plan.estimated_time}")
    logger.info(_block(f"Plan with {len(plan.steps)} step(s)", lines))


def log_step_execution(logger: logging.Logger, step_idx: int, step: Any) -> None:
    logger.info(
        f"Step {step_idx + 1} [{step.id}] {step.tool}: {step.description} "
        f"(attempts so far {step.retry_count}, up to {step.max_retries} per call, "
        f"depends on {list(step.dependencies) or 'nothing'})"
    )


def log_node_entry(logger: logging.Logger, node_name: str, state: Dict[str, Any]) -> None:
    """Log the loop counters and session sizes seen by a node on entry."""
    lines = [
        f"iteration {state.get('iteration')}/{state.get('max_iterations')}, "
        f"consecutive failures {state.get('consecutive_failures', 0)}"
    ]
    session = state.get("session")
    if session is not None:
        plan = f"step {session.current_step + 1}/{len(session.plan.steps)}" if session.plan else "none"
        lines.append(
            f"messages {len(session.messages)}, tools {len(session.tool_history)}, "
            f"file changes {len(session.file_changes)}, errors {len(session.errors)}, plan {plan}"
        )
    logger.info(_block(f">>> {node_name}", lines, _NODE_RULE))


def log_node_exit(logger: logging.Logger, node_name: str, updates: Dict[str, Any]) -> None:
    rendered = []
    for key, value in updates.items():
        if key == "tool_calls":
            value = f"{len(value)} parsed"
        elif key == "last_reply":
            value = _truncate(value or "")
        rendered.append(f"{key}={value}")
    logger.info(f"<<< {node_name}: {', '.join(rendered) or 'no updates'}")
