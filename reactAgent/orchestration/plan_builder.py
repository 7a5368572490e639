"""Turn a model's ``PLAN:`` block into an ``ExecutionPlan``.

Parsing is best-effort. Each numbered line is matched against three
increasingly loose shapes and the first that fits wins::

    1. Read config - read_file(config.json)    # description - tool(args)
    2. Install deps - run_command              # description - tool
    3. Create the README file                  # bare description

Lines that fit none of them are skipped, so a reply without a usable plan
simply yields zero steps.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Tuple

from reactAgent.orchestration.arguments import (
    infer_tool_from_description,
    is_placeholder,
    extract_command_from_description,
    parse_tool_arguments,
)
from reactAgent.orchestration.session import ExecutionPlan, PlanStep

LOGGER = logging.getLogger(__name__)

#: Tool names accepted from the ``description - tool`` shape without arguments.
KNOWN_TOOLS = frozenset({
    "read_file",
    "write_file",
    "list_files",
    "get_file_info",
    "search_files",
    "run_command",
    "search_replace",
})

_PLAN_HEADER = re.compile(r"PLAN:", re.IGNORECASE)
_NUMBERED_LINE = re.compile(r"^\s*\d+[.)]\s*")
_WITH_ARGS = re.compile(r"^\s*\d+[.)]\s*(.+?)\s+[-–—]\s+(\w+)\s*\((.*)\)\s*\.?$")
_WITHOUT_ARGS = re.compile(r"^\s*\d+[.)]\s*(.+?)\s+[-–—]\s+(\w+)\s*\.?$")
_BARE = re.compile(r"^\s*\d+[.)]\s*(.+?)\s*$")
_ESTIMATED_TIME = re.compile(r"^[ \t]*(?:ESTIMATED[ _]TIME|ETA):[ \t]*(.+)$", re.IGNORECASE | re.MULTILINE)
_RISKS_HEADER = re.compile(r"^[ \t]*RISKS:[ \t]*(.*)$", re.IGNORECASE | re.MULTILINE)
_EMPHASIS = re.compile(r"\*+")
_CODE_SPAN = re.compile(r"`([^`]*)`")


def _strip_markup(line: str) -> str:
    """Drop emphasis and unwrap code spans holding a tool call; other spans keep their backticks."""
    line = _EMPHASIS.sub("", line)
    return _CODE_SPAN.sub(
        lambda span: span.group(1) if span.group(1).strip().split("(", 1)[0].strip() in KNOWN_TOOLS else span.group(0),
        line,
    )


def extract_plan_lines(text: str) -> List[str]:
    """Return the numbered lines following the first ``PLAN:`` header.

    The section ends at the first blank line or unindented prose line after
    the steps have started.
    """
    header = _PLAN_HEADER.search(text or "")
    if header is None:
        return []

    lines: List[str] = []
    for raw in text[header.end():].splitlines():
        line = _strip_markup(raw)
        if _NUMBERED_LINE.match(line):
            lines.append(line.strip())
        elif not line.strip():
            if lines:
                break
        elif lines and not raw[:1].isspace():
            break
    return lines


def _match_line(line: str) -> Optional[Tuple[str, str, Optional[str]]]:
    """Return ``(description, tool, raw_args)`` for a numbered plan line."""
    match = _WITH_ARGS.match(line)
    if match:
        return match.group(1).strip(), match.group(2), match.group(3)

    match = _WITHOUT_ARGS.match(line)
    if match and match.group(2) in KNOWN_TOOLS:
        return match.group(1).strip(), match.group(2), None

    match = _BARE.match(line)
    if match and match.group(1):
        description = match.group(1)
        return description, infer_tool_from_description(description), None
    return None


def _parse_risks(text: str) -> Optional[List[str]]:
    header = _RISKS_HEADER.search(text)
    if header is None:
        return None
    risks = [header.group(1).strip()] if header.group(1).strip() else []
    for line in text[header.end():].splitlines()[1:]:
        stripped = line.strip()
        if not stripped:
            if risks:
                break
            continue
        if not stripped.startswith(("-", "*", "•")):
            break
        risks.append(stripped.lstrip("-*• ").strip())
    return risks or None


class PlanBuilder:
    """Builds execution plans from free-form model replies."""

    def __init__(self, max_retries: int = 3):
        self.max_retries = max_retries

    def parse_plan(self, text: str) -> ExecutionPlan:
        """Parse ``text`` into a plan; never raises, may return zero steps."""
        steps: List[PlanStep] = []
        for line in extract_plan_lines(text):
            matched = _match_line(line)
            if matched is None:
                LOGGER.debug(f"Skipping unparseable plan line: {line}")
                continue

            description, tool, raw_args = matched
            arguments = parse_tool_arguments(tool, raw_args or "", description)
            if tool == "run_command" and is_placeholder(arguments.get("command")):
                arguments["command"] = extract_command_from_description(description)

            index = len(steps)
            steps.append(
                PlanStep(
                    id=f"step_{index}",
                    description=description,
                    tool=tool,
                    arguments=arguments,
                    dependencies=[f"step_{index - 1}"] if index > 0 else [],
                    max_retries=self.max_retries,
                )
            )

        estimated = _ESTIMATED_TIME.search(text or "")
        plan = ExecutionPlan(
            steps=steps,
            estimated_time=estimated.group(1).strip() if estimated else None,
            risks=_parse_risks(text or ""),
        )
        LOGGER.info(f"Parsed plan with {len(plan.steps)} step(s)")
        return plan


def parse_plan(text: str, max_retries: int = 3) -> ExecutionPlan:
    return PlanBuilder(max_retries=max_retries).parse_plan(text)


__all__ = ["PlanBuilder", "parse_plan", "extract_plan_lines", "KNOWN_TOOLS"]
