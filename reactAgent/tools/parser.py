"""Default tool-call parser for free-form model replies.

Strategies are tried in order and a later one only runs when every earlier
one found nothing:

1. ``<tool_call><tool_name>…</tool_name><arguments>{json}</arguments></tool_call>``
2. Function-call style: ``run_command("npm install", ".")``, ``read_file("a.txt")``,
   ``write_file("a.txt", "text")``, ``list_files("src")``
3. Shell commands inside ```` ```bash ```` / ```` ```sh ```` fences, ``&&`` chains split
4. Inline code spans holding a command: `` `npm install` ``
"""

from __future__ import annotations

import json
import logging
import re
from typing import Callable, List

from reactAgent.orchestration.session import ToolCall

LOGGER = logging.getLogger(__name__)

_XML_CALL = re.compile(r"<tool_call>(.*?)</tool_call>", re.DOTALL)
_XML_NAME = re.compile(r"<tool_name>(.*?)</tool_name>", re.DOTALL)
_XML_ARGS = re.compile(r"<arguments>(.*?)</arguments>", re.DOTALL)

_FUNCTION_CALLS = (
    (
        "run_command",
        re.compile(r"""run_command\s*\(\s*["']([^"']+)["']\s*(?:,\s*["']([^"']+)["'])?\s*\)"""),
        lambda m: {"command": m.group(1), "cwd": m.group(2) or "."},
    ),
    (
        "read_file",
        re.compile(r"""read_file\s*\(\s*["']([^"']+)["']\s*\)"""),
        lambda m: {"file_path": m.group(1)},
    ),
    (
        "write_file",
        re.compile(r"""write_file\s*\(\s*["']([^"']+)["']\s*,\s*["']([^"']+)["']\s*\)""", re.DOTALL),
        lambda m: {"file_path": m.group(1), "content": m.group(2)},
    ),
    (
        "list_files",
        re.compile(r"""list_files\s*\(\s*["']([^"']+)["']\s*\)"""),
        lambda m: {"directory_path": m.group(1)},
    ),
)

_SHELL_FENCE = re.compile(r"```(?:shell|bash|sh|console)?[ \t]*\n(.*?)```", re.DOTALL)
SHELL_COMMANDS = (
    "npm", "yarn", "pnpm", "npx", "node", "cd", "mkdir", "git", "ls", "cat", "echo",
    "python", "python3", "pip", "pip3", "curl", "wget", "tar", "zip", "unzip",
    "chmod", "chown", "mv", "cp", "rm", "touch",
)
_SHELL_LINE = re.compile(r"^(?:\$\s*)?((?:" + "|".join(SHELL_COMMANDS) + r")\s+.+)$")
_INLINE_CODE = re.compile(r"`([^`\n]+)`")
_INLINE_COMMAND = re.compile(r"^(?:npm|yarn|pnpm|npx|node|cd|mkdir|git|ls|cat|echo)\s+")


def _run(command: str) -> ToolCall:
    return ToolCall(name="run_command", arguments={"command": command, "cwd": "."})


def parse_xml_calls(text: str) -> List[ToolCall]:
    calls = []
    for block in _XML_CALL.finditer(text):
        name = _XML_NAME.search(block.group(1))
        args = _XML_ARGS.search(block.group(1))
        if not name or not args:
            continue
        try:
            arguments = json.loads(args.group(1).strip() or "{}")
        except json.JSONDecodeError as e:
            LOGGER.warning(f"Skipping tool call with malformed JSON arguments: {e}")
            continue
        if not isinstance(arguments, dict):
            LOGGER.warning(f"Skipping tool call with non-object arguments: {args.group(1)[:80]}")
            continue
        calls.append(ToolCall(name=name.group(1).strip(), arguments=arguments))
    return calls


def parse_function_calls(text: str) -> List[ToolCall]:
    found = []
    for name, pattern, extract in _FUNCTION_CALLS:
        for match in pattern.finditer(text):
            found.append((match.start(), ToolCall(name=name, arguments=extract(match))))
    # Keep the order in which calls appear in the reply
    return [call for _, call in sorted(found, key=lambda item: item[0])]


def parse_shell_blocks(text: str) -> List[ToolCall]:
    calls = []
    for block in _SHELL_FENCE.finditer(text):
        for line in block.group(1).splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            for part in (piece.strip() for piece in line.split("&&")):
                match = _SHELL_LINE.match(part)
                if match:
                    calls.append(_run(match.group(1)))
    return calls


def parse_inline_commands(text: str) -> List[ToolCall]:
    return [
        _run(span.strip())
        for span in _INLINE_CODE.findall(text)
        if _INLINE_COMMAND.match(span.strip())
    ]


class ToolCallParser:
    """Ordered chain of parsing strategies; the first non-empty result wins."""

    def __init__(self, strategies: List[Callable[[str], List[ToolCall]]] | None = None):
        self.strategies = strategies or [
            parse_xml_calls,
            parse_function_calls,
            parse_shell_blocks,
            parse_inline_commands,
        ]

    def parse(self, text: str) -> List[ToolCall]:
        if not text:
            return []
        for strategy in self.strategies:
            calls = strategy(text)
            if calls:
                LOGGER.info(f"Parsed {len(calls)} tool call(s) via {strategy.__name__}")
                return calls
        return []


__all__ = [
    "ToolCallParser",
    "SHELL_COMMANDS",
    "parse_xml_calls",
    "parse_function_calls",
    "parse_shell_blocks",
    "parse_inline_commands",
]
