"""Tool argument extraction and repair.

Model-written plans and tool calls are semi-structured: arguments go missing,
arrive as positional literals, or hold template placeholders the model never
filled in. Everything here is an ordered chain of small pattern matchers where
the first match wins and a failed match simply yields a default. Nothing in
this module raises on malformed input.

Adding a tool to the catalog means adding a branch to
``parse_tool_arguments`` and ``validate_and_fix_arguments`` (and, if it is
read-only, to ``PARALLEL_SAFE_TOOLS`` in the batch executor).
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable, Dict, List, Optional

LOGGER = logging.getLogger(__name__)

DEFAULT_CWD = "."
DEFAULT_COMMAND = 'echo "Command not specified"'
DEFAULT_FILE_PATH = "file.txt"
DEFAULT_FILE_CONTENT = "// Generated file"

#: Values a model leaves behind when it copies the prompt's format literally.
PLACEHOLDER_VALUES = frozenset({"args", "arg", "arguments", "...", "…", "todo", "tbd", "none", "null"})

_TEMPLATE_TOKEN = re.compile(r"^(?:<[^<>]+>|\{\{?\s*[\w.\- ]+\s*\}?\}|\$\{[^}]+\}|\[[A-Z_ ]+\])$")
_QUOTED_TOKEN = re.compile(r"""['"`]([^'"`]+)['"`]""")
_INLINE_CODE = re.compile(r"`([^`]+)`")
_QUOTED_FILENAME = re.compile(r"""['"`]([^'"`]+\.(?:js|ts|tsx|jsx|json|md|txt))['"`]""", re.IGNORECASE)
_KEY_VALUE = re.compile(r"^(\w+)\s*[:=]\s*(.+)$", re.DOTALL)


def is_placeholder(value: Any, allow_empty: bool = False) -> bool:
    """Return True when ``value`` is missing or an unsubstituted placeholder."""
    if value is None:
        return True
    if not isinstance(value, str):
        return False
    stripped = value.strip()
    if not stripped:
        return not allow_empty
    return stripped.lower() in PLACEHOLDER_VALUES or bool(_TEMPLATE_TOKEN.match(stripped))


def _strip_quotes(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"`":
        return value[1:-1]
    return value


def split_literal_args(args_string: str) -> List[str]:
    """Split ``a, "b, c", 'd'`` on top-level commas and unquote each part."""
    parts: List[str] = []
    current: List[str] = []
    quote: Optional[str] = None
    for char in args_string:
        if quote:
            current.append(char)
            if char == quote:
                quote = None
        elif char in "'\"`":
            quote = char
            current.append(char)
        elif char == ",":
            parts.append("".join(current))
            current = []
        else:
            current.append(char)
    parts.append("".join(current))
    return [_strip_quotes(part) for part in parts if part.strip()]


def _first_quoted_token(description: str) -> Optional[str]:
    match = _QUOTED_TOKEN.search(description or "")
    return match.group(1) if match else None


# ========== Command inference ==========

_GENERATORS = (
    (("next.js", "nextjs", "next js"), "my-nextjs-app",
     "npx create-next-app@latest {target} --typescript --tailwind --app --no-git --yes"),
    (("create-react-app", "react app", "react project"), "my-react-app",
     "npx create-react-app {target} --template typescript"),
    (("vue app", "vue project"), "my-vue-app",
     "npm create vue@latest {target} -- --typescript"),
    (("vite",), "my-vite-app",
     "npm create vite@latest {target} -- --template react-ts"),
    (("django project", "django app"), "myproject",
     "django-admin startproject {target}"),
    (("cargo", "rust project"), "my-rust-app",
     "cargo new {target}"),
)


def _inline_code_command(lower: str, description: str) -> Optional[str]:
    match = _INLINE_CODE.search(description)
    return match.group(1).strip() if match else None


def _directory_command(lower: str, description: str) -> Optional[str]:
    if "directory" in lower or "folder" in lower:
        target = _first_quoted_token(description)
        return f"mkdir -p {target}" if target else "mkdir -p my-app"
    return None


def _generator_command(lower: str, description: str) -> Optional[str]:
    for keywords, default_target, template in _GENERATORS:
        if any(keyword in lower for keyword in keywords):
            target = _first_quoted_token(description) or default_target
            return template.format(target=target)
    return None


def _install_command(lower: str, description: str) -> Optional[str]:
    if re.search(r"\binstall|\bdependencies", lower):
        if re.search(r"\bpip\b|requirements|python", lower):
            return "pip install -r requirements.txt"
        return "npm install"
    return None


def _init_command(lower: str, description: str) -> Optional[str]:
    if re.search(r"\binit", lower):
        return "npm init -y"
    return None


def _build_command(lower: str, description: str) -> Optional[str]:
    if re.search(r"\bbuild", lower):
        return "npm run build"
    return None


def _dev_command(lower: str, description: str) -> Optional[str]:
    if re.search(r"\b(?:start|run|dev)", lower):
        return "npm run dev"
    return None


def _test_command(lower: str, description: str) -> Optional[str]:
    if re.search(r"\btest", lower):
        return "npm test"
    return None


def _generic_command(lower: str, description: str) -> Optional[str]:
    match = re.search(r"\b(?:execute|run|create|make)\s+([^\n.,;]+)", description, re.IGNORECASE)
    if match:
        return _strip_quotes(match.group(1).strip()) or None
    return None


COMMAND_HEURISTICS: List[Callable[[str, str], Optional[str]]] = [
    _directory_command,
    _inline_code_command,
    _generator_command,
    _install_command,
    _init_command,
    _build_command,
    _dev_command,
    _test_command,
    _generic_command,
]


def extract_command_from_description(description: str) -> str:
    """Infer a shell command from a step description; first matching heuristic wins."""
    description = description or ""
    lower = description.lower()
    for heuristic in COMMAND_HEURISTICS:
        command = heuristic(lower, description)
        if command:
            LOGGER.debug(f"Command inferred by {heuristic.__name__}: {command}")
            return command
    return DEFAULT_COMMAND


def infer_tool_from_description(description: str) -> str:
    """Pick a catalog tool for a plan line that named none."""
    lower = (description or "").lower()
    if "read" in lower and "file" in lower:
        return "read_file"
    if "write" in lower or ("create" in lower and "file" in lower):
        return "write_file"
    if "list" in lower or "directory" in lower:
        return "list_files"
    return "run_command"


# ========== Argument parsing ==========

def _parse_json_args(args_string: str) -> Optional[Dict[str, Any]]:
    text = args_string.strip()
    if not text.startswith("{"):
        return None
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        LOGGER.debug(f"Argument string looked like JSON but did not parse: {text[:80]}")
        return None
    return parsed if isinstance(parsed, dict) else None


def _path_from(parts: List[str], description: str) -> str:
    if parts:
        return parts[0]
    return _first_quoted_token(description) or DEFAULT_CWD


def _write_file_defaults(description: str) -> Dict[str, str]:
    match = _QUOTED_FILENAME.search(description or "")
    return {
        "file_path": match.group(1) if match else DEFAULT_FILE_PATH,
        "content": DEFAULT_FILE_CONTENT,
    }


def parse_tool_arguments(tool_name: str, args_string: str, description: str) -> Dict[str, Any]:
    """Turn a raw argument string plus step description into an argument mapping.

    Args:
        tool_name: Catalog tool name (unknown names get generic parsing)
        args_string: Text between the parentheses of ``tool(...)``, may be empty
        description: Natural-language step description used for inference

    Returns:
        Argument mapping for the tool; never raises
    """
    args_string = args_string or ""
    description = description or ""

    parsed = _parse_json_args(args_string)
    if parsed is not None:
        return parsed

    parts = split_literal_args(args_string)

    if tool_name == "run_command":
        command = parts[0] if parts else ""
        if is_placeholder(command):
            command = extract_command_from_description(description)
        cwd = parts[1] if len(parts) > 1 and not is_placeholder(parts[1]) else DEFAULT_CWD
        return {"command": command, "cwd": cwd}

    if tool_name == "write_file":
        defaults = _write_file_defaults(description)
        file_path = parts[0] if parts and not is_placeholder(parts[0]) else defaults["file_path"]
        content = ", ".join(parts[1:]) if len(parts) > 1 else defaults["content"]
        return {"file_path": file_path, "content": content}

    if tool_name in ("read_file", "get_file_info"):
        return {"file_path": _path_from(parts, description)}

    if tool_name == "list_files":
        return {"directory_path": _path_from(parts, description)}

    if tool_name == "search_files":
        pattern = parts[0] if parts else (_first_quoted_token(description) or "*")
        args: Dict[str, Any] = {"pattern": pattern}
        if len(parts) > 1:
            args["directory"] = parts[1]
        return args

    if tool_name == "search_replace":
        padded = parts + [""] * (3 - len(parts))
        return {"file_path": padded[0], "search": padded[1], "replace": padded[2]}

    # Generic parsing: key: value pairs, bare values keyed by tool name
    generic: Dict[str, Any] = {}
    for part in parts:
        pair = _KEY_VALUE.match(part)
        if pair:
            generic[pair.group(1)] = _strip_quotes(pair.group(2))
        elif "file" in tool_name:
            generic["file_path"] = part
        elif "command" in tool_name:
            generic["command"] = part
    return generic


def validate_and_fix_arguments(tool_name: str, args: Optional[Dict[str, Any]], description: str) -> Dict[str, Any]:
    """Repair missing or placeholder arguments right before a tool runs.

    Only absent values and known placeholder sentinels are replaced; anything
    the model actually supplied is kept. Returns a new mapping.
    """
    args = dict(args or {})
    description = description or ""

    if not args:
        return parse_tool_arguments(tool_name, "", description)

    if tool_name == "run_command":
        command = args.get("command")
        if not isinstance(command, str) or is_placeholder(command):
            args["command"] = extract_command_from_description(description)
            LOGGER.info(f"Repaired run_command command from description: {args['command']}")
        if is_placeholder(args.get("cwd")):
            args["cwd"] = DEFAULT_CWD
        return args

    if tool_name == "write_file":
        # File content is taken verbatim; only a missing value is filled in
        if is_placeholder(args.get("file_path")) or args.get("content") is None:
            defaults = _write_file_defaults(description)
            if is_placeholder(args.get("file_path")):
                args["file_path"] = defaults["file_path"]
            if args.get("content") is None:
                args["content"] = defaults["content"]
            LOGGER.info(f"Repaired write_file arguments for {args['file_path']}")
        return args

    if tool_name in ("read_file", "get_file_info"):
        if is_placeholder(args.get("file_path")):
            args["file_path"] = _first_quoted_token(description) or DEFAULT_CWD
        return args

    if tool_name == "list_files":
        if is_placeholder(args.get("directory_path")):
            args["directory_path"] = DEFAULT_CWD
        return args

    if tool_name == "search_files":
        if is_placeholder(args.get("pattern")):
            args["pattern"] = _first_quoted_token(description) or "*"
        return args

    return args


__all__ = [
    "PLACEHOLDER_VALUES",
    "COMMAND_HEURISTICS",
    "is_placeholder",
    "split_literal_args",
    "extract_command_from_description",
    "infer_tool_from_description",
    "parse_tool_arguments",
    "validate_and_fix_arguments",
]
