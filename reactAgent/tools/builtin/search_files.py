"""Find files by name pattern (glob-based file search)."""

from __future__ import annotations

import logging
from typing import Annotated

from langchain_core.tools import tool

from reactAgent.config.settings import get_settings
from reactAgent.tools.workspace import resolve_in_workspace, workspace_root
from reactAgent.utils.error_handler import ToolExecutionError

LOGGER = logging.getLogger(__name__)

__all__ = ["search_files"]

IGNORED_DIRS = {"node_modules", ".git", "__pycache__", ".venv"}


@tool
def search_files(
    pattern: Annotated[str, "Glob pattern (e.g., '*.ts', '**/*.json', '*config*')"],
    directory: Annotated[str, "Directory to search (default: workspace root)"] = ".",
) -> str:
    """Find files by name pattern without reading their content.

    ``node_modules``, ``.git`` and other tool directories are skipped.

    Examples:
        search_files("**/*.ts")
        search_files("*.json", directory="config")
    """
    search_path = resolve_in_workspace(directory)
    if not search_path.is_dir():
        raise ToolExecutionError(f"Directory not found: {directory}")

    root = workspace_root()
    limit = get_settings().tools.search_max_results
    matches = []
    for match in sorted(search_path.glob(pattern)):
        if not match.is_file():
            continue
        relative = match.relative_to(root)
        if IGNORED_DIRS.intersection(relative.parts):
            continue
        matches.append(str(relative))

    LOGGER.info(f"Found {len(matches)} file(s) matching '{pattern}' in {directory}")
    if not matches:
        return f"No files found matching pattern: {pattern}"

    lines = [f"Files matching {pattern}:"]
    lines.extend(f"  {path}" for path in matches[:limit])
    if len(matches) > limit:
        lines.append(f"  ... ({len(matches) - limit} more)")
    return "\n".join(lines)
