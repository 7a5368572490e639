"""Literal search-and-replace inside a workspace file."""

from __future__ import annotations

import logging
from typing import Annotated

from langchain_core.tools import tool

from reactAgent.tools.workspace import resolve_in_workspace
from reactAgent.utils.error_handler import ToolExecutionError

LOGGER = logging.getLogger(__name__)

__all__ = ["search_replace"]


@tool
def search_replace(
    file_path: Annotated[str, "File path relative to workspace root"],
    search: Annotated[str, "Exact text to find (not a regex)"],
    replace: Annotated[str, "Replacement text"],
) -> str:
    """Replace every occurrence of ``search`` in a file.

    Fails when the text is not found, so a no-op edit is never reported as success.

    Examples:
        search_replace("config.json", '"port": 8080', '"port": 3000')
    """
    if not search:
        raise ToolExecutionError("search text must not be empty")

    target = resolve_in_workspace(file_path)
    if not target.is_file():
        raise ToolExecutionError(f"File not found: {file_path}")

    try:
        content = target.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        raise ToolExecutionError(f"File is not a text file (binary content detected): {file_path}") from None

    occurrences = content.count(search)
    if occurrences == 0:
        raise ToolExecutionError("No matches found")

    target.write_text(content.replace(search, replace), encoding="utf-8")
    LOGGER.info(f"Edited file: {file_path} ({occurrences} replacement(s))")
    return f"Replaced {occurrences} occurrence(s) in {file_path}"
