"""File operation tools with workspace isolation."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Annotated

from langchain_core.tools import tool

from reactAgent.config.settings import get_settings
from reactAgent.tools.workspace import display_path, resolve_in_workspace
from reactAgent.utils.error_handler import ToolExecutionError

LOGGER = logging.getLogger(__name__)

__all__ = ["read_file", "write_file", "list_files", "get_file_info"]


@tool
def read_file(
    file_path: Annotated[str, "File path relative to workspace root"]
) -> str:
    """Read a text file from the workspace.

    Large files are truncated to the configured character limit.
    NEVER use ".." or "/" prefix.

    Examples:
        read_file("package.json")
        read_file("src/index.ts")
    """
    target = resolve_in_workspace(file_path)
    if not target.exists():
        raise ToolExecutionError(f"File not found: {file_path}")
    if not target.is_file():
        raise ToolExecutionError(f"Not a file: {file_path}")

    try:
        content = target.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        raise ToolExecutionError(f"File is not a text file (binary content detected): {file_path}") from None

    limit = get_settings().tools.max_read_chars
    if len(content) > limit:
        LOGGER.info(f"Read file preview: {file_path} ({limit} of {len(content)} chars)")
        return f"{content[:limit]}\n\n⚠️ File truncated ({len(content):,} chars total)"

    LOGGER.info(f"Read file: {file_path} ({len(content)} chars)")
    return content


@tool
def write_file(
    file_path: Annotated[str, "File path relative to workspace (e.g., 'src/app.ts')"],
    content: Annotated[str, "File content to write"],
) -> str:
    """Write a file, creating parent directories and overwriting existing content.

    Examples:
        write_file("README.md", "# My App")
    """
    target = resolve_in_workspace(file_path)
    if target.is_dir():
        raise ToolExecutionError(f"Path is a directory: {file_path}")

    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content, encoding="utf-8")

    LOGGER.info(f"Wrote file: {file_path} ({len(content)} chars)")
    return f"Successfully wrote {len(content)} characters to {file_path}"


@tool
def list_files(
    directory_path: Annotated[str, "Directory to list, '.' for the workspace root"] = "."
) -> str:
    """List a workspace directory, directories first.

    Examples:
        list_files(".")
        list_files("src")
    """
    target = resolve_in_workspace(directory_path)
    if not target.exists():
        raise ToolExecutionError(f"Directory not found: {directory_path}")
    if not target.is_dir():
        raise ToolExecutionError(f"Not a directory: {directory_path}")

    entries = sorted(target.iterdir(), key=lambda item: (not item.is_dir(), item.name.lower()))
    lines = [
        f"  {'📁' if item.is_dir() else '📄'} {display_path(item)}{'/' if item.is_dir() else ''}"
        for item in entries
    ]

    LOGGER.info(f"Listed directory: {directory_path} ({len(lines)} items)")
    if not lines:
        return f"Directory is empty: {directory_path}"
    return f"Files in {directory_path}:\n" + "\n".join(lines)


@tool
def get_file_info(
    file_path: Annotated[str, "File or directory path relative to workspace root"]
) -> str:
    """Return size, modification time and type of a workspace path."""
    target = resolve_in_workspace(file_path)
    if not target.exists():
        raise ToolExecutionError(f"File not found: {file_path}")

    stats = target.stat()
    modified = datetime.fromtimestamp(stats.st_mtime, tz=timezone.utc).isoformat()
    return (
        f"File info for {file_path}:\n"
        f"  Size: {stats.st_size} bytes\n"
        f"  Modified: {modified}\n"
        f"  Type: {'directory' if target.is_dir() else 'file'}"
    )
