"""Workspace confinement for the builtin tools."""

from __future__ import annotations

import os
from pathlib import Path

from reactAgent.config.settings import ToolSettings
from reactAgent.utils.error_handler import ToolExecutionError


def workspace_root() -> Path:
    """Return the workspace root (``ToolSettings.workspace_path``, else the process cwd).

    A fresh ``ToolSettings`` is read on every call, not the cached settings,
    so tests and the CLI can repoint ``AGENT_WORKSPACE_PATH`` per session.
    """
    root = ToolSettings().workspace_path or os.getcwd()
    return Path(root).resolve()


def resolve_in_workspace(path: str) -> Path:
    """Resolve a workspace-relative path, rejecting escapes.

    Raises:
        ToolExecutionError: For ``..`` components, absolute paths, or paths
            that leave the workspace after resolving symlinks
    """
    path = (path or ".").strip()
    if ".." in Path(path).parts or path.startswith("/") or Path(path).is_absolute():
        raise ToolExecutionError(f"Access denied. Invalid path: {path}")

    root = workspace_root()
    target = (root / path).resolve()
    try:
        target.relative_to(root)
    except ValueError:
        raise ToolExecutionError(f"Access denied. Path escapes the workspace: {path}") from None
    return target


def display_path(target: Path) -> str:
    """Workspace-relative rendering of ``target``."""
    try:
        relative = target.relative_to(workspace_root())
    except ValueError:
        return str(target)
    return str(relative) if str(relative) != "." else "."


__all__ = ["workspace_root", "resolve_in_workspace", "display_path"]
