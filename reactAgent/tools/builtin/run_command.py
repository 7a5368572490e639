"""Execute shell commands inside the workspace."""

from __future__ import annotations

import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import Annotated, Dict

from langchain_core.tools import tool

from reactAgent.config.settings import get_settings
from reactAgent.tools.workspace import resolve_in_workspace, workspace_root
from reactAgent.utils.error_handler import ToolExecutionError

LOGGER = logging.getLogger(__name__)

__all__ = ["run_command"]


def _command_env() -> Dict[str, str]:
    env = dict(os.environ)
    env["AGENT_WORKSPACE_PATH"] = str(workspace_root())

    # Current interpreter first on PATH (venv, uv, conda)
    python_dir = Path(sys.executable).parent
    env["PATH"] = f"{python_dir}{os.pathsep}{env.get('PATH', '')}"
    return env


@tool
async def run_command(
    command: Annotated[str, "Shell command to execute (e.g., 'npm install', 'ls -la')"],
    cwd: Annotated[str, "Working directory relative to workspace root"] = ".",
) -> str:
    """Execute a shell command in the workspace.

    The command is killed after the configured timeout. A non-zero exit code
    is a failure and its output is reported in the error.

    Examples:
        run_command("mkdir -p my-app")
        run_command("npm install", cwd="my-app")
    """
    working_dir = resolve_in_workspace(cwd)
    if not working_dir.is_dir():
        raise ToolExecutionError(f"Working directory not found: {cwd}")

    timeout = get_settings().tools.command_timeout
    LOGGER.info(f"Executing command: {command} (cwd={cwd})")

    process = await asyncio.create_subprocess_shell(
        command,
        cwd=str(working_dir),
        env=_command_env(),
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        raise ToolExecutionError(f"Command timeout ({timeout}s): {command}") from None
    except asyncio.CancelledError:
        process.kill()
        await process.wait()
        raise

    output = ""
    if stdout:
        output += f"STDOUT:\n{stdout.decode('utf-8', errors='replace')}\n"
    if stderr:
        output += f"STDERR:\n{stderr.decode('utf-8', errors='replace')}\n"

    if process.returncode != 0:
        raise ToolExecutionError(f"Command failed (exit code {process.returncode}): {command}\n{output}")

    return f"Command executed: {command}\n{output}"
