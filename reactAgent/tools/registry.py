"""Tool registry: langchain-core tools keyed by name, with workspace-access metadata."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Literal, Optional

from langchain_core.tools import BaseTool

from reactAgent.orchestration.session import ToolCall, ToolResult
from reactAgent.utils.error_handler import OrchestrationCancelled

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ToolMeta:
    """How a tool touches the workspace.

    ``read`` tools never mutate anything, ``write`` tools edit files and
    ``shell`` tools run arbitrary commands.
    """

    name: str
    access: Literal["read", "write", "shell"]

    @property
    def read_only(self) -> bool:
        return self.access == "read"


class ToolRegistry:
    """Resolves tool calls by name and executes them."""

    def __init__(self, tools: Iterable[BaseTool], meta: Optional[Iterable[ToolMeta]] = None) -> None:
        self._tools: Dict[str, BaseTool] = {tool.name: tool for tool in tools}
        self._meta: Dict[str, ToolMeta] = {item.name: item for item in (meta or [])}
        undocumented = sorted(set(self._tools) - set(self._meta))
        if undocumented:
            LOGGER.debug(f"Tools without access metadata (treated as shell): {undocumented}")

    def tool_names(self) -> List[str]:
        return sorted(self._tools)

    def access_of(self, name: str) -> str:
        meta = self._meta.get(name)
        return meta.access if meta else "shell"

    def read_only_tools(self) -> FrozenSet[str]:
        return frozenset(name for name in self._tools if self.access_of(name) == "read")

    async def execute_tool(self, tool_call: ToolCall) -> ToolResult:
        """Run a tool call; any failure comes back as ``ToolResult(success=False)``.

        Argument-schema validation errors, unknown tools and exceptions raised
        by the tool itself are all converted. Cancellation propagates.
        """
        tool = self._tools.get(tool_call.name)
        if tool is None:
            LOGGER.warning(f"Unknown tool requested: {tool_call.name}")
            return ToolResult.fail(f"Unknown tool: {tool_call.name}")

        if self.access_of(tool_call.name) != "read":
            LOGGER.info(f"{tool_call.name} ({self.access_of(tool_call.name)} access) in the workspace")

        try:
            output = await tool.ainvoke(dict(tool_call.arguments))
        except (OrchestrationCancelled, asyncio.CancelledError):
            raise
        except Exception as e:
            LOGGER.info(f"Tool {tool_call.name} failed: {type(e).__name__}: {e}")
            return ToolResult.fail(str(e) or type(e).__name__)

        return ToolResult.ok(output if isinstance(output, str) else str(output))


__all__ = ["ToolMeta", "ToolRegistry"]
