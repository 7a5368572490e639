"""Local toolkit: builtin tools, registry and the default tool-call parser."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from langchain_core.tools import BaseTool

from reactAgent.orchestration.session import ToolCall, ToolResult
from reactAgent.tools.builtin import BUILTIN_TOOLS
from reactAgent.tools.parser import ToolCallParser
from reactAgent.tools.registry import ToolMeta, ToolRegistry

LOGGER = logging.getLogger(__name__)

BUILTIN_META = [
    ToolMeta("read_file", "read"),
    ToolMeta("list_files", "read"),
    ToolMeta("get_file_info", "read"),
    ToolMeta("search_files", "read"),
    ToolMeta("write_file", "write"),
    ToolMeta("search_replace", "write"),
    ToolMeta("run_command", "shell"),
]


class LocalToolkit:
    """Tool provider backed by the builtin workspace tools.

    Examples:
        >>> toolkit = LocalToolkit()
        >>> calls = toolkit.parse_tool_calls('read_file("package.json")')
        >>> result = await toolkit.execute_tool(calls[0])
    """

    def __init__(
        self,
        tools: Optional[Iterable[BaseTool]] = None,
        parser: Optional[ToolCallParser] = None,
    ):
        self.registry = ToolRegistry(tools=tools if tools is not None else BUILTIN_TOOLS, meta=BUILTIN_META)
        self.parser = parser or ToolCallParser()

    @property
    def tool_names(self) -> List[str]:
        return self.registry.tool_names()

    @property
    def read_only_tools(self):
        return self.registry.read_only_tools()

    async def execute_tool(self, tool_call: ToolCall) -> ToolResult:
        return await self.registry.execute_tool(tool_call)

    def parse_tool_calls(self, text: str) -> List[ToolCall]:
        return self.parser.parse(text)


__all__ = ["LocalToolkit", "ToolCallParser", "ToolMeta", "ToolRegistry", "BUILTIN_META"]
