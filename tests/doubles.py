"""Test doubles shared by unit and integration tests."""

from typing import Callable, Dict, List, Optional

from reactAgent.orchestration.callbacks import OrchestrationCallbacks
from reactAgent.orchestration.session import ToolCall, ToolResult
from reactAgent.tools.parser import ToolCallParser


class ScriptedModel:
    """Chat model double.

    Replies come from ``responder(messages)`` when given, else from the
    ``replies`` queue (the last reply repeats once the queue runs dry).
    Every request is kept in ``calls``.
    """

    def __init__(self, replies: Optional[List[str]] = None, responder: Optional[Callable] = None):
        self.replies = list(replies or [])
        self.responder = responder
        self.calls: List[List[Dict[str, str]]] = []

    async def chat(self, messages, cancel_token=None) -> str:
        self.calls.append([dict(message) for message in messages])
        if self.responder is not None:
            return self.responder(messages)
        if len(self.replies) > 1:
            return self.replies.pop(0)
        return self.replies[0] if self.replies else ""


class FailingModel:
    """Chat model whose every request raises ``error``."""

    def __init__(self, error: Exception):
        self.error = error
        self.calls = 0

    async def chat(self, messages, cancel_token=None) -> str:
        self.calls += 1
        raise self.error


class FakeTools:
    """Tool provider double recording every executed call."""

    def __init__(self, results: Optional[Dict[str, ToolResult]] = None, parser: Optional[ToolCallParser] = None):
        self.results = results or {}
        self.parser = parser or ToolCallParser()
        self.executed: List[ToolCall] = []

    async def execute_tool(self, tool_call: ToolCall) -> ToolResult:
        self.executed.append(tool_call)
        return self.results.get(tool_call.name, ToolResult.ok(f"{tool_call.name} ok"))

    def parse_tool_calls(self, text: str) -> List[ToolCall]:
        return self.parser.parse(text)


class Recorder:
    """Collects everything the engine reports through the callbacks."""

    def __init__(self):
        self.progress: List[str] = []
        self.tools: List[tuple] = []
        self.messages: List[tuple] = []

    def callbacks(self) -> OrchestrationCallbacks:
        return OrchestrationCallbacks(
            on_progress=self.progress.append,
            on_tool_execution=lambda call, result: self.tools.append((call, result)),
            on_message=lambda role, content: self.messages.append((role, content)),
        )

    def system_messages(self) -> List[str]:
        return [content for role, content in self.messages if role == "system"]


async def no_sleep(delay: float) -> None:
    return None
