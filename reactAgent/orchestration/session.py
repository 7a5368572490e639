"""Session data model for the orchestration engine.

A ``SessionState`` belongs to exactly one ``Orchestrator`` and lives for one
conversation: every ``orchestrate()`` call on that orchestrator keeps
accumulating the same transcript and logs. Nothing outside the dialogue loop
mutates it. Create a new orchestrator (or call ``Orchestrator.reset()``) to
start an unrelated conversation.
"""

from __future__ import annotations

import json
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from langchain_core.messages import BaseMessage, SystemMessage
from pydantic import BaseModel, Field, model_validator

from reactAgent.utils.message_utils import message_from_role, to_wire_messages

#: Tools whose successful execution mutates a file in the workspace.
FILE_MUTATING_TOOLS = frozenset({"write_file", "search_replace"})


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class ToolCall:
    """A structured ``{name, arguments}`` request to perform an action."""

    name: str
    arguments: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "arguments", dict(self.arguments or {}))

    def describe(self) -> str:
        return f"{self.name}({json.dumps(self.arguments, ensure_ascii=False, default=str)})"


@dataclass(frozen=True, slots=True)
class ToolResult:
    """Uniform outcome of a tool call. ``success=False`` carries ``error``."""

    success: bool
    content: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, content: str = "") -> "ToolResult":
        return cls(success=True, content=content)

    @classmethod
    def fail(cls, error: str) -> "ToolResult":
        return cls(success=False, error=error or "Unknown error")


#: Upper bound on attempts per plan step; STEP_MAX_RETRIES is validated against the same limit.
MAX_STEP_RETRIES = 10


class StepStatus(str, Enum):
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class PlanStep(BaseModel):
    """Single executable step of a plan."""

    id: str = Field(min_length=1)
    description: str = ""
    tool: str = Field(min_length=1)
    arguments: Dict[str, Any] = Field(default_factory=dict)
    dependencies: List[str] = Field(default_factory=list)
    retry_count: int = Field(default=0, ge=0)
    max_retries: int = Field(default=3, ge=1, le=MAX_STEP_RETRIES)
    status: StepStatus = StepStatus.PENDING


class ExecutionPlan(BaseModel):
    """Ordered steps; dependencies may only point at earlier steps of the same plan."""

    steps: List[PlanStep] = Field(default_factory=list)
    estimated_time: Optional[str] = None
    risks: Optional[List[str]] = None

    @model_validator(mode="after")
    def _check_dependencies(self) -> "ExecutionPlan":
        seen: set[str] = set()
        for step in self.steps:
            if step.id in seen:
                raise ValueError(f"Duplicate step id: {step.id}")
            for dep in step.dependencies:
                if dep not in seen:
                    raise ValueError(
                        f"Step '{step.id}' depends on '{dep}', which is not an earlier step of this plan"
                    )
            # Deduplicate while keeping order
            step.dependencies = list(dict.fromkeys(step.dependencies))
            seen.add(step.id)
        return self

    def get_step(self, step_id: str) -> Optional[PlanStep]:
        for step in self.steps:
            if step.id == step_id:
                return step
        return None


@dataclass(frozen=True, slots=True)
class ToolExecutionRecord:
    id: str
    tool_call: ToolCall
    result: ToolResult
    timestamp: datetime
    duration_ms: float = 0.0


@dataclass(frozen=True, slots=True)
class FileChangeRecord:
    path: str
    operation: Literal["create", "modify", "delete"]
    before: Optional[str]
    after: Optional[str]
    timestamp: datetime


@dataclass
class SessionState:
    """Mutable aggregate owned by one orchestrator for one conversation.

    ``tool_history`` and ``file_changes`` only ever grow. ``errors`` grows
    until a reflection cycle consumes it via ``clear_errors()``.
    """

    plan: Optional[ExecutionPlan] = None
    current_step: int = 0
    tool_history: List[ToolExecutionRecord] = field(default_factory=list)
    file_changes: List[FileChangeRecord] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    messages: List[BaseMessage] = field(default_factory=list)
    context: Dict[str, Any] = field(default_factory=dict)

    # ========== Transcript ==========

    def append_message(self, role: str, content: str) -> BaseMessage:
        message = message_from_role(role, content)
        self.messages.append(message)
        return message

    def set_system_message(self, content: str) -> None:
        """Install or refresh the leading system message of the transcript."""
        if self.messages and isinstance(self.messages[0], SystemMessage):
            self.messages[0] = SystemMessage(content=content)
        else:
            self.messages.insert(0, SystemMessage(content=content))

    def transcript(self) -> List[Dict[str, str]]:
        return to_wire_messages(self.messages)

    # ========== Logs ==========

    def record_tool_execution(
        self,
        tool_call: ToolCall,
        result: ToolResult,
        duration_ms: float = 0.0,
    ) -> ToolExecutionRecord:
        record = ToolExecutionRecord(
            id=f"tool_{uuid.uuid4().hex[:12]}",
            tool_call=tool_call,
            result=result,
            timestamp=_now(),
            duration_ms=duration_ms,
        )
        self.tool_history.append(record)

        if result.success and tool_call.name in FILE_MUTATING_TOOLS:
            path = tool_call.arguments.get("file_path")
            if path:
                after = tool_call.arguments.get("content") if tool_call.name == "write_file" else None
                self.file_changes.append(
                    FileChangeRecord(
                        path=str(path),
                        operation="modify",
                        before=None,
                        after=after,
                        timestamp=_now(),
                    )
                )
        return record

    def record_error(self, message: str) -> None:
        self.errors.append(message)

    def clear_errors(self) -> None:
        self.errors.clear()

    # ========== Plan ==========

    def activate_plan(self, plan: ExecutionPlan) -> None:
        self.plan = plan
        self.current_step = 0

    def clear_plan(self) -> None:
        self.plan = None
        self.current_step = 0

    def current_plan_step(self) -> Optional[PlanStep]:
        if self.plan is None or self.current_step >= len(self.plan.steps):
            return None
        return self.plan.steps[self.current_step]

    # ========== Summaries ==========

    @property
    def successful_executions(self) -> int:
        return sum(1 for record in self.tool_history if record.result.success)

    @property
    def failed_executions(self) -> int:
        return sum(1 for record in self.tool_history if not record.result.success)

    def files_touched(self) -> set[str]:
        return {change.path for change in self.file_changes}

    def recent_tool_history(self, count: int) -> str:
        return "\n".join(
            f"{record.tool_call.describe()} → {'✓' if record.result.success else '✗'}"
            for record in self.tool_history[-count:]
        )

    def context_summary(self) -> str:
        return (
            f"Tool executions: {len(self.tool_history)}\n"
            f"File changes: {len(self.file_changes)}\n"
            f"Errors: {len(self.errors)}"
        )

    def execution_summary(self) -> str:
        return (
            "📊 Execution Summary:\n"
            f"- Tools executed: {len(self.tool_history)} "
            f"({self.successful_executions} successful, {self.failed_executions} failed)\n"
            f"- Files changed: {len(self.files_touched())}\n"
            f"- Status: {'executing plan' if self.plan else 'no active plan'}"
        )


__all__ = [
    "FILE_MUTATING_TOOLS",
    "MAX_STEP_RETRIES",
    "ToolCall",
    "ToolResult",
    "StepStatus",
    "PlanStep",
    "ExecutionPlan",
    "ToolExecutionRecord",
    "FileChangeRecord",
    "SessionState",
]
