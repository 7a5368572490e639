"""Orchestration components composed by the dialogue loop."""

from .arguments import (
    extract_command_from_description,
    infer_tool_from_description,
    parse_tool_arguments,
    validate_and_fix_arguments,
)
from .batch_executor import PARALLEL_SAFE_TOOLS, BatchExecutor, format_tool_results
from .callbacks import OrchestrationCallbacks, ToolProvider
from .classifiers import CompletionVerdict, RegexResponseClassifier, ResponseClassifier
from .completion import CompletionOracle
from .execution_engine import DependencyGate, ExecutionEngine, StepOutcome
from .plan_builder import PlanBuilder, parse_plan
from .reflection import ReflectionEngine
from .session import (
    ExecutionPlan,
    FileChangeRecord,
    PlanStep,
    SessionState,
    StepStatus,
    ToolCall,
    ToolExecutionRecord,
    ToolResult,
)

__all__ = [
    "extract_command_from_description",
    "infer_tool_from_description",
    "parse_tool_arguments",
    "validate_and_fix_arguments",
    "PARALLEL_SAFE_TOOLS",
    "BatchExecutor",
    "format_tool_results",
    "OrchestrationCallbacks",
    "ToolProvider",
    "CompletionVerdict",
    "RegexResponseClassifier",
    "ResponseClassifier",
    "CompletionOracle",
    "DependencyGate",
    "ExecutionEngine",
    "StepOutcome",
    "PlanBuilder",
    "parse_plan",
    "ReflectionEngine",
    "ExecutionPlan",
    "FileChangeRecord",
    "PlanStep",
    "SessionState",
    "StepStatus",
    "ToolCall",
    "ToolExecutionRecord",
    "ToolResult",
]
