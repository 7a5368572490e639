"""reactAgent: a plan/act/reflect dialogue loop over a local chat model and workspace tools."""

from reactAgent.orchestration.classifiers import CompletionVerdict, RegexResponseClassifier, ResponseClassifier
from reactAgent.orchestration.execution_engine import DependencyGate
from reactAgent.orchestration.session import (
    ExecutionPlan,
    PlanStep,
    SessionState,
    StepStatus,
    ToolCall,
    ToolResult,
)
from reactAgent.orchestrator import Orchestrator
from reactAgent.utils.cancellation import CancellationToken

__all__ = [
    "Orchestrator",
    "CancellationToken",
    "CompletionVerdict",
    "DependencyGate",
    "ExecutionPlan",
    "PlanStep",
    "RegexResponseClassifier",
    "ResponseClassifier",
    "SessionState",
    "StepStatus",
    "ToolCall",
    "ToolResult",
]
