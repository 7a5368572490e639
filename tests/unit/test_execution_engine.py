"""Unit tests for plan-driven step execution."""

import pytest

from reactAgent.orchestration.execution_engine import DependencyGate, ExecutionEngine
from reactAgent.orchestration.plan_builder import parse_plan
from reactAgent.orchestration.session import ExecutionPlan, PlanStep, SessionState, StepStatus, ToolResult
from tests.doubles import FakeTools


class SleepRecorder:

    def __init__(self):
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)


def _session_with(plan_text: str) -> SessionState:
    session = SessionState()
    session.activate_plan(parse_plan(plan_text))
    return session


class TestRetry:

    @pytest.mark.asyncio
    async def test_always_failing_step_is_attempted_max_retries_times(self, recorder):
        tools = FakeTools(results={"read_file": ToolResult.fail("File not found: a.txt")})
        sleep = SleepRecorder()
        session = _session_with("PLAN:\n1. Read a - read_file(a.txt)")
        engine = ExecutionEngine(tools, recorder.callbacks(), sleep=sleep)

        outcome = await engine.execute_next_step(session)

        step = session.plan.steps[0]
        assert outcome.success is False
        assert outcome.result.error == "File not found: a.txt"
        assert len(tools.executed) == 3
        assert sleep.delays == [2.0, 4.0]
        assert step.retry_count == 3
        assert step.status is StepStatus.FAILED
        assert session.current_step == 0
        assert len(session.tool_history) == 3
        assert len(recorder.tools) == 3
        assert session.errors == ["Step step_0 (read_file) failed: File not found: a.txt"]
        assert recorder.system_messages() == ["❌ Step failed after 3 retries: Read a"]

    @pytest.mark.asyncio
    async def test_first_attempt_success_has_no_delay(self, fake_tools, recorder):
        sleep = SleepRecorder()
        session = _session_with("PLAN:\n1. Read a - read_file(a.txt)\n2. Read b - read_file(b.txt)")
        engine = ExecutionEngine(fake_tools, recorder.callbacks(), sleep=sleep)

        outcome = await engine.execute_next_step(session)

        assert outcome.success is True
        assert outcome.plan_complete is False
        assert sleep.delays == []
        assert session.current_step == 1
        assert session.plan.steps[0].status is StepStatus.SUCCEEDED
        assert recorder.progress == ["Executing step 1/2: Read a"]

    @pytest.mark.asyncio
    async def test_backoff_base_is_configurable(self, recorder):
        tools = FakeTools(results={"read_file": ToolResult.fail("nope")})
        sleep = SleepRecorder()
        session = _session_with("PLAN:\n1. Read a - read_file(a.txt)")

        await ExecutionEngine(tools, recorder.callbacks(), backoff_base=3.0, sleep=sleep).execute_next_step(session)

        assert sleep.delays == [3.0, 9.0]

    @pytest.mark.asyncio
    async def test_arguments_repaired_and_persisted(self, fake_tools, recorder):
        session = SessionState()
        session.activate_plan(
            ExecutionPlan(
                steps=[
                    PlanStep(
                        id="step_0",
                        description="Create a new directory 'my-app'",
                        tool="run_command",
                        arguments={"command": "<command>"},
                    )
                ]
            )
        )

        await ExecutionEngine(fake_tools, recorder.callbacks()).execute_next_step(session)

        assert fake_tools.executed[0].arguments == {"command": "mkdir -p my-app", "cwd": "."}


class TestPlanProgress:

    @pytest.mark.asyncio
    async def test_plan_completes_after_last_step(self, fake_tools, recorder):
        session = _session_with("PLAN:\n1. Read a - read_file(a.txt)\n2. Read b - read_file(b.txt)")
        engine = ExecutionEngine(fake_tools, recorder.callbacks())

        await engine.execute_next_step(session)
        outcome = await engine.execute_next_step(session)

        assert outcome.success is True
        assert outcome.plan_complete is True
        assert session.plan is None
        assert "✅ Execution plan complete" in recorder.system_messages()

    @pytest.mark.asyncio
    async def test_no_plan(self, fake_tools, recorder):
        outcome = await ExecutionEngine(fake_tools, recorder.callbacks()).execute_next_step(SessionState())
        assert outcome.success is False
        assert fake_tools.executed == []

    @pytest.mark.asyncio
    async def test_failed_step_stays_current_and_is_retried_next_call(self, recorder):
        tools = FakeTools(results={"read_file": ToolResult.fail("nope")})
        session = _session_with("PLAN:\n1. Read a - read_file(a.txt)")
        engine = ExecutionEngine(tools, recorder.callbacks(), sleep=SleepRecorder())

        await engine.execute_next_step(session)
        tools.results = {}
        outcome = await engine.execute_next_step(session)

        assert outcome.success is True
        assert session.plan is None
        assert len(tools.executed) == 4


class TestDependencyGate:

    def _gated_session(self) -> SessionState:
        session = _session_with("PLAN:\n1. Read a - read_file(a.txt)\n2. Read b - read_file(b.txt)")
        # Jump to the second step without attempting the first
        session.current_step = 1
        return session

    @pytest.mark.asyncio
    async def test_unattempted_dependency_blocks(self, fake_tools, recorder):
        session = self._gated_session()

        outcome = await ExecutionEngine(fake_tools, recorder.callbacks()).execute_next_step(session)

        assert outcome.success is False
        assert outcome.waiting is True
        assert fake_tools.executed == []
        assert recorder.progress == ["Waiting for dependencies: step_0"]
        assert session.plan.steps[1].retry_count == 0

    @pytest.mark.asyncio
    async def test_gate_by_attempt_allows_after_failed_dependency(self, fake_tools, recorder):
        session = self._gated_session()
        first = session.plan.steps[0]
        first.retry_count = 3
        first.status = StepStatus.FAILED

        outcome = await ExecutionEngine(fake_tools, recorder.callbacks()).execute_next_step(session)

        assert outcome.success is True
        assert [call.arguments for call in fake_tools.executed] == [{"file_path": "b.txt"}]

    @pytest.mark.asyncio
    async def test_gate_by_success_blocks_after_failed_dependency(self, fake_tools, recorder):
        session = self._gated_session()
        first = session.plan.steps[0]
        first.retry_count = 3
        first.status = StepStatus.FAILED

        engine = ExecutionEngine(fake_tools, recorder.callbacks(), gate=DependencyGate.SUCCEEDED)
        outcome = await engine.execute_next_step(session)

        assert outcome.waiting is True
        assert fake_tools.executed == []

    def test_gate_accepts_string_value(self, fake_tools, recorder):
        engine = ExecutionEngine(fake_tools, recorder.callbacks(), gate="succeeded")
        assert engine.gate is DependencyGate.SUCCEEDED
