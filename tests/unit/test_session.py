"""Unit tests for SessionState bookkeeping."""

from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from reactAgent.orchestration.plan_builder import parse_plan
from reactAgent.orchestration.session import SessionState, ToolCall, ToolResult


class TestTranscript:

    def test_system_message_installed_once(self):
        session = SessionState()
        session.append_message("user", "hello")
        session.set_system_message("v1")
        session.set_system_message("v2")

        assert isinstance(session.messages[0], SystemMessage)
        assert session.messages[0].content == "v2"
        assert len(session.messages) == 2

    def test_wire_roles(self):
        session = SessionState()
        session.set_system_message("sys")
        session.append_message("user", "task")
        session.append_message("assistant", "reply")

        assert isinstance(session.messages[1], HumanMessage)
        assert isinstance(session.messages[2], AIMessage)
        assert session.transcript() == [
            {"role": "system", "content": "sys"},
            {"role": "user", "content": "task"},
            {"role": "assistant", "content": "reply"},
        ]


class TestLogs:

    def test_successful_write_records_file_change(self):
        session = SessionState()
        session.record_tool_execution(
            ToolCall("write_file", {"file_path": "a.txt", "content": "hello"}), ToolResult.ok("ok"), 3.5
        )

        assert len(session.tool_history) == 1
        assert session.tool_history[0].duration_ms == 3.5
        change = session.file_changes[0]
        assert (change.path, change.operation, change.before, change.after) == ("a.txt", "modify", None, "hello")

    def test_failed_write_records_no_file_change(self):
        session = SessionState()
        session.record_tool_execution(ToolCall("write_file", {"file_path": "a.txt", "content": "x"}), ToolResult.fail("denied"))
        assert session.file_changes == []
        assert session.failed_executions == 1

    def test_read_records_no_file_change(self):
        session = SessionState()
        session.record_tool_execution(ToolCall("read_file", {"file_path": "a.txt"}), ToolResult.ok("x"))
        assert session.file_changes == []
        assert session.successful_executions == 1

    def test_recent_tool_history_format(self):
        session = SessionState()
        session.record_tool_execution(ToolCall("list_files", {"directory_path": "."}), ToolResult.ok("x"))
        session.record_tool_execution(ToolCall("read_file", {"file_path": "b"}), ToolResult.fail("nope"))

        assert session.recent_tool_history(1) == 'read_file({"file_path": "b"}) → ✗'
        assert session.recent_tool_history(5).splitlines()[0] == 'list_files({"directory_path": "."}) → ✓'

    def test_execution_summary(self):
        session = SessionState()
        session.record_tool_execution(ToolCall("write_file", {"file_path": "a.txt", "content": "1"}), ToolResult.ok())
        session.record_tool_execution(ToolCall("write_file", {"file_path": "a.txt", "content": "2"}), ToolResult.ok())
        session.record_tool_execution(ToolCall("read_file", {"file_path": "a.txt"}), ToolResult.fail("x"))

        summary = session.execution_summary()
        assert summary.startswith("📊 Execution Summary:")
        assert "Tools executed: 3 (2 successful, 1 failed)" in summary
        assert "Files changed: 1" in summary
        assert session.files_touched() == {"a.txt"}

    def test_errors_clear(self):
        session = SessionState()
        session.record_error("boom")
        session.clear_errors()
        assert session.errors == []


class TestPlanState:

    def test_activate_and_clear(self):
        session = SessionState()
        plan = parse_plan("PLAN:\n1. Read a - read_file(a.txt)\n2. Read b - read_file(b.txt)")
        session.activate_plan(plan)

        assert session.current_plan_step().id == "step_0"
        session.current_step = 2
        assert session.current_plan_step() is None

        session.clear_plan()
        assert session.plan is None
        assert session.current_step == 0
