"""Unit tests for reply classification, the completion oracle and reflection."""

import pytest

from reactAgent.orchestration.classifiers import CompletionVerdict, RegexResponseClassifier, ResponseClassifier
from reactAgent.orchestration.completion import CompletionOracle, build_completion_prompt
from reactAgent.orchestration.reflection import ReflectionEngine, build_reflection_prompt
from reactAgent.orchestration.session import SessionState, ToolCall, ToolResult
from tests.doubles import ScriptedModel


class TestRegexResponseClassifier:

    def setup_method(self):
        self.classifier = RegexResponseClassifier()

    def test_is_a_response_classifier(self):
        assert isinstance(self.classifier, ResponseClassifier)

    @pytest.mark.parametrize("text", ["I will create the file", "Let me INSTALL it", "We should run tests"])
    def test_action_intent(self, text):
        assert self.classifier.has_action_intent(text)

    def test_no_action_intent(self):
        assert not self.classifier.has_action_intent("Here is what I found so far.")

    def test_completion_yes_with_reason(self):
        verdict = self.classifier.parse_completion("COMPLETE: yes\nREASON: all files written")
        assert verdict == CompletionVerdict(complete=True, reason="all files written")

    def test_completion_is_case_insensitive(self):
        verdict = self.classifier.parse_completion("complete: NO\nreason: tests still failing")
        assert verdict.complete is False
        assert verdict.reason == "tests still failing"

    def test_missing_labels_mean_not_complete(self):
        verdict = self.classifier.parse_completion("Looks finished to me.")
        assert verdict == CompletionVerdict(complete=False)
        assert verdict.reason is None


class TestCompletionOracle:

    @pytest.mark.asyncio
    async def test_prompt_not_recorded_in_transcript(self):
        session = SessionState()
        session.append_message("user", "Add a README")
        session.append_message("assistant", "The README is in place.")
        model = ScriptedModel(["COMPLETE: yes\nREASON: done"])

        verdict = await CompletionOracle(model).check(session, "Add a README", "The README is in place.")

        assert verdict.complete is True
        assert len(session.messages) == 2
        sent = model.calls[0]
        assert len(sent) == 3
        assert "Task: Add a README" in sent[-1]["content"]
        assert "COMPLETE: yes/no" in sent[-1]["content"]

    def test_prompt_carries_counts(self):
        session = SessionState()
        session.record_tool_execution(ToolCall("write_file", {"file_path": "a.txt", "content": "x"}), ToolResult.ok("ok"))
        prompt = build_completion_prompt(session, "task", "reply")
        assert "Tool executions: 1" in prompt
        assert "File changes: 1" in prompt


class TestReflectionEngine:

    @pytest.mark.asyncio
    async def test_reflection_clears_errors_and_reports(self, recorder):
        session = SessionState()
        for i in range(7):
            session.record_error(f"error {i}")
        session.record_tool_execution(ToolCall("read_file", {"file_path": "a.txt"}), ToolResult.fail("File not found"))
        model = ScriptedModel(["Check the path before reading."])

        reply = await ReflectionEngine(model, recorder.callbacks()).reflect(session)

        assert reply == "Check the path before reading."
        assert session.errors == []
        assert session.messages[-1].content == "Check the path before reading."
        assert recorder.messages == [("system", "🤔 Reflection: Check the path before reading.")]

    def test_prompt_keeps_last_five_errors(self):
        session = SessionState()
        for i in range(7):
            session.record_error(f"error {i}")
        prompt = build_reflection_prompt(session)
        assert "error 1\n" not in prompt
        assert "- error 2" in prompt
        assert "- error 6" in prompt
        assert "Current plan status: none" in prompt

    def test_prompt_lists_tool_history_and_file_changes(self):
        session = SessionState()
        session.record_tool_execution(ToolCall("write_file", {"file_path": "a.txt", "content": "x"}), ToolResult.ok("ok"))
        session.record_tool_execution(ToolCall("read_file", {"file_path": "b.txt"}), ToolResult.fail("missing"))
        prompt = build_reflection_prompt(session)
        assert 'read_file({"file_path": "b.txt"}) → ✗' in prompt
        assert "- modify: a.txt" in prompt

    @pytest.mark.asyncio
    async def test_long_reflection_is_truncated_in_message(self, recorder):
        model = ScriptedModel(["x" * 300])
        await ReflectionEngine(model, recorder.callbacks()).reflect(SessionState())
        assert recorder.messages[0][1] == "🤔 Reflection: " + "x" * 200 + "..."
