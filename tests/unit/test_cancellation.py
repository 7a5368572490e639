"""Unit tests for cooperative cancellation and caller callbacks."""

import asyncio
import logging

import pytest

from reactAgent.orchestration.callbacks import OrchestrationCallbacks
from reactAgent.orchestration.session import ToolCall, ToolResult
from reactAgent.utils.cancellation import CancellationToken
from reactAgent.utils.error_handler import OrchestrationCancelled


class TestCancellationToken:

    def test_initial_state(self):
        token = CancellationToken()
        assert token.cancelled is False
        token.raise_if_cancelled()

    def test_cancel_sets_reason(self):
        token = CancellationToken()
        token.cancel("user pressed stop")
        token.cancel("second reason is ignored")

        assert token.cancelled is True
        assert token.reason == "user pressed stop"
        with pytest.raises(OrchestrationCancelled, match="user pressed stop"):
            token.raise_if_cancelled()

    @pytest.mark.asyncio
    async def test_sleep_completes_when_not_cancelled(self):
        token = CancellationToken()
        await token.sleep(0.01)
        await token.sleep(0)

    @pytest.mark.asyncio
    async def test_sleep_interrupted(self):
        token = CancellationToken()
        asyncio.get_running_loop().call_later(0.02, token.cancel)

        with pytest.raises(OrchestrationCancelled, match="Orchestration cancelled"):
            await token.sleep(10)

    @pytest.mark.asyncio
    async def test_run_returns_result(self):
        async def work():
            return 42

        assert await CancellationToken().run(work()) == 42

    @pytest.mark.asyncio
    async def test_run_propagates_errors(self):
        async def work():
            raise ValueError("bad")

        with pytest.raises(ValueError, match="bad"):
            await CancellationToken().run(work())

    @pytest.mark.asyncio
    async def test_run_abandons_work_on_cancel(self):
        started = asyncio.Event()

        async def work():
            started.set()
            await asyncio.sleep(10)

        token = CancellationToken()
        task = asyncio.ensure_future(token.run(work()))
        await started.wait()
        token.cancel("stop")

        with pytest.raises(OrchestrationCancelled):
            await task


class TestOrchestrationCallbacks:

    def test_missing_callbacks_are_ignored(self):
        callbacks = OrchestrationCallbacks()
        callbacks.progress("x")
        callbacks.message("system", "x")
        callbacks.tool_execution(ToolCall("read_file"), ToolResult.ok())

    def test_raising_callback_does_not_propagate(self):
        def broken(role, content):
            raise RuntimeError("ui gone")

        OrchestrationCallbacks(on_message=broken).message("system", "hello")

    @pytest.mark.asyncio
    async def test_async_callback_scheduled_not_awaited(self):
        received = []

        async def on_progress(text):
            received.append(text)

        OrchestrationCallbacks(on_progress=on_progress).progress("step")
        assert received == []
        await asyncio.sleep(0)
        assert received == ["step"]

    @pytest.mark.asyncio
    async def test_async_callback_task_is_held_until_done(self):
        gate = asyncio.Event()

        async def on_message(role, content):
            await gate.wait()

        callbacks = OrchestrationCallbacks(on_message=on_message)
        callbacks.message("system", "hello")
        assert len(callbacks._pending) == 1

        gate.set()
        for _ in range(3):
            await asyncio.sleep(0)
        assert callbacks._pending == set()

    @pytest.mark.asyncio
    async def test_async_callback_failure_is_logged(self, caplog):
        caplog.set_level(logging.ERROR, logger="reactAgent.orchestration.callbacks")

        async def on_progress(text):
            raise RuntimeError("ui gone")

        callbacks = OrchestrationCallbacks(on_progress=on_progress)
        callbacks.progress("step")
        for _ in range(3):
            await asyncio.sleep(0)

        assert callbacks._pending == set()
        assert "Async callback raised: RuntimeError: ui gone" in caplog.text
