"""Interactive command-line front end for the orchestrator."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Dict, Optional

from reactAgent.models.ollama_client import OllamaChatClient
from reactAgent.orchestration.session import ToolCall, ToolResult
from reactAgent.orchestrator import Orchestrator
from reactAgent.tools.workspace import workspace_root
from reactAgent.utils.error_handler import ReactAgentError
from reactAgent.utils.logging_utils import log_error, setup_logging

LOGGER = logging.getLogger(__name__)

DEFAULT_SYSTEM_MESSAGE = (
    "You are a coding assistant working inside a local project workspace. "
    "Use the available tools to inspect and change files and to run commands."
)


class ReactAgentCLI:
    """Read-eval loop: slash commands are handled locally, anything else is a task.

    Ctrl-C exits; a running task is cancelled with the event loop.
    """

    COMMANDS: Dict[str, str] = {
        "/quit": "Exit",
        "/exit": "Exit",
        "/help": "Show this help",
        "/reset": "Start a new conversation",
        "/status": "Show session counters and touched files",
        "/models": "List models installed on the endpoint",
        "/model <name>": "Switch the model used for the next task",
    }

    def __init__(self, orchestrator: Orchestrator, system_message: str = DEFAULT_SYSTEM_MESSAGE):
        self.orchestrator = orchestrator
        self.system_message = system_message
        self.model = orchestrator.settings.model.model
        self.endpoint = orchestrator.settings.model.endpoint
        self._command_handlers = self._build_command_handlers()
        self._running = False

    def _build_command_handlers(self) -> Dict[str, Callable]:
        return {
            "/quit": self._handle_quit,
            "/exit": self._handle_quit,
            "/help": self._handle_help,
            "/reset": self._handle_reset,
            "/status": self._handle_status,
            "/models": self._handle_models,
            "/model": self._handle_model,
        }

    # ========== Main Loop ==========

    async def run(self) -> None:
        self._running = True
        self.print_welcome()

        while self._running:
            try:
                user_input = await self.get_input()
                if not user_input:
                    continue

                if user_input.startswith("/"):
                    if not await self.handle_command(user_input):
                        break
                else:
                    await self.handle_user_message(user_input)

            except (KeyboardInterrupt, EOFError):
                print("\nBye!")
                LOGGER.info("Session interrupted by user")
                break
            except ReactAgentError as e:
                log_error(LOGGER, e, "handling user input")
                print(f"❌ {e.user_message}")

        LOGGER.info("CLI shutting down")

    def print_welcome(self) -> None:
        print("reactAgent CLI ready.")
        print(f"Model: {self.model} @ {self.endpoint}")
        print(f"Workspace: {workspace_root()}")
        print("Type /help for commands.\n")

    async def get_input(self) -> str:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, lambda: input("You> ").strip())

    # ========== Commands ==========

    async def handle_command(self, cmd: str) -> bool:
        """Dispatch a slash command. Returns False to leave the loop."""
        parts = cmd.split(maxsplit=1)
        name = parts[0].lower()
        arg = parts[1] if len(parts) > 1 else None

        handler = self._command_handlers.get(name)
        if handler is None:
            print(f"❌ Unknown command: {name}")
            print("   Type /help for the command list")
            return True
        return await handler(arg)

    async def _handle_quit(self, arg: Optional[str]) -> bool:
        print("Session ended.")
        return False

    async def _handle_help(self, arg: Optional[str]) -> bool:
        print("\nCommands:")
        for cmd, desc in self.COMMANDS.items():
            print(f"  {cmd:<16} {desc}")
        print()
        return True

    async def _handle_reset(self, arg: Optional[str]) -> bool:
        self.orchestrator.reset()
        print("✅ Conversation reset.\n")
        return True

    async def _handle_status(self, arg: Optional[str]) -> bool:
        session = self.orchestrator.session
        print()
        print(session.context_summary())
        touched = session.files_touched()
        if touched:
            print("Files touched:")
            for path in touched:
                print(f"  - {path}")
        print()
        return True

    async def _handle_models(self, arg: Optional[str]) -> bool:
        client = OllamaChatClient.from_settings(self.endpoint, self.model, settings=self.orchestrator.settings)
        names = await client.list_models()
        if not names:
            print("No models installed.\n")
            return True
        print()
        for name in names:
            marker = "*" if name == self.model else " "
            print(f" {marker} {name}")
        print()
        return True

    async def _handle_model(self, arg: Optional[str]) -> bool:
        if not arg:
            print(f"Current model: {self.model}\n")
            return True
        self.model = arg.strip()
        LOGGER.info(f"Model switched to {self.model}")
        print(f"✅ Using model {self.model}\n")
        return True

    # ========== Tasks ==========

    @staticmethod
    def _print_progress(text: str) -> None:
        print(f"  … {text}")

    @staticmethod
    def _print_tool(call: ToolCall, result: ToolResult) -> None:
        mark = "✓" if result.success else "✗"
        detail = result.content if result.success else result.error
        print(f"  [{mark}] {call.describe()}")
        if detail:
            first_line = str(detail).strip().splitlines()[0] if str(detail).strip() else ""
            print(f"      {first_line[:160]}")

    @staticmethod
    def _print_message(role: str, content: str) -> None:
        if role == "assistant":
            print(f"\nAgent> {content}\n")
        else:
            print(f"[{role}] {content}")

    async def handle_user_message(self, message: str) -> None:
        await self.orchestrator.orchestrate(
            message,
            self.system_message,
            model=self.model,
            endpoint=self.endpoint,
            on_progress=self._print_progress,
            on_tool_execution=self._print_tool,
            on_message=self._print_message,
        )


async def async_main() -> None:
    setup_logging()
    cli = ReactAgentCLI(Orchestrator())
    await cli.run()


def main() -> None:
    try:
        asyncio.run(async_main())
    except KeyboardInterrupt:
        print("\nBye!")


__all__ = ["ReactAgentCLI", "DEFAULT_SYSTEM_MESSAGE", "async_main", "main"]
