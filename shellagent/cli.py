"""Console front-end driving the agent runner against the local shell."""

from __future__ import annotations

import asyncio
import logging
import sys
import uuid
from typing import Callable, Dict, Optional, get_args

from shellagent.config import get_settings
from shellagent.executors import LocalShellExecutor
from shellagent.protocol import (
    AgentEvent,
    AiModel,
    ApproveToolAction,
    CancelAction,
    ConfirmToolAction,
    MessageEvent,
    PlanUpdatedEvent,
    RejectToolAction,
    StateChangedEvent,
    ToolCall,
    ToolRequestedEvent,
    ToolResultEvent,
    UserMessageAction,
    WaitingForApprovalEvent,
)
from shellagent.runtime.app import build_application
from shellagent.runtime.runner import AgentRunner
from shellagent.utils.logging_utils import setup_logging

LOGGER = logging.getLogger("shellagent.cli")

STATUS_MARKS = {"pending": " ", "in_progress": ">", "done": "x", "blocked": "!"}


class ConsolePrinter:
    """Event sink rendering agent events on stdout."""

    def __init__(self, write: Callable[[str], None] = sys.stdout.write):
        self._write = write
        self._shown: Dict[str, int] = {}
        self.tool_calls: Dict[str, ToolCall] = {}
        self.waiting: Optional[str] = None
        self.state: Optional[str] = None

    def __call__(self, event: AgentEvent) -> None:
        if isinstance(event, MessageEvent):
            self._message(event)
        elif isinstance(event, PlanUpdatedEvent):
            if event.steps:
                self._write("Plan:\n")
                for step in event.steps:
                    self._write(f"  [{STATUS_MARKS.get(step.status, '?')}] {step.description}\n")
        elif isinstance(event, ToolRequestedEvent):
            call = event.tool_call
            self.tool_calls[call.id] = call
            risk = f" (risk: {call.risk})" if call.risk else ""
            tag = " [interactive]" if call.interactive else ""
            self._write(f"Proposed{tag}: {call.input.get('command', '')}{risk}\n")
        elif isinstance(event, WaitingForApprovalEvent):
            self.waiting = event.tool_call_id
        elif isinstance(event, ToolResultEvent):
            result = event.result
            body = result.output or result.error or ""
            self._write(f"[{result.status}] {body}\n")
        elif isinstance(event, StateChangedEvent):
            self.state = event.state
            detail = f" - {event.detail}" if event.detail else ""
            self._write(f"({event.state}{detail})\n")

    def _message(self, event: MessageEvent) -> None:
        shown = self._shown.get(event.message_id, 0)
        if event.partial:
            self._write(event.content[shown:])
            self._shown[event.message_id] = len(event.content)
            return
        if shown:
            self._write("\n")
        else:
            self._write(f"Agent> {event.content}\n")
        self._shown.pop(event.message_id, None)

    def take_waiting(self) -> Optional[ToolCall]:
        tool_call_id, self.waiting = self.waiting, None
        if tool_call_id is None:
            return None
        return self.tool_calls.get(tool_call_id)


class ShellAgentCLI:
    """Read a goal, stream the assistant, ask before each command."""

    COMMANDS: Dict[str, str] = {
        "/quit": "Exit",
        "/exit": "Exit",
        "/help": "Show this help",
        "/model <id>": "Switch model for the next goal",
        "/steps <n>": "Set the step budget for the next goal",
    }

    def __init__(self, runner: AgentRunner, printer: ConsolePrinter, executor: LocalShellExecutor):
        self.runner = runner
        self.printer = printer
        self.executor = executor
        self.model: Optional[str] = None
        self.max_steps: Optional[int] = None
        self.session_id = str(uuid.uuid4())

    async def _ask(self, prompt: str) -> str:
        loop = asyncio.get_running_loop()
        return (await loop.run_in_executor(None, lambda: input(prompt))).strip()

    def _handle_command(self, text: str) -> bool:
        """Apply a slash command; return False when the loop should stop."""
        name, _, arg = text.partition(" ")
        name = name.lower()
        if name in {"/quit", "/exit"}:
            return False
        if name == "/model" and arg:
            if arg.strip() in get_args(AiModel):
                self.model = arg.strip()
                print(f"Model set to {self.model}")
            else:
                print(f"Unknown model. Choose one of: {', '.join(get_args(AiModel))}")
        elif name == "/steps" and arg.strip().isdigit():
            self.max_steps = max(1, int(arg.strip()))
            print(f"Step budget set to {self.max_steps}")
        else:
            for command, description in self.COMMANDS.items():
                print(f"  {command:<14} {description}")
        return True

    async def run_goal(self, goal: str) -> None:
        self.session_id = str(uuid.uuid4())
        await self.runner.handle_action(
            UserMessageAction(
                session_id=self.session_id,
                message_id=str(uuid.uuid4()),
                content=goal,
                model=self.model,
                max_steps=self.max_steps,
            )
        )
        while True:
            call = self.printer.take_waiting()
            if call is None:
                return
            answer = (await self._ask("Run this command? [y/N] ")).lower()
            if answer not in {"y", "yes"}:
                await self.runner.handle_action(
                    RejectToolAction(session_id=self.session_id, tool_call_id=call.id, reason="Declined at console.")
                )
                return
            await self.runner.handle_action(ApproveToolAction(session_id=self.session_id, tool_call_id=call.id))
            if call.interactive and self.printer.state == "observe":
                await self.executor.wait_interactive(self.session_id)
                await self._ask("Press Enter once the interactive command is done...")
                await self.runner.handle_action(ConfirmToolAction(session_id=self.session_id, tool_call_id=call.id))

    async def loop(self) -> None:
        print("shellagent ready. Describe a goal, or /help.")
        while True:
            try:
                text = await self._ask("You> ")
            except (KeyboardInterrupt, EOFError):
                print("\nBye.")
                break
            if not text:
                continue
            if text.startswith("/"):
                if not self._handle_command(text):
                    break
                continue
            try:
                await self.run_goal(text)
            except KeyboardInterrupt:
                await self.runner.handle_action(CancelAction(session_id=self.session_id, reason="Interrupted."))


async def async_main() -> None:
    settings = get_settings()
    setup_logging(getattr(logging, settings.observability.log_level.upper(), logging.INFO), settings.observability.log_dir)

    executor = LocalShellExecutor()
    printer = ConsolePrinter()
    runner = build_application(
        executor=executor,
        emit_event=printer,
        settings=settings,
        context_provider=executor.context_provider,
    )
    await ShellAgentCLI(runner, printer, executor).loop()


def main() -> None:
    asyncio.run(async_main())


if __name__ == "__main__":
    main()
