"""Interfaces for the agent runner's external collaborators."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Protocol

from shellagent.llm.schema import ParsedAssistant
from shellagent.protocol.events import AgentEvent


@dataclass
class CommandOutcome:
    """Result of a batch command."""

    output: str
    exit_code: int


class PromptBuilder(Protocol):
    def __call__(self, goal: str, step: int, note: Optional[str] = None) -> str:
        ...


class StreamingModelClient(Protocol):
    """Streams one model turn, forwarding raw deltas to ``on_chunk``.

    Raises on transport or provider failure.
    """

    def __call__(
        self,
        session_id: str,
        prompt: str,
        model: str,
        output_cap: int,
        on_chunk: Callable[[str], None],
    ) -> Awaitable[str]:
        ...


class ResponseParser(Protocol):
    """Turns raw text into a validated response; must not raise on malformed payloads."""

    def __call__(self, raw_text: str) -> ParsedAssistant:
        ...


class CommandExecutor(Protocol):
    async def execute(self, session_id: str, command: str, tool_call_id: str) -> CommandOutcome:
        """Run a batch command to completion."""
        ...

    def run_interactive(self, session_id: str, command: str) -> None:
        """Start a command whose completion the user confirms out of band."""
        ...


class EventSink(Protocol):
    def __call__(self, event: AgentEvent) -> None:
        ...
