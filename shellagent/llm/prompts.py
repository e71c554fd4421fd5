"""Prompt templates for the shell assistant."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Optional

from .schema import RESPONSE_EXAMPLE, RESPONSE_SCHEMA


@dataclass
class SessionContext:
    """Where the commands will run; rendered into the system prompt."""

    host: str
    username: str
    port: int = 22
    name: Optional[str] = None

    def describe(self) -> str:
        label = f"{self.username}@{self.host}:{self.port}"
        return f"{label} ({self.name})" if self.name else label


@dataclass
class TerminalContext:
    """Recent terminal output plus the session it came from."""

    session: SessionContext
    output: str = ""
    truncated: bool = False


_RULES = [
    "Include an intent field in the JSON: chat, plan, or command.",
    "Include an action field in the JSON from the schema when possible.",
    "Never execute commands; only propose commands for approval.",
    "If the request needs multiple steps (3+), include a plan array of 3-6 short steps.",
    "If a command requires user interaction (e.g., editors, long-running interactive tools), "
    "set interactive=true on the command proposal.",
    "If the user asks to inspect or check something, set intent=command and choose an action, "
    "then propose a safe command immediately.",
    "Ask a clarifying question only if the task is ambiguous AND the next safe command truly "
    "depends on the answer.",
    "When given a goal, keep proposing the next command until the goal is satisfied. "
    "When done, set done=true and leave commands empty.",
    "For greetings or unclear requests, respond with a short message and an empty commands array.",
    "Propose at most one command per response.",
]


def build_streaming_system_prompt(context: TerminalContext, marker: str = "JSON:") -> str:
    """System prompt asking for narration first and a marked JSON payload last."""
    output_note = " (truncated)" if context.truncated else ""
    lines = [
        "You are shellagent, a terminal assistant working alongside the user.",
        "Respond conversationally in plain text first, then include a JSON payload on a new line.",
        f'Prefix the JSON with "{marker}" and make sure the JSON matches the schema.',
        'Do not start the response with JSON or a "{".',
        *_RULES,
        f"Session: {context.session.describe()}",
        f"Recent terminal output{output_note}:",
        context.output or "(no output yet)",
        "Schema:",
        json.dumps(RESPONSE_SCHEMA),
        "Example:",
        "Hello! How can I help?",
        f"{marker}{json.dumps(RESPONSE_EXAMPLE)}",
    ]
    return "\n".join(lines)


def build_user_prompt(prompt: str) -> str:
    return f"User request:\n{prompt}"


def build_agent_prompt(goal: str, step: int, note: Optional[str] = None) -> str:
    """Per-turn prompt for agent mode.

    Args:
        goal: The user's delegated goal
        step: Number of results observed so far
        note: Context from the previous turn (command output, corrective note)
    """
    lines = [
        f"Goal: {goal}",
        f"Step: {step}",
        "You are in agent mode. If the goal is not complete, propose the next single command.",
        "If the goal is complete, set done=true and return no commands.",
    ]
    if note:
        lines.append(f"Context: {note}")
    return "\n".join(lines)
