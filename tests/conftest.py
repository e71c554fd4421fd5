"""Pytest configuration and shared fakes for all tests.

This file is automatically loaded by pytest. It puts the project root on
sys.path and provides scripted stand-ins for the runner's collaborators.
"""

import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

# Ensure project root is in PYTHONPATH for imports to work
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from shellagent.config.settings import AgentSettings, GovernanceSettings, Settings  # noqa: E402
from shellagent.hitl.approval_checker import CommandApprovalChecker  # noqa: E402
from shellagent.llm.parser import build_response_parser  # noqa: E402
from shellagent.llm.prompts import build_agent_prompt  # noqa: E402
from shellagent.runtime.collaborators import CommandOutcome  # noqa: E402
from shellagent.runtime.runner import AgentRunner  # noqa: E402


class FakeModelClient:
    """Replays scripted raw responses, delivering each in small chunks.

    A script entry may be a string (streamed and returned), an exception
    (raised), or an ``asyncio.Event`` (the call blocks until it is set and
    then streams the next entry).
    """

    def __init__(self, responses: List[Any], chunk_size: int = 5):
        self.responses = list(responses)
        self.chunk_size = chunk_size
        self.calls: List[Dict[str, Any]] = []

    async def __call__(self, session_id, prompt, model, output_cap, on_chunk):
        self.calls.append(
            {"session_id": session_id, "prompt": prompt, "model": model, "output_cap": output_cap}
        )
        if not self.responses:
            raise RuntimeError("FakeModelClient: no scripted response left")
        item = self.responses.pop(0)
        if isinstance(item, asyncio.Event):
            await item.wait()
            item = self.responses.pop(0)
        if isinstance(item, BaseException):
            raise item
        for start in range(0, len(item), self.chunk_size):
            on_chunk(item[start:start + self.chunk_size])
            await asyncio.sleep(0)
        return item


class FakeExecutor:
    """Command executor returning scripted outcomes."""

    def __init__(self, outcomes: Optional[List[Any]] = None):
        self.outcomes = list(outcomes or [])
        self.executed: List[Dict[str, str]] = []
        self.interactive: List[str] = []

    async def execute(self, session_id, command, tool_call_id):
        self.executed.append({"session_id": session_id, "command": command, "tool_call_id": tool_call_id})
        await asyncio.sleep(0)
        item = self.outcomes.pop(0) if self.outcomes else CommandOutcome(output="", exit_code=0)
        if isinstance(item, BaseException):
            raise item
        return item

    def run_interactive(self, session_id, command):
        self.interactive.append(command)


class EventRecorder:
    """Event sink keeping every event in order."""

    def __init__(self):
        self.events: List[Any] = []

    def __call__(self, event):
        self.events.append(event)

    def clear(self):
        self.events.clear()

    def of_kind(self, kind: str) -> List[Any]:
        return [event for event in self.events if event.kind == kind]

    def states(self) -> List[str]:
        return [event.state for event in self.of_kind("state_changed")]

    def kinds(self) -> List[str]:
        return [event.kind for event in self.events]

    def final_messages(self) -> List[Any]:
        return [event for event in self.of_kind("message") if not event.partial]

    def last_tool_call(self):
        requested = self.of_kind("tool_requested")
        return requested[-1].tool_call if requested else None


def _raw_reply(narration: str, payload: Dict[str, Any]) -> str:
    return f"{narration}\nJSON:{json.dumps(payload)}"


@pytest.fixture
def command_reply():
    """Build raw model text proposing one command."""

    def build(
        command: str,
        *,
        narration: str = "Let me check that.",
        command_id: Optional[str] = None,
        risk: str = "low",
        requires_approval: bool = True,
        interactive: bool = False,
        plan: Optional[List[str]] = None,
    ) -> str:
        proposal: Dict[str, Any] = {
            "command": command,
            "rationale": "Scripted",
            "risk": risk,
            "requiresApproval": requires_approval,
            "interactive": interactive,
        }
        if command_id:
            proposal["id"] = command_id
        payload: Dict[str, Any] = {"intent": "command", "done": False, "commands": [proposal]}
        if plan:
            payload["plan"] = plan
        return _raw_reply(narration, payload)

    return build


@pytest.fixture
def done_reply():
    """Build raw model text marking the goal complete."""

    def build(narration: str = "All done.") -> str:
        return _raw_reply(narration, {"intent": "chat", "done": True, "commands": []})

    return build


@pytest.fixture
def events():
    return EventRecorder()


@pytest.fixture
def make_settings():
    def build(max_steps: int = 8, auto_approve: bool = False) -> Settings:
        return Settings(
            agent=AgentSettings(max_steps=max_steps, default_model="gpt-5.2"),
            governance=GovernanceSettings(auto_approve_safe_commands=auto_approve),
        )

    return build


@pytest.fixture
def make_runner(events, make_settings):
    """Factory returning ``(runner, model_client, executor)`` wired to ``events``."""

    def build(
        responses: List[Any],
        *,
        outcomes: Optional[List[Any]] = None,
        max_steps: int = 8,
        auto_approve: bool = False,
        approval_checker: Optional[CommandApprovalChecker] = None,
    ):
        settings = make_settings(max_steps=max_steps, auto_approve=auto_approve)
        model_client = FakeModelClient(responses)
        executor = FakeExecutor(outcomes)
        runner = AgentRunner(
            prompt_builder=build_agent_prompt,
            model_client=model_client,
            parser=build_response_parser(settings),
            executor=executor,
            emit_event=events,
            settings=settings,
            approval_checker=approval_checker,
        )
        return runner, model_client, executor

    return build


@pytest.fixture
def outcome():
    def build(output: str = "", exit_code: int = 0) -> CommandOutcome:
        return CommandOutcome(output=output, exit_code=exit_code)

    return build
