"""Shared wire primitives for the agent protocol."""

from __future__ import annotations

import time
from typing import Any, Dict, Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

AGENT_IPC_VERSION = 1

AgentState = Literal["idle", "intent", "plan", "act", "observe", "reflect", "finish", "error"]
TERMINAL_STATES = frozenset({"finish", "error"})

AiModel = Literal[
    "gpt-5.2",
    "gpt-5-mini",
    "claude-sonnet-4.5",
    "claude-opus-4.5",
    "claude-haiku-4.5",
]

Risk = Literal["low", "medium", "high"]
StepStatus = Literal["pending", "in_progress", "done", "blocked"]


def now_ms() -> int:
    """Epoch timestamp in milliseconds, as carried by every event."""
    return int(time.time() * 1000)


class WireModel(BaseModel):
    """Base model speaking camelCase on the wire and snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class PlanStep(WireModel):
    """One checklist item tracked alongside a session."""

    id: str
    description: str
    status: StepStatus = "pending"
