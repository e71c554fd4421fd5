"""Structured assistant response models.

The model's JSON payload is untrusted. Every field is validated here with
tolerant ``before`` validators: a malformed optional field becomes ``None``
and a malformed command item is dropped, so downstream code only ever sees
well-formed proposals.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Literal, Optional, get_args

from pydantic import Field, ValidationError, field_validator

from shellagent.protocol.base import Risk, WireModel

Intent = Literal["chat", "plan", "command"]
AssistantAction = Literal[
    "inspect_services",
    "inspect_ports",
    "inspect_disk",
    "inspect_memory",
    "inspect_cpu",
    "inspect_updates",
    "inspect_logs",
    "inspect_processes",
    "fix_issue",
    "deploy",
    "configure",
    "security",
    "network",
    "unknown",
]

MAX_PLAN_STEPS = 6

_RISKS = frozenset(get_args(Risk))
_INTENTS = frozenset(get_args(Intent))
_ACTIONS = frozenset(get_args(AssistantAction))


class CommandProposal(WireModel):
    """One candidate command offered by the assistant."""

    id: Optional[str] = None
    command: str
    rationale: Optional[str] = None
    risk: Optional[Risk] = None
    requires_approval: bool = True
    interactive: bool = False

    @field_validator("id", "rationale", mode="before")
    @classmethod
    def _optional_text(cls, value: Any) -> Optional[str]:
        return value if isinstance(value, str) else None

    @field_validator("command", mode="before")
    @classmethod
    def _strip_command(cls, value: Any) -> str:
        command = value.strip() if isinstance(value, str) else ""
        if not command:
            raise ValueError("command must be a non-empty string")
        return command

    @field_validator("risk", mode="before")
    @classmethod
    def _known_risk(cls, value: Any) -> Optional[str]:
        return value if value in _RISKS else None

    @field_validator("requires_approval", mode="before")
    @classmethod
    def _approval_flag(cls, value: Any) -> bool:
        return value if isinstance(value, bool) else True

    @field_validator("interactive", mode="before")
    @classmethod
    def _interactive_flag(cls, value: Any) -> bool:
        return value if isinstance(value, bool) else False


class AssistantResponse(WireModel):
    """Parsed response of one model turn."""

    commands: List[CommandProposal] = Field(default_factory=list)
    message: Optional[str] = None
    intent: Optional[Intent] = None
    plan: Optional[List[str]] = None
    action: Optional[AssistantAction] = None
    done: Optional[bool] = None

    @field_validator("commands", mode="before")
    @classmethod
    def _drop_malformed_commands(cls, value: Any) -> List[CommandProposal]:
        if not isinstance(value, list):
            return []
        commands: List[CommandProposal] = []
        for item in value:
            if isinstance(item, CommandProposal):
                commands.append(item)
                continue
            if not isinstance(item, dict):
                continue
            try:
                commands.append(CommandProposal.model_validate(item))
            except ValidationError:
                continue
        return commands

    @field_validator("message", mode="before")
    @classmethod
    def _message_text(cls, value: Any) -> Optional[str]:
        return value if isinstance(value, str) else None

    @field_validator("intent", mode="before")
    @classmethod
    def _known_intent(cls, value: Any) -> Optional[str]:
        return value if value in _INTENTS else None

    @field_validator("action", mode="before")
    @classmethod
    def _known_action(cls, value: Any) -> Optional[str]:
        return value if value in _ACTIONS else None

    @field_validator("plan", mode="before")
    @classmethod
    def _clean_plan(cls, value: Any) -> Optional[List[str]]:
        if not isinstance(value, list):
            return None
        steps = [item.strip() for item in value if isinstance(item, str) and item.strip()]
        return steps[:MAX_PLAN_STEPS] or None

    @field_validator("done", mode="before")
    @classmethod
    def _done_flag(cls, value: Any) -> Optional[bool]:
        return value if isinstance(value, bool) else None


@dataclass
class ParsedAssistant:
    """Parser output: the validated response plus the narration preceding the payload."""

    response: AssistantResponse
    message_text: str = ""


RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "message": {"type": "string"},
        "commands": {
            "type": "array",
            "items": {
                "type": "object",
                "additionalProperties": False,
                "properties": {
                    "id": {"type": "string"},
                    "command": {"type": "string"},
                    "rationale": {"type": "string"},
                    "risk": {"type": "string", "enum": sorted(_RISKS)},
                    "requiresApproval": {"type": "boolean"},
                    "interactive": {"type": "boolean"},
                },
                "required": ["command"],
            },
        },
        "intent": {"type": "string", "enum": list(get_args(Intent))},
        "plan": {"type": "array", "items": {"type": "string"}, "maxItems": MAX_PLAN_STEPS},
        "action": {"type": "string", "enum": list(get_args(AssistantAction))},
        "done": {"type": "boolean"},
    },
    "required": ["commands"],
}

RESPONSE_EXAMPLE: Dict[str, Any] = {
    "message": "I can check disk usage first.",
    "intent": "command",
    "plan": ["Check current disk usage", "Identify large directories", "Recommend cleanup steps"],
    "action": "inspect_disk",
    "done": False,
    "commands": [
        {
            "id": "disk-usage",
            "command": "df -h",
            "rationale": "Shows filesystem usage in human-readable format.",
            "risk": "low",
            "requiresApproval": True,
            "interactive": False,
        }
    ],
}
