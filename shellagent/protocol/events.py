"""Outbound events emitted by the agent runner."""

from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import Field

from .base import AGENT_IPC_VERSION, AgentState, PlanStep, Risk, WireModel, now_ms

MessageRole = Literal["user", "assistant", "tool", "system"]
ToolResultStatus = Literal["success", "error", "cancelled"]

EXECUTE_COMMAND_TOOL = "execute_command"


class ToolCall(WireModel):
    id: str
    name: str = EXECUTE_COMMAND_TOOL
    input: Dict[str, Any] = Field(default_factory=dict)
    requires_approval: bool = True
    risk: Optional[Risk] = None
    interactive: Optional[bool] = None


class ToolResult(WireModel):
    tool_call_id: str
    status: ToolResultStatus
    output: Optional[str] = None
    error: Optional[str] = None


class _EventBase(WireModel):
    version: Literal[1] = AGENT_IPC_VERSION
    session_id: str
    timestamp: int = Field(default_factory=now_ms)


class MessageEvent(_EventBase):
    kind: Literal["message"] = "message"
    message_id: str
    role: MessageRole = "assistant"
    content: str
    partial: bool = False


class PlanUpdatedEvent(_EventBase):
    kind: Literal["plan_updated"] = "plan_updated"
    plan_id: str
    steps: List[PlanStep] = Field(default_factory=list)


class ToolRequestedEvent(_EventBase):
    kind: Literal["tool_requested"] = "tool_requested"
    tool_call: ToolCall


class WaitingForApprovalEvent(_EventBase):
    kind: Literal["waiting_for_approval"] = "waiting_for_approval"
    tool_call_id: str


class ToolResultEvent(_EventBase):
    kind: Literal["tool_result"] = "tool_result"
    result: ToolResult


class StateChangedEvent(_EventBase):
    kind: Literal["state_changed"] = "state_changed"
    state: AgentState
    detail: Optional[str] = None


AgentEvent = Annotated[
    Union[
        MessageEvent,
        PlanUpdatedEvent,
        ToolRequestedEvent,
        WaitingForApprovalEvent,
        ToolResultEvent,
        StateChangedEvent,
    ],
    Field(discriminator="kind"),
]


def plan_id_for(session_id: str) -> str:
    return f"plan-{session_id}"
