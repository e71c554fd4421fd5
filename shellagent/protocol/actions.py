"""Inbound actions accepted by the agent runner."""

from __future__ import annotations

from typing import Annotated, Any, Dict, Literal, Optional, Union

from pydantic import Field, TypeAdapter, ValidationError

from shellagent.utils.error_handler import ProtocolError

from .base import AGENT_IPC_VERSION, AiModel, WireModel


class _ActionBase(WireModel):
    version: Literal[1] = AGENT_IPC_VERSION
    session_id: str = Field(min_length=1)


class UserMessageAction(_ActionBase):
    kind: Literal["user_message"] = "user_message"
    message_id: str
    content: str
    model: Optional[AiModel] = None
    max_steps: Optional[int] = Field(default=None, ge=1)


class ApproveToolAction(_ActionBase):
    kind: Literal["approve_tool"] = "approve_tool"
    tool_call_id: str


class ConfirmToolAction(_ActionBase):
    kind: Literal["confirm_tool"] = "confirm_tool"
    tool_call_id: str


class RejectToolAction(_ActionBase):
    kind: Literal["reject_tool"] = "reject_tool"
    tool_call_id: str
    reason: Optional[str] = None


class CancelAction(_ActionBase):
    kind: Literal["cancel"] = "cancel"
    reason: Optional[str] = None


AgentAction = Annotated[
    Union[
        UserMessageAction,
        ApproveToolAction,
        ConfirmToolAction,
        RejectToolAction,
        CancelAction,
    ],
    Field(discriminator="kind"),
]

_ACTION_ADAPTER: TypeAdapter = TypeAdapter(AgentAction)


def parse_action(payload: Dict[str, Any]):
    """Validate a wire payload into a typed action.

    Args:
        payload: Dict using either camelCase wire names or snake_case names

    Returns:
        One of the action models, selected by ``kind``

    Raises:
        ProtocolError: If the payload is not a valid action
    """
    try:
        return _ACTION_ADAPTER.validate_python(payload)
    except ValidationError as exc:
        raise ProtocolError(
            f"Invalid agent action: {exc.error_count()} validation error(s)",
            user_message="Agent action rejected: malformed payload.",
        ) from exc
