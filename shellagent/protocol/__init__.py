"""Wire vocabulary crossing the agent core boundary."""

from .actions import (
    AgentAction,
    ApproveToolAction,
    CancelAction,
    ConfirmToolAction,
    RejectToolAction,
    UserMessageAction,
    parse_action,
)
from .base import (
    AGENT_IPC_VERSION,
    TERMINAL_STATES,
    AgentState,
    AiModel,
    PlanStep,
    Risk,
    StepStatus,
    WireModel,
    now_ms,
)
from .events import (
    EXECUTE_COMMAND_TOOL,
    AgentEvent,
    MessageEvent,
    PlanUpdatedEvent,
    StateChangedEvent,
    ToolCall,
    ToolRequestedEvent,
    ToolResult,
    ToolResultEvent,
    WaitingForApprovalEvent,
    plan_id_for,
)

__all__ = [
    "AGENT_IPC_VERSION",
    "TERMINAL_STATES",
    "AgentAction",
    "AgentEvent",
    "AgentState",
    "AiModel",
    "ApproveToolAction",
    "CancelAction",
    "ConfirmToolAction",
    "EXECUTE_COMMAND_TOOL",
    "MessageEvent",
    "PlanStep",
    "PlanUpdatedEvent",
    "RejectToolAction",
    "Risk",
    "StateChangedEvent",
    "StepStatus",
    "ToolCall",
    "ToolRequestedEvent",
    "ToolResult",
    "ToolResultEvent",
    "UserMessageAction",
    "WaitingForApprovalEvent",
    "WireModel",
    "now_ms",
    "parse_action",
    "plan_id_for",
]
