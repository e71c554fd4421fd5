"""Utilities for shellagent."""

from .error_handler import (
    CommandExecutionError,
    ModelInvocationError,
    ProtocolError,
    ShellAgentError,
    handle_model_error,
    with_error_boundary,
)
from .logging_utils import (
    log_error,
    log_event,
    log_node_entry,
    log_node_exit,
    log_prompt,
    log_routing_decision,
    log_state_transition,
    log_tool_call,
    log_tool_result,
    setup_logging,
)
from .output_format import format_command_output, format_observation_note, format_tool_result

__all__ = [
    "setup_logging",
    "log_state_transition",
    "log_tool_call",
    "log_tool_result",
    "log_error",
    "log_event",
    "log_routing_decision",
    "log_node_entry",
    "log_node_exit",
    "log_prompt",
    "with_error_boundary",
    "handle_model_error",
    "ShellAgentError",
    "ModelInvocationError",
    "CommandExecutionError",
    "ProtocolError",
    "format_command_output",
    "format_tool_result",
    "format_observation_note",
]
