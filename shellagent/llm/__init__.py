"""Model-facing collaborators: streaming client, prompts, parser."""

from .client import ChatStreamClient, ModelResolver, build_model_resolver, local_terminal_context
from .intent_policy import ACTION_COMMANDS, enforce_intent_policy
from .parser import build_response_parser, extract_streaming_payload, parse_assistant, parse_json_from_text
from .prompts import (
    SessionContext,
    TerminalContext,
    build_agent_prompt,
    build_streaming_system_prompt,
    build_user_prompt,
)
from .schema import AssistantResponse, CommandProposal, ParsedAssistant
from .streaming import PartitionState, StreamPartitioner, flush, partition

__all__ = [
    "ACTION_COMMANDS",
    "AssistantResponse",
    "ChatStreamClient",
    "CommandProposal",
    "ModelResolver",
    "ParsedAssistant",
    "PartitionState",
    "SessionContext",
    "StreamPartitioner",
    "TerminalContext",
    "build_agent_prompt",
    "build_model_resolver",
    "build_response_parser",
    "build_streaming_system_prompt",
    "build_user_prompt",
    "enforce_intent_policy",
    "extract_streaming_payload",
    "flush",
    "local_terminal_context",
    "parse_assistant",
    "parse_json_from_text",
    "partition",
]
