"""Parsing of raw model text into a validated response."""

from __future__ import annotations

import json
import logging
from typing import Callable, Optional, Tuple

from .intent_policy import enforce_intent_policy
from .schema import AssistantResponse, ParsedAssistant
from .streaming import DEFAULT_MARKER

LOGGER = logging.getLogger("shellagent.parser")

UNPARSEABLE_MESSAGE = "Unable to parse AI response."


def extract_streaming_payload(text: str, marker: str = DEFAULT_MARKER) -> Tuple[str, Optional[str]]:
    """Split raw text at the first marker.

    Returns:
        ``(message_text, json_text)``; ``json_text`` is None when no marker is present
    """
    index = text.find(marker)
    if index == -1:
        return text.strip(), None
    return text[:index].strip(), text[index + len(marker):].strip()


def parse_json_from_text(text: str) -> AssistantResponse:
    """Parse a JSON payload, never raising.

    Text that is not JSON becomes a message-only response. JSON that is not an
    object with a ``commands`` list becomes an empty response.
    """
    try:
        payload = json.loads(text)
    except (json.JSONDecodeError, TypeError):
        LOGGER.debug(f"Payload is not JSON ({len(text or '')} chars)")
        return AssistantResponse(commands=[], message=(text or "").strip() or UNPARSEABLE_MESSAGE)

    if not isinstance(payload, dict) or not isinstance(payload.get("commands"), list):
        LOGGER.debug("Payload has no commands array; treating as empty response")
        return AssistantResponse(commands=[])
    return AssistantResponse.model_validate(payload)


def parse_assistant(
    raw_text: str,
    *,
    marker: str = DEFAULT_MARKER,
    apply_intent_policy: bool = True,
) -> ParsedAssistant:
    """Turn a full streamed response into a ``ParsedAssistant``.

    Args:
        raw_text: Complete model output (narration, marker, payload)
        marker: Payload marker token
        apply_intent_policy: Whether to run ``enforce_intent_policy``

    Returns:
        ParsedAssistant with the validated response and the narration text
    """
    message_text, json_text = extract_streaming_payload(raw_text, marker)
    response = parse_json_from_text(json_text if json_text else raw_text)
    if message_text and not response.message:
        response = response.model_copy(update={"message": message_text})
    if apply_intent_policy:
        response = enforce_intent_policy(response)
    return ParsedAssistant(response=response, message_text=message_text)


def build_response_parser(settings) -> Callable[[str], ParsedAssistant]:
    """Return a parser callable bound to the agent settings."""
    marker = settings.agent.payload_marker
    apply_policy = settings.agent.enforce_intent_policy

    def parser(raw_text: str) -> ParsedAssistant:
        return parse_assistant(raw_text, marker=marker, apply_intent_policy=apply_policy)

    return parser
