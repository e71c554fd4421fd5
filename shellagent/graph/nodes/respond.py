"""Response node: parse, update trackers, publish the final message."""

from __future__ import annotations

import logging

from shellagent.graph.state import TurnState
from shellagent.protocol.events import MessageEvent
from shellagent.runtime.collaborators import ResponseParser
from shellagent.runtime.session_store import SessionStore
from shellagent.utils.logging_utils import log_node_entry, log_node_exit

from .types import Emit, Transition

LOGGER = logging.getLogger("shellagent.graph.respond")

FALLBACK_MESSAGE = "AI response received."


def build_respond_node(*, store: SessionStore, parser: ResponseParser, transition: Transition, emit: Emit):
    """Create the node that turns raw model text into tracked proposals."""

    async def respond_node(state: TurnState) -> TurnState:
        log_node_entry(LOGGER, "respond", state)
        session_id = state["session_id"]
        session = store.get(session_id)
        if session is None or not store.is_live(session_id, session):
            return {"outcome": "abandoned"}

        parsed = parser(state.get("raw_text", ""))
        response = parsed.response

        if response.plan and store.plans.is_empty(session_id):
            store.plans.adopt(session_id, response.plan)

        response = store.proposals.track(session_id, response)

        final_text = (
            state.get("narration", "").strip()
            or response.message
            or parsed.message_text
            or FALLBACK_MESSAGE
        )
        emit(
            MessageEvent(
                session_id=session_id,
                message_id=state["message_id"],
                content=final_text,
                partial=False,
            )
        )

        if response.done or not response.commands:
            transition(session, "finish", "Agent marked task complete.")
            updates: TurnState = {"response": response, "message_text": parsed.message_text, "outcome": "complete"}
        else:
            updates = {
                "response": response,
                "message_text": parsed.message_text,
                "proposal": response.commands[0],
                "outcome": "proposed",
            }

        log_node_exit(LOGGER, "respond", updates)
        return updates

    return respond_node
