"""Duplicate-command guard node."""

from __future__ import annotations

import logging
import uuid

from shellagent.graph.state import TurnState
from shellagent.protocol.events import MessageEvent
from shellagent.runtime.duplicate_guard import CORRECTIVE_NOTE, STUCK_MESSAGE, DuplicateCommandGuard, GuardVerdict
from shellagent.runtime.session_store import SessionStore
from shellagent.utils.logging_utils import log_node_entry, log_node_exit

from .types import Emit, Transition

LOGGER = logging.getLogger("shellagent.graph.guard")


def build_guard_node(*, store: SessionStore, guard: DuplicateCommandGuard, transition: Transition, emit: Emit):
    """Create a guard node that breaks repeat-command loops.

    A first repeat at a step loops back to the budget node with a corrective
    note; a second one finishes the session.
    """

    async def guard_node(state: TurnState) -> TurnState:
        log_node_entry(LOGGER, "guard", state)
        session_id = state["session_id"]
        session = store.get(session_id)
        if session is None or not store.is_live(session_id, session):
            return {"outcome": "abandoned"}

        proposal = state["proposal"]
        verdict = guard.inspect(session, proposal.command)

        if verdict is GuardVerdict.STOP:
            transition(session, "finish", "Repeated command detected.")
            emit(MessageEvent(session_id=session_id, message_id=str(uuid.uuid4()), content=STUCK_MESSAGE))
            updates: TurnState = {"outcome": "stop"}
        elif verdict is GuardVerdict.CORRECT:
            guard.mark(session)
            updates = {"note": CORRECTIVE_NOTE, "proposal": None, "outcome": "retry"}
        else:
            updates = {"outcome": "clear"}

        log_node_exit(LOGGER, "guard", updates)
        return updates

    return guard_node
