"""Step budget check run before every model call."""

from __future__ import annotations

import logging

from shellagent.graph.state import TurnState
from shellagent.runtime.session_store import SessionStore
from shellagent.utils.logging_utils import log_node_entry, log_node_exit

from .types import Transition

LOGGER = logging.getLogger("shellagent.graph.budget")


def build_budget_node(*, store: SessionStore, transition: Transition):
    """Create the node that finishes a session whose step budget is spent."""

    async def budget_node(state: TurnState) -> TurnState:
        log_node_entry(LOGGER, "budget", state)
        session_id = state["session_id"]
        session = store.get(session_id)

        if session is None or not store.is_live(session_id, session):
            updates: TurnState = {"outcome": "abandoned"}
        elif session.step >= session.max_steps:
            LOGGER.info(f"[{session_id[:8]}] Step budget spent ({session.step}/{session.max_steps})")
            transition(session, "finish", "Max step limit reached.")
            updates = {"outcome": "exhausted"}
        else:
            transition(session, "plan", f"Planning step {session.step + 1}.")
            updates = {"outcome": "continue"}

        log_node_exit(LOGGER, "budget", updates)
        return updates

    return budget_node
