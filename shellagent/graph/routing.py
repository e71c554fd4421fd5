"""Conditional routing for the turn graph."""

from __future__ import annotations

import logging
from typing import Literal

from shellagent.utils.logging_utils import log_routing_decision

from .state import TurnState

LOGGER = logging.getLogger("shellagent.graph.routing")


def budget_route(state: TurnState) -> Literal["continue", "end"]:
    """Route after the budget check.

    Returns:
        "continue": Budget left, call the model
        "end": Budget spent or session closed
    """
    outcome = state.get("outcome")
    decision = "continue" if outcome == "continue" else "end"
    log_routing_decision(LOGGER, "budget", decision, f"outcome={outcome}")
    return decision


def stream_route(state: TurnState) -> Literal["streamed", "end"]:
    outcome = state.get("outcome")
    decision = "streamed" if outcome == "streamed" else "end"
    log_routing_decision(LOGGER, "stream", decision, f"outcome={outcome}")
    return decision


def respond_route(state: TurnState) -> Literal["proposed", "end"]:
    """Route after parsing.

    Returns:
        "proposed": A command is on the table, check it for repeats
        "end": Task complete (or session closed)
    """
    outcome = state.get("outcome")
    decision = "proposed" if outcome == "proposed" else "end"
    log_routing_decision(LOGGER, "respond", decision, f"outcome={outcome}")
    return decision


def guard_route(state: TurnState) -> Literal["retry", "clear", "stop"]:
    """Route after the duplicate guard.

    Returns:
        "retry": First repeat at this step, loop back with a corrective note
        "clear": Not a repeat, publish the proposal
        "stop": Repeat after correction (or session closed)
    """
    outcome = state.get("outcome")
    if outcome == "retry":
        decision, reason = "retry", "Repeated command, asking the model to advance"
    elif outcome == "clear":
        decision, reason = "clear", "Proposal is not a repeat"
    else:
        decision, reason = "stop", f"outcome={outcome}"
    log_routing_decision(LOGGER, "guard", decision, reason)
    return decision
