"""Proposal node: publish the command and wait for (or skip) approval."""

from __future__ import annotations

import logging
from typing import Optional

from shellagent.graph.state import TurnState
from shellagent.hitl.approval_checker import (
    ApprovalDecision,
    CommandApprovalChecker,
    annotate_proposal,
    should_auto_approve,
)
from shellagent.protocol.events import ToolCall, ToolRequestedEvent, WaitingForApprovalEvent
from shellagent.runtime.session_store import SessionStore
from shellagent.utils.logging_utils import log_node_entry, log_node_exit

from .types import Emit, Transition

LOGGER = logging.getLogger("shellagent.graph.propose")


def build_propose_node(
    *,
    store: SessionStore,
    transition: Transition,
    emit: Emit,
    approval_checker: Optional[CommandApprovalChecker] = None,
    auto_approve: bool = False,
):
    """Create the node that turns the first proposal into a tool request."""

    async def propose_node(state: TurnState) -> TurnState:
        log_node_entry(LOGGER, "propose", state)
        session_id = state["session_id"]
        session = store.get(session_id)
        if session is None or not store.is_live(session_id, session):
            return {"outcome": "abandoned"}

        proposal = state["proposal"]
        # Only the first proposal seeds an ad hoc step; later approvals reuse
        # the clamped cursor step, so it cycles in_progress -> done again.
        if store.plans.is_empty(session_id):
            store.plans.append(session_id, proposal.id, f"Run: {proposal.command}")

        if approval_checker is not None:
            decision = approval_checker.check(proposal.command)
        else:
            decision = ApprovalDecision(needs_approval=False)
        if decision.needs_approval:
            LOGGER.info(f"[{session_id[:8]}] Checker flagged '{proposal.command}': {decision.reason} ({decision.risk_level})")
        proposal = annotate_proposal(proposal, decision)
        store.proposals.replace(session_id, proposal)

        transition(session, "act", "Awaiting command approval.")
        emit(
            ToolRequestedEvent(
                session_id=session_id,
                tool_call=ToolCall(
                    id=proposal.id,
                    input={"command": proposal.command},
                    requires_approval=proposal.requires_approval,
                    risk=proposal.risk,
                    interactive=proposal.interactive,
                ),
            )
        )

        if should_auto_approve(proposal, decision, auto_approve):
            LOGGER.info(f"[{session_id[:8]}] Auto-approving {proposal.id}")
            updates: TurnState = {"proposal": proposal, "outcome": "auto_approved"}
        else:
            emit(WaitingForApprovalEvent(session_id=session_id, tool_call_id=proposal.id))
            updates = {"proposal": proposal, "outcome": "awaiting"}

        log_node_exit(LOGGER, "propose", updates)
        return updates

    return propose_node
