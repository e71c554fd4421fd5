"""Per-session registry of command proposals that can still be approved."""

from __future__ import annotations

import uuid
from typing import Dict, Optional

from shellagent.llm.schema import AssistantResponse, CommandProposal


class ProposalTracker:
    """Source of truth for approvable proposals, keyed by session id.

    Each turn replaces the session's set wholesale, so a proposal from an
    earlier turn can never be approved.
    """

    def __init__(self) -> None:
        self._proposals: Dict[str, Dict[str, CommandProposal]] = {}

    def track(self, session_id: str, response: AssistantResponse) -> AssistantResponse:
        """Assign missing ids, replace the session's set, return the response with ids."""
        commands = [
            command if command.id else command.model_copy(update={"id": str(uuid.uuid4())})
            for command in response.commands
        ]
        if commands:
            self._proposals[session_id] = {command.id: command for command in commands}
        else:
            self._proposals.pop(session_id, None)
        return response.model_copy(update={"commands": commands})

    def lookup(self, session_id: str, proposal_id: str) -> Optional[CommandProposal]:
        return self._proposals.get(session_id, {}).get(proposal_id)

    def replace(self, session_id: str, proposal: CommandProposal) -> None:
        """Store an updated copy of an already tracked proposal."""
        tracked = self._proposals.get(session_id)
        if tracked is not None and proposal.id in tracked:
            tracked[proposal.id] = proposal

    def clear(self, session_id: str) -> None:
        self._proposals.pop(session_id, None)
