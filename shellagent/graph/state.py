"""State carried through one turn of the agent graph."""

from __future__ import annotations

from typing import Literal, Optional, TypedDict

from shellagent.llm.schema import AssistantResponse, CommandProposal

TurnOutcome = Literal[
    "continue",
    "exhausted",
    "abandoned",
    "streamed",
    "failed",
    "proposed",
    "complete",
    "retry",
    "clear",
    "stop",
    "awaiting",
    "auto_approved",
]


class TurnState(TypedDict, total=False):
    """One model round-trip: budget → stream → respond → guard → propose.

    The session record itself lives in the session store; the graph state
    only holds what flows between nodes of a single turn.
    """

    # ========== Input ==========
    session_id: str
    note: Optional[str]          # Context for the prompt (command output, corrective note)

    # ========== Stream ==========
    message_id: str              # One per model call, shared by partial and final messages
    raw_text: str                # Complete model output
    narration: str               # Partitioned visible text

    # ========== Parsed response ==========
    response: Optional[AssistantResponse]
    message_text: str
    proposal: Optional[CommandProposal]   # First tracked command, id assigned

    # ========== Control ==========
    outcome: TurnOutcome
