"""In-memory session arena keyed by session id.

All per-session state lives behind this store: the session record itself
plus the proposal, plan and interactive trackers. Closing a session drops
every piece of it at once.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from shellagent.protocol.base import TERMINAL_STATES, AgentState
from shellagent.protocol.events import PlanUpdatedEvent

from .interactive import InteractiveCommandBridge
from .plan import PlanTracker
from .proposals import ProposalTracker

LOGGER = logging.getLogger("shellagent.sessions")


@dataclass
class LastCommand:
    command: str
    exit_code: int


@dataclass
class Session:
    """One delegated goal and its progress."""

    session_id: str
    goal: str
    model: str
    max_steps: int
    state: AgentState = "intent"
    step: int = 0
    last_command: Optional[LastCommand] = None
    duplicate_guard_step: Optional[int] = None
    turn_task: Optional[asyncio.Task] = None

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    def record_command(self, command: str, exit_code: int) -> None:
        """Remember a successful batch command and clear the duplicate-guard marker."""
        self.last_command = LastCommand(command=command, exit_code=exit_code)
        self.duplicate_guard_step = None


class SessionStore:
    """Owns every live session and its trackers.

    Args:
        emit_plan: Sink for ``plan_updated`` events raised by the plan tracker
    """

    def __init__(self, emit_plan: Callable[[PlanUpdatedEvent], None]):
        self._sessions: Dict[str, Session] = {}
        self.proposals = ProposalTracker()
        self.plans = PlanTracker(emit_plan)
        self.interactive = InteractiveCommandBridge()

    def get(self, session_id: str) -> Optional[Session]:
        return self._sessions.get(session_id)

    def is_live(self, session_id: str, session: Optional[Session] = None) -> bool:
        """True while ``session_id`` maps to a non-terminal session (and to ``session``, if given)."""
        current = self._sessions.get(session_id)
        if current is None or current.is_terminal:
            return False
        return session is None or current is session

    def create(self, session_id: str, goal: str, model: str, max_steps: int) -> Session:
        if session_id in self._sessions:
            LOGGER.warning(f"[{session_id[:8]}] New goal replaces a live session")
            self.close(session_id)
        session = Session(session_id=session_id, goal=goal, model=model, max_steps=max_steps)
        self._sessions[session_id] = session
        return session

    def close(self, session_id: str) -> Optional[Session]:
        """Discard a session and everything tracked for it."""
        session = self._sessions.pop(session_id, None)
        self.proposals.clear(session_id)
        self.plans.clear(session_id)
        self.interactive.clear(session_id)
        return session

    def plan_cursor(self, session_id: str) -> int:
        return self.plans.cursor(session_id)

    def session_ids(self) -> List[str]:
        return list(self._sessions)
