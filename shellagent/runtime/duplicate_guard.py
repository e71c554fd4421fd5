"""Loop breaker for proposals that repeat the last successful command."""

from __future__ import annotations

import logging
from enum import Enum

from .session_store import Session

LOGGER = logging.getLogger("shellagent.guard")

CORRECTIVE_NOTE = (
    "The last proposed command repeats the previous successful command. "
    "Avoid repeating it and either advance or mark done."
)
STUCK_MESSAGE = "I already ran that command and got results. Please let me know what you want to do next."


class GuardVerdict(str, Enum):
    CLEAR = "clear"
    CORRECT = "correct"
    STOP = "stop"


class DuplicateCommandGuard:
    """Fires at most once per step.

    The first repeat at a step asks for a corrective turn; a repeat at a step
    where the guard already fired stops the session.
    """

    @staticmethod
    def is_repeat(session: Session, command: str) -> bool:
        last = session.last_command
        return last is not None and last.exit_code == 0 and last.command.strip() == command.strip()

    def inspect(self, session: Session, command: str) -> GuardVerdict:
        if not self.is_repeat(session, command):
            return GuardVerdict.CLEAR
        if session.duplicate_guard_step == session.step:
            LOGGER.info(f"[{session.session_id[:8]}] Repeat of '{command}' after correction at step {session.step}")
            return GuardVerdict.STOP
        LOGGER.info(f"[{session.session_id[:8]}] Repeat of '{command}' at step {session.step}; asking for correction")
        return GuardVerdict.CORRECT

    def mark(self, session: Session) -> None:
        """Record that the guard fired at the session's current step."""
        session.duplicate_guard_step = session.step
