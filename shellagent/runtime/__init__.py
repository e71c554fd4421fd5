"""Agent core: session store and per-session trackers.

The runner lives in ``shellagent.runtime.runner`` and is assembled by
``shellagent.runtime.app.build_application``.
"""

from .collaborators import CommandOutcome
from .duplicate_guard import CORRECTIVE_NOTE, STUCK_MESSAGE, DuplicateCommandGuard, GuardVerdict
from .interactive import InteractiveCommandBridge
from .plan import PlanTracker
from .proposals import ProposalTracker
from .session_store import LastCommand, Session, SessionStore

__all__ = [
    "CORRECTIVE_NOTE",
    "CommandOutcome",
    "DuplicateCommandGuard",
    "GuardVerdict",
    "InteractiveCommandBridge",
    "LastCommand",
    "PlanTracker",
    "ProposalTracker",
    "STUCK_MESSAGE",
    "Session",
    "SessionStore",
]
