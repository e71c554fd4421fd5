"""Callables the runner hands to graph nodes."""

from __future__ import annotations

from typing import Callable, Optional

from shellagent.protocol.base import AgentState
from shellagent.protocol.events import AgentEvent
from shellagent.runtime.session_store import Session

Transition = Callable[[Session, AgentState, Optional[str]], None]
Emit = Callable[[AgentEvent], None]
