"""Tracks the interactive command awaiting user confirmation, per session."""

from __future__ import annotations

from typing import Dict, Optional


class InteractiveCommandBridge:
    """At most one pending interactive tool call id per session.

    The bridge only gates ``confirm_tool``; approvals of other proposals are
    processed independently.
    """

    def __init__(self) -> None:
        self._pending: Dict[str, str] = {}

    def begin(self, session_id: str, tool_call_id: str) -> None:
        self._pending[session_id] = tool_call_id

    def pending(self, session_id: str) -> Optional[str]:
        return self._pending.get(session_id)

    def resolve(self, session_id: str, tool_call_id: str) -> bool:
        """Clear the pending id if it matches; report whether it did."""
        if self._pending.get(session_id) != tool_call_id:
            return False
        del self._pending[session_id]
        return True

    def clear(self, session_id: str) -> None:
        self._pending.pop(session_id, None)
