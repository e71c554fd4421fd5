"""Narration / payload partitioning of a streamed model response.

The model writes conversational text first and then a structured payload
introduced by a marker token (``JSON:`` by default). Deltas arrive in
arbitrary chunks, so the marker can straddle two of them. ``partition``
therefore holds back the last ``len(marker) - 1`` characters until the
next delta (or ``flush``) proves they are not the start of the marker.

Emitted narration never contains even a partial marker.
"""

from __future__ import annotations

from typing import Tuple

from pydantic import BaseModel, ConfigDict

DEFAULT_MARKER = "JSON:"


class PartitionState(BaseModel):
    """Immutable partitioner state threaded between deltas."""

    model_config = ConfigDict(frozen=True)

    pending: str = ""
    payload_started: bool = False


def partition(state: PartitionState, delta: str, marker: str = DEFAULT_MARKER) -> Tuple[PartitionState, str]:
    """Feed one delta and return the new state plus the visible text it releases.

    Args:
        state: State returned by the previous call (or a fresh ``PartitionState()``)
        delta: Newly arrived text
        marker: Token separating narration from the payload

    Returns:
        ``(new_state, emitted)``; ``emitted`` is ``""`` when nothing is releasable
    """
    if state.payload_started:
        return state, ""

    combined = state.pending + delta
    marker_index = combined.find(marker)
    if marker_index != -1:
        return PartitionState(pending="", payload_started=True), combined[:marker_index]

    keep = max(len(marker) - 1, 0)
    if len(combined) <= keep:
        return PartitionState(pending=combined), ""
    split = len(combined) - keep
    return PartitionState(pending=combined[split:]), combined[:split]


def flush(state: PartitionState) -> Tuple[PartitionState, str]:
    """Release the held-back tail at end of stream."""
    if state.payload_started or not state.pending:
        return state, ""
    return PartitionState(pending="", payload_started=False), state.pending


class StreamPartitioner:
    """Stateful convenience wrapper over ``partition`` / ``flush``."""

    def __init__(self, marker: str = DEFAULT_MARKER):
        self.marker = marker
        self.state = PartitionState()

    @property
    def payload_started(self) -> bool:
        return self.state.payload_started

    def feed(self, delta: str) -> str:
        self.state, emitted = partition(self.state, delta, self.marker)
        return emitted

    def finish(self) -> str:
        self.state, emitted = flush(self.state)
        return emitted
