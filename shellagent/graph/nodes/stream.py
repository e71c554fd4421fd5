"""Model call node: streams narration to the caller as it arrives."""

from __future__ import annotations

import logging
import uuid

from shellagent.graph.state import TurnState
from shellagent.llm.streaming import PartitionState, flush, partition
from shellagent.protocol.events import MessageEvent
from shellagent.runtime.collaborators import PromptBuilder, StreamingModelClient
from shellagent.runtime.session_store import SessionStore
from shellagent.utils.error_handler import ShellAgentError, handle_model_error
from shellagent.utils.logging_utils import log_error, log_node_entry, log_node_exit

from .types import Emit, Transition

LOGGER = logging.getLogger("shellagent.graph.stream")


def build_stream_node(
    *,
    store: SessionStore,
    prompt_builder: PromptBuilder,
    model_client: StreamingModelClient,
    transition: Transition,
    emit: Emit,
    output_cap: int,
    marker: str,
):
    """Create the node that runs one streaming model call.

    Every delta goes through the stream partitioner. Whenever the visible
    narration grows, a partial message carrying the whole narration so far
    is emitted under the turn's message id.
    """

    async def stream_node(state: TurnState) -> TurnState:
        log_node_entry(LOGGER, "stream", state)
        session_id = state["session_id"]
        session = store.get(session_id)
        if session is None or not store.is_live(session_id, session):
            return {"outcome": "abandoned"}

        message_id = str(uuid.uuid4())
        partition_state = PartitionState()
        narration = ""

        def publish(text: str) -> None:
            nonlocal narration
            if not text or not store.is_live(session_id, session):
                return
            narration += text
            emit(
                MessageEvent(
                    session_id=session_id,
                    message_id=message_id,
                    content=narration,
                    partial=True,
                )
            )

        def on_chunk(delta: str) -> None:
            nonlocal partition_state
            partition_state, visible = partition(partition_state, delta, marker)
            publish(visible)

        prompt = prompt_builder(session.goal, session.step, state.get("note"))
        try:
            raw_text = await model_client(session_id, prompt, session.model, output_cap, on_chunk)
        except Exception as exc:
            if not store.is_live(session_id, session):
                LOGGER.info(f"[{session_id[:8]}] Stream failed after session closed; ignoring")
                return {"outcome": "abandoned"}
            log_error(LOGGER, exc, context=f"stream for session {session_id}")
            description = exc.user_message if isinstance(exc, ShellAgentError) else handle_model_error(exc)
            transition(session, "error", "Assistant stream failed.")
            emit(MessageEvent(session_id=session_id, message_id=message_id, content=description))
            updates: TurnState = {"message_id": message_id, "outcome": "failed"}
            log_node_exit(LOGGER, "stream", updates)
            return updates

        if not store.is_live(session_id, session):
            LOGGER.info(f"[{session_id[:8]}] Session closed during stream; result ignored")
            return {"outcome": "abandoned"}

        partition_state, tail = flush(partition_state)
        publish(tail)

        updates = {
            "message_id": message_id,
            "raw_text": raw_text or "",
            "narration": narration,
            "outcome": "streamed",
        }
        log_node_exit(LOGGER, "stream", updates)
        return updates

    return stream_node
