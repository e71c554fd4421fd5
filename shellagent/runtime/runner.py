"""Per-session agent state machine.

``AgentRunner.handle_action`` is the single public entry point. Each inbound
action moves one session through

    idle → intent → plan → act → observe → reflect → finish | error

Turns (one model round-trip each) run through the compiled turn graph in
their own asyncio task so that ``cancel`` can abort an in-flight model call.
Every outcome is reported through events; no exception escapes the entry
point.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional, Union

from shellagent.config.settings import Settings, get_settings
from shellagent.graph.builder import build_turn_graph
from shellagent.hitl.approval_checker import CommandApprovalChecker
from shellagent.protocol.actions import (
    ApproveToolAction,
    CancelAction,
    ConfirmToolAction,
    RejectToolAction,
    UserMessageAction,
    parse_action,
)
from shellagent.protocol.base import AgentState
from shellagent.protocol.events import AgentEvent, StateChangedEvent, ToolResult, ToolResultEvent
from shellagent.utils.error_handler import ShellAgentError, with_error_boundary
from shellagent.utils.logging_utils import (
    log_error,
    log_event,
    log_state_transition,
    log_tool_call,
    log_tool_result,
)
from shellagent.utils.output_format import format_command_output, format_observation_note, format_tool_result

from .collaborators import CommandExecutor, EventSink, PromptBuilder, ResponseParser, StreamingModelClient
from .duplicate_guard import DuplicateCommandGuard
from .session_store import Session, SessionStore

LOGGER = logging.getLogger("shellagent.runner")

INITIAL_NOTE = "Initial user request."
INTERACTIVE_CONFIRMED = "Interactive command completed (user confirmed)."


class AgentRunner:
    """Orchestrates sessions: consumes actions, drives the trackers, emits events.

    Args:
        prompt_builder: ``(goal, step, note) -> prompt``
        model_client: Streaming model call
        parser: Raw text to ``ParsedAssistant``
        executor: Runs approved commands
        emit_event: Receives every outbound event
        settings: Application settings (defaults to ``get_settings()``)
        approval_checker: Optional risk checker applied to each proposal
    """

    def __init__(
        self,
        *,
        prompt_builder: PromptBuilder,
        model_client: StreamingModelClient,
        parser: ResponseParser,
        executor: CommandExecutor,
        emit_event: EventSink,
        settings: Optional[Settings] = None,
        approval_checker: Optional[CommandApprovalChecker] = None,
    ):
        self.settings = settings or get_settings()
        self.executor = executor
        self._sink = emit_event
        self.store = SessionStore(self._emit)
        self.graph = build_turn_graph(
            store=self.store,
            prompt_builder=prompt_builder,
            model_client=model_client,
            parser=parser,
            transition=self._transition,
            emit=self._emit,
            output_cap=self.settings.agent.output_cap,
            marker=self.settings.agent.payload_marker,
            guard=DuplicateCommandGuard(),
            approval_checker=approval_checker,
            auto_approve=self.settings.governance.auto_approve_safe_commands,
        )
        self._handlers = {
            "user_message": self._on_user_message,
            "approve_tool": self._on_approve_tool,
            "confirm_tool": self._on_confirm_tool,
            "reject_tool": self._on_reject_tool,
            "cancel": self._on_cancel,
        }

    # ========== Entry point ==========

    @with_error_boundary("handle_action")
    async def handle_action(self, action: Union[Dict[str, Any], Any]) -> None:
        """Process one inbound action to completion.

        Args:
            action: A typed action model or its wire dict (validated with ``parse_action``)
        """
        if isinstance(action, dict):
            action = parse_action(action)
        LOGGER.info(f"[{action.session_id[:8]}] Action {action.kind}")
        await self._handlers[action.kind](action)

    # ========== Event plumbing ==========

    def _emit(self, event: AgentEvent) -> None:
        try:
            log_event(LOGGER, event.to_wire())
            self._sink(event)
        except Exception:
            LOGGER.exception(f"Event sink failed for {event.kind} event")

    def _transition(self, session: Session, state: AgentState, detail: Optional[str] = None) -> None:
        """Move a live session to ``state``; terminal states close it."""
        if not self.store.is_live(session.session_id, session):
            LOGGER.debug(f"[{session.session_id[:8]}] Dropping transition to {state} for closed session")
            return
        previous = session.state
        session.state = state
        log_state_transition(LOGGER, session.session_id, previous, state, detail)
        self._emit(StateChangedEvent(session_id=session.session_id, state=state, detail=detail))
        if session.is_terminal:
            self.store.close(session.session_id)

    def _tool_result(self, session_id: str, tool_call_id: str, status: str, **fields: Any) -> None:
        result = ToolResult(tool_call_id=tool_call_id, status=status, **fields)
        self._emit(ToolResultEvent(session_id=session_id, result=result))

    # ========== Turns ==========

    async def _run_turn(self, session: Session, note: Optional[str]) -> None:
        """Run one turn in its own task and continue into approval when policy allows."""
        task = asyncio.ensure_future(
            self.graph.ainvoke(
                {"session_id": session.session_id, "note": note},
                config={"recursion_limit": self.settings.agent.recursion_limit},
            )
        )
        session.turn_task = task
        try:
            await asyncio.wait({task})
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            if session.turn_task is task:
                session.turn_task = None

        if task.cancelled():
            LOGGER.info(f"[{session.session_id[:8]}] Turn cancelled")
            return

        error = task.exception()
        if error is not None:
            log_error(LOGGER, error, context=f"turn for session {session.session_id}")
            self._transition(session, "error", "Agent turn failed.")
            return

        result = task.result()
        if result.get("outcome") == "auto_approved":
            await self._approve(session.session_id, result["proposal"].id)

    # ========== Action handlers ==========

    async def _on_user_message(self, action: UserMessageAction) -> None:
        existing = self.store.get(action.session_id)
        if existing is not None:
            LOGGER.warning(f"[{action.session_id[:8]}] New goal replaces live session in state {existing.state}")
            task = existing.turn_task
            self._transition(existing, "finish", "Replaced by new goal.")
            self._cancel_turn(existing, task)

        session = self.store.create(
            action.session_id,
            goal=action.content,
            model=action.model or self.settings.agent.default_model,
            max_steps=action.max_steps or self.settings.agent.max_steps,
        )
        self.store.plans.reset(session.session_id)
        self._transition(session, "intent", "User intent received.")
        await self._run_turn(session, INITIAL_NOTE)

    async def _on_approve_tool(self, action: ApproveToolAction) -> None:
        await self._approve(action.session_id, action.tool_call_id)

    async def _approve(self, session_id: str, tool_call_id: str) -> None:
        proposal = self.store.proposals.lookup(session_id, tool_call_id)
        session = self.store.get(session_id)
        if proposal is None or session is None:
            LOGGER.warning(f"[{session_id[:8]}] Approval for unknown proposal {tool_call_id}")
            self._tool_result(session_id, tool_call_id, "error", error="Command proposal not found.")
            return

        plans = self.store.plans
        plans.set_status(session_id, tool_call_id, "in_progress")
        plans.advance_cursor(session_id, "in_progress")
        self._transition(
            session,
            "observe",
            "Interactive command running." if proposal.interactive else "Command running.",
        )
        log_tool_call(LOGGER, session_id, tool_call_id, proposal.command)

        if proposal.interactive:
            try:
                self.executor.run_interactive(session_id, proposal.command)
            except Exception as exc:
                self._fail_execution(session, tool_call_id, exc)
                return
            self.store.interactive.begin(session_id, tool_call_id)
            return

        try:
            outcome = await self.executor.execute(session_id, proposal.command, tool_call_id)
        except Exception as exc:
            if not self.store.is_live(session_id, session):
                LOGGER.info(f"[{session_id[:8]}] Command failed after session closed; ignoring")
                return
            self._fail_execution(session, tool_call_id, exc)
            return

        if not self.store.is_live(session_id, session):
            LOGGER.info(f"[{session_id[:8]}] Session closed while {tool_call_id} ran; result ignored")
            return

        formatted = format_command_output(outcome.output, self.settings.agent.tool_output_max_chars)
        log_tool_result(LOGGER, tool_call_id, formatted, success=True)
        self._tool_result(
            session_id,
            tool_call_id,
            "success",
            output=format_tool_result(proposal.command, outcome.exit_code, formatted),
        )
        plans.set_status(session_id, tool_call_id, "done")
        plans.advance_cursor(session_id, "done")
        session.record_command(proposal.command, outcome.exit_code)
        session.step += 1
        self._transition(session, "reflect", "Evaluating command output.")
        await self._run_turn(session, format_observation_note(proposal.command, outcome.exit_code, formatted))

    def _fail_execution(self, session: Session, tool_call_id: str, error: Exception) -> None:
        log_tool_result(LOGGER, tool_call_id, error, success=False)
        self.store.plans.set_status(session.session_id, tool_call_id, "blocked")
        self.store.plans.advance_cursor(session.session_id, "blocked")
        self._transition(session, "error", "Command execution failed.")
        if isinstance(error, ShellAgentError):
            message = error.user_message
        else:
            message = str(error) or "Command execution failed."
        self._tool_result(session.session_id, tool_call_id, "error", error=message)

    async def _on_confirm_tool(self, action: ConfirmToolAction) -> None:
        session_id = action.session_id
        if not self.store.interactive.resolve(session_id, action.tool_call_id):
            LOGGER.warning(f"[{session_id[:8]}] Confirmation for non-pending command {action.tool_call_id}")
            self._tool_result(session_id, action.tool_call_id, "error", error="Interactive command was not running.")
            return

        self._tool_result(session_id, action.tool_call_id, "success", output=INTERACTIVE_CONFIRMED)
        self.store.plans.set_status(session_id, action.tool_call_id, "done")
        self.store.plans.advance_cursor(session_id, "done")

        session = self.store.get(session_id)
        if session is None:
            return
        session.step += 1
        self._transition(session, "reflect", "Evaluating command output.")
        await self._run_turn(session, INTERACTIVE_CONFIRMED)

    async def _on_reject_tool(self, action: RejectToolAction) -> None:
        session_id = action.session_id
        session = self.store.get(session_id)
        if session is None or self.store.proposals.lookup(session_id, action.tool_call_id) is None:
            LOGGER.warning(f"[{session_id[:8]}] Rejection for unknown proposal {action.tool_call_id}")
            self._tool_result(session_id, action.tool_call_id, "error", error="Command proposal not found.")
            return

        self.store.plans.set_status(session_id, action.tool_call_id, "blocked")
        self._transition(session, "finish", "Command rejected.")
        self._tool_result(session_id, action.tool_call_id, "cancelled", error=action.reason)

    async def _on_cancel(self, action: CancelAction) -> None:
        session = self.store.get(action.session_id)
        if session is None:
            LOGGER.info(f"[{action.session_id[:8]}] Cancel for unknown or finished session ignored")
            return
        detail = "Cancelled by user."
        if action.reason:
            detail = f"{detail} {action.reason}"
        task = session.turn_task
        self._transition(session, "finish", detail)
        self._cancel_turn(session, task)

    def _cancel_turn(self, session: Session, task: Optional[asyncio.Task] = None) -> None:
        task = task or session.turn_task
        if task is not None and not task.done() and task is not asyncio.current_task():
            LOGGER.info(f"[{session.session_id[:8]}] Cancelling in-flight turn")
            task.cancel()
