"""Runtime assembly for the shell agent."""

from __future__ import annotations

import logging
from typing import Optional

from shellagent.config import Settings, get_settings
from shellagent.hitl import CommandApprovalChecker
from shellagent.llm import (
    ChatStreamClient,
    ModelResolver,
    build_agent_prompt,
    build_model_resolver,
    build_response_parser,
)
from shellagent.llm.client import ContextProvider
from shellagent.telemetry import configure_tracing

from .collaborators import CommandExecutor, EventSink, StreamingModelClient
from .runner import AgentRunner

LOGGER = logging.getLogger("shellagent.app")


def build_application(
    *,
    executor: CommandExecutor,
    emit_event: EventSink,
    settings: Optional[Settings] = None,
    model_resolver: Optional[ModelResolver] = None,
    model_client: Optional[StreamingModelClient] = None,
    context_provider: Optional[ContextProvider] = None,
    approval_checker: Optional[CommandApprovalChecker] = None,
) -> AgentRunner:
    """Wire settings, default collaborators and the turn graph into a runner.

    Args:
        executor: Runs approved commands
        emit_event: Receives every outbound event
        settings: Application settings (defaults to ``get_settings()``)
        model_resolver: Overrides the ChatOpenAI resolver built from settings
        model_client: Overrides the streaming client entirely
        context_provider: Supplies session details and recent output to the system prompt
        approval_checker: Overrides the checker built from the approval rules path

    Returns:
        AgentRunner ready for ``handle_action``
    """
    settings = settings or get_settings()
    if configure_tracing(settings.observability):
        LOGGER.info("Tracing configured")

    if model_client is None:
        resolver = model_resolver or build_model_resolver(settings.providers)
        model_client = ChatStreamClient(
            resolver,
            context_provider,
            marker=settings.agent.payload_marker,
            prompt_log_length=settings.observability.log_prompt_max_length,
        )

    if approval_checker is None:
        approval_checker = CommandApprovalChecker(config_path=settings.governance.approval_rules_path)
        LOGGER.info(f"Approval checker initialized (rules: {settings.governance.approval_rules_path or 'built-in'})")

    runner = AgentRunner(
        prompt_builder=build_agent_prompt,
        model_client=model_client,
        parser=build_response_parser(settings),
        executor=executor,
        emit_event=emit_event,
        settings=settings,
        approval_checker=approval_checker,
    )
    LOGGER.info(
        f"Agent runner ready (model={settings.agent.default_model}, max_steps={settings.agent.max_steps}, "
        f"auto_approve={settings.governance.auto_approve_safe_commands})"
    )
    return runner
