"""LangSmith tracing setup for turn graph runs."""

from __future__ import annotations

import logging
import os

from shellagent.config.settings import ObservabilitySettings

LOGGER = logging.getLogger("shellagent.telemetry")

DEFAULT_PROJECT = "shellagent"


def configure_tracing(settings: ObservabilitySettings) -> bool:
    """Export the LangSmith variables LangChain reads at call time.

    Returns:
        True when tracing was switched on
    """
    if not settings.tracing_enabled:
        return False
    if not settings.langsmith_api_key:
        LOGGER.warning("LANGCHAIN_TRACING_V2 is set but no LangSmith API key was found; tracing stays off")
        return False

    os.environ["LANGCHAIN_TRACING_V2"] = "true"
    os.environ["LANGCHAIN_API_KEY"] = settings.langsmith_api_key
    os.environ["LANGCHAIN_PROJECT"] = settings.langsmith_project or DEFAULT_PROJECT
    LOGGER.info(f"LangSmith tracing enabled for project {os.environ['LANGCHAIN_PROJECT']}")
    return True
