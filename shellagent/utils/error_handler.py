"""Unified error handling for the agent core."""

from __future__ import annotations

import inspect
import functools
import logging
from typing import Any, Callable, Optional

LOGGER = logging.getLogger("shellagent.errors")


class ShellAgentError(Exception):
    """Base exception for shellagent errors."""

    def __init__(self, message: str, user_message: Optional[str] = None):
        super().__init__(message)
        self.user_message = user_message or message


class ModelInvocationError(ShellAgentError):
    """Error during the streaming model call."""
    pass


class CommandExecutionError(ShellAgentError):
    """Error raised by a command executor."""
    pass


class ProtocolError(ShellAgentError):
    """Inbound payload does not match the action vocabulary."""
    pass


def with_error_boundary(entry_name: str):
    """Decorator keeping exceptions from escaping a public entry point.

    Every failure the core knows about is reported through events before it
    reaches this boundary. Anything that still escapes is logged with its
    traceback and the call completes normally.

    Args:
        entry_name: Name of the entry point for logging

    Example:
        @with_error_boundary("handle_action")
        async def handle_action(self, action):
            ...
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return func(*args, **kwargs)
            except ProtocolError as e:
                LOGGER.warning(f"{entry_name} rejected payload: {e}")
            except ShellAgentError as e:
                LOGGER.error(f"{entry_name} failed: {e.user_message}")
            except Exception as e:
                LOGGER.exception(f"{entry_name} unexpected error", exc_info=e)
            return None

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return await func(*args, **kwargs)
            except ProtocolError as e:
                LOGGER.warning(f"{entry_name} rejected payload: {e}")
            except ShellAgentError as e:
                LOGGER.error(f"{entry_name} failed: {e.user_message}")
            except Exception as e:
                LOGGER.exception(f"{entry_name} unexpected error", exc_info=e)
            return None

        if inspect.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator


def handle_model_error(error: Exception) -> str:
    """Convert model invocation errors to user-facing messages.

    Args:
        error: Exception raised during the model call

    Returns:
        Short description suitable for a terminal message event
    """
    error_str = str(error).lower()

    if "rate_limit" in error_str or "429" in error_str:
        return "The AI provider is rate limiting requests. Please try again shortly."

    if "timeout" in error_str or "timed out" in error_str:
        return "The AI provider timed out. Please retry."

    if "context_length" in error_str or "maximum context" in error_str:
        return "The request is too long for the selected model."

    if "invalid_api_key" in error_str or "authentication" in error_str or "401" in error_str:
        return "The AI provider rejected the API key. Check it in Settings."

    if "quota" in error_str or "insufficient" in error_str:
        return "The AI provider quota is exhausted."

    return f"AI request failed: {error}" if str(error) else "AI request failed."
