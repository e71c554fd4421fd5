"""Streaming model client built on LangChain chat models.

Both providers are reached through ``langchain_openai.ChatOpenAI``: OpenAI
directly, Anthropic through its OpenAI-compatible endpoint. The client only
streams text; partitioning and parsing happen in the agent core.
"""

from __future__ import annotations

import getpass
import logging
import socket
from typing import Any, Callable, Dict, Optional, Protocol

from langchain_core.messages import HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from shellagent.config.settings import ProviderSettings
from shellagent.utils.error_handler import ModelInvocationError, ShellAgentError, handle_model_error
from shellagent.utils.logging_utils import log_prompt

from .prompts import SessionContext, TerminalContext, build_streaming_system_prompt, build_user_prompt

LOGGER = logging.getLogger("shellagent.llm")

ContextProvider = Callable[[str, int], Optional[TerminalContext]]


class ModelResolver(Protocol):
    """Callable that returns a LangChain-compatible chat model."""

    def __call__(self, model_id: str):
        ...


def resolve_provider(model_id: str) -> str:
    return "openai" if model_id.startswith("gpt-") else "anthropic"


def _chat_kwargs(model_id: str, settings: ProviderSettings) -> Dict[str, Any]:
    provider = resolve_provider(model_id)
    if provider == "openai":
        api_key, base_url = settings.openai_api_key, settings.openai_base_url
    else:
        api_key, base_url = settings.anthropic_api_key, settings.anthropic_base_url

    if not api_key:
        raise RuntimeError(f"Missing {provider} API key for model {model_id}. Set it in .env.")

    kwargs: Dict[str, Any] = {
        "model": model_id,
        "api_key": api_key,
        "temperature": settings.temperature,
        "max_tokens": settings.max_tokens,
    }
    if base_url:
        kwargs["base_url"] = base_url
    return kwargs


def build_model_resolver(settings: ProviderSettings) -> ModelResolver:
    """Construct a resolver that returns ChatOpenAI clients on demand.

    Args:
        settings: Provider credentials and sampling parameters

    Returns:
        ModelResolver: Function that takes a model id and returns a ChatOpenAI instance

    Raises:
        RuntimeError: From the resolver, if the provider's API key is missing
    """

    def resolver(model_id: str):
        return ChatOpenAI(**_chat_kwargs(model_id, settings))

    return resolver


def local_terminal_context(session_id: str, output_cap: int) -> TerminalContext:
    """Context for a shell running on this machine with no captured output."""
    return TerminalContext(
        session=SessionContext(host=socket.gethostname(), username=getpass.getuser(), port=0, name=session_id),
    )


def _chunk_text(chunk: Any) -> str:
    content = getattr(chunk, "content", chunk)
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type") == "text":
                parts.append(block.get("text", ""))
        return "".join(parts)
    return ""


class ChatStreamClient:
    """Streams one model turn and returns the complete raw text.

    Args:
        model_resolver: Maps a model id to a LangChain chat model
        context_provider: ``(session_id, output_cap) -> TerminalContext``; when it
            returns None the session is unknown and the call fails
        marker: Payload marker the system prompt asks the model to use
        prompt_log_length: Truncation length for prompt debug logs
    """

    def __init__(
        self,
        model_resolver: ModelResolver,
        context_provider: Optional[ContextProvider] = None,
        *,
        marker: str = "JSON:",
        prompt_log_length: int = 500,
    ):
        self.model_resolver = model_resolver
        self.context_provider = context_provider or local_terminal_context
        self.marker = marker
        self.prompt_log_length = prompt_log_length

    async def __call__(
        self,
        session_id: str,
        prompt: str,
        model: str,
        output_cap: int,
        on_chunk: Callable[[str], None],
    ) -> str:
        context = self.context_provider(session_id, output_cap)
        if context is None:
            raise ModelInvocationError(f"No terminal context for session {session_id}", "Session context not found.")

        system = build_streaming_system_prompt(context, self.marker)
        user = build_user_prompt(prompt)
        log_prompt(LOGGER, "agent turn", user, self.prompt_log_length)

        pieces = []
        try:
            chat_model = self.model_resolver(model)
            async for chunk in chat_model.astream([SystemMessage(content=system), HumanMessage(content=user)]):
                text = _chunk_text(chunk)
                if not text:
                    continue
                pieces.append(text)
                on_chunk(text)
        except ShellAgentError:
            raise
        except Exception as exc:
            LOGGER.warning(f"Model {model} stream failed: {type(exc).__name__}: {exc}")
            raise ModelInvocationError(str(exc), user_message=handle_model_error(exc)) from exc

        raw_text = "".join(pieces)
        LOGGER.debug(f"Model {model} streamed {len(raw_text)} chars for {session_id[:8]}")
        return raw_text
