"""Environment-bound configuration objects.

This module provides Pydantic BaseSettings-based configuration loading from .env files.
Each group accepts several alias names for its environment variables.

Example:
    from shellagent.config.settings import get_settings

    settings = get_settings()  # Cached singleton
    max_steps = settings.agent.max_steps
    auto_approve = settings.governance.auto_approve_safe_commands
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


load_dotenv()


class AgentSettings(BaseSettings):
    """Agent loop defaults.

    - default_model: Model used when a user message names none
    - max_steps: Observed results allowed per session before finishing
    - output_cap: Characters of recent terminal output handed to the model
    - tool_output_max_chars: Visible length of command output in results
    - payload_marker: Token separating narration from the JSON payload
    - recursion_limit: LangGraph recursion limit for one turn
    """

    default_model: str = Field(
        default="gpt-5.2",
        validation_alias=AliasChoices("AGENT_DEFAULT_MODEL", "AI_DEFAULT_MODEL"),
    )
    max_steps: int = Field(
        default=8,
        ge=1,
        le=100,
        validation_alias=AliasChoices("AGENT_MAX_STEPS", "MAX_STEPS"),
    )
    output_cap: int = Field(
        default=4000,
        ge=0,
        validation_alias=AliasChoices("AGENT_OUTPUT_LIMIT", "AGENT_OUTPUT_CAP"),
    )
    tool_output_max_chars: int = Field(default=4000, ge=100, alias="TOOL_OUTPUT_MAX_CHARS")
    payload_marker: str = Field(default="JSON:", min_length=1, alias="AGENT_PAYLOAD_MARKER")
    recursion_limit: int = Field(default=25, ge=5, le=200, alias="AGENT_RECURSION_LIMIT")
    enforce_intent_policy: bool = Field(default=True, alias="AGENT_ENFORCE_INTENT_POLICY")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


class GovernanceSettings(BaseSettings):
    """Command approval policy.

    - auto_approve_safe_commands: Run proposals the model marked as not needing
      approval, provided the risk checker does not flag them (default: False)
    - approval_rules_path: Optional YAML file with extra risk patterns
    """

    auto_approve_safe_commands: bool = Field(
        default=False,
        validation_alias=AliasChoices("AUTO_APPROVE_SAFE_COMMANDS", "AUTO_APPROVE_COMMANDS"),
    )
    approval_rules_path: Optional[str] = Field(default=None, alias="APPROVAL_RULES_PATH")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


class ProviderSettings(BaseSettings):
    """Model provider credentials.

    gpt-* models go to OpenAI; claude-* models go to Anthropic's
    OpenAI-compatible endpoint.
    """

    openai_api_key: Optional[str] = Field(default=None, alias="OPENAI_API_KEY")
    openai_base_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("OPENAI_BASE_URL", "OPENAI_API_BASE"),
    )
    anthropic_api_key: Optional[str] = Field(default=None, alias="ANTHROPIC_API_KEY")
    anthropic_base_url: str = Field(
        default="https://api.anthropic.com/v1/",
        alias="ANTHROPIC_BASE_URL",
    )
    temperature: float = Field(default=0.2, ge=0.0, le=2.0, alias="MODEL_TEMPERATURE")
    max_tokens: int = Field(default=800, ge=1, alias="MODEL_MAX_TOKENS")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


class ObservabilitySettings(BaseSettings):
    """Tracing and logging configuration."""

    langsmith_project: Optional[str] = Field(default=None, alias="LANGCHAIN_PROJECT")
    langsmith_api_key: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("LANGCHAIN_API_KEY", "LANGSMITH_API_KEY")
    )
    tracing_enabled: bool = Field(default=False, alias="LANGCHAIN_TRACING_V2")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_dir: str = Field(default="logs", alias="LOG_DIR")
    log_prompt_max_length: int = Field(default=500, ge=100, le=5000, alias="LOG_PROMPT_MAX_LENGTH")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


class Settings(BaseSettings):
    """Root application settings loaded from .env file.

    Groups:
    - agent: Loop defaults (AgentSettings)
    - governance: Approval policy (GovernanceSettings)
    - providers: Model credentials (ProviderSettings)
    - observability: Tracing and logging (ObservabilitySettings)

    Use get_settings() to obtain a cached singleton instance.
    """

    environment: str = Field(default="dev", alias="APP_ENV")
    agent: AgentSettings = Field(default_factory=AgentSettings)
    governance: GovernanceSettings = Field(default_factory=GovernanceSettings)
    providers: ProviderSettings = Field(default_factory=ProviderSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_assignment=True,
        case_sensitive=False,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached singleton Settings instance."""
    return Settings()
