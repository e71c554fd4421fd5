"""Tests for environment-bound settings and tracing setup."""

import os

import pytest
from pydantic import ValidationError

from shellagent.config.settings import (
    AgentSettings,
    GovernanceSettings,
    ObservabilitySettings,
    ProviderSettings,
    Settings,
    get_settings,
)
from shellagent.telemetry import configure_tracing


@pytest.fixture
def clean_env(monkeypatch):
    for name in (
        "AGENT_DEFAULT_MODEL",
        "AI_DEFAULT_MODEL",
        "AGENT_MAX_STEPS",
        "MAX_STEPS",
        "AGENT_OUTPUT_LIMIT",
        "AGENT_OUTPUT_CAP",
        "AUTO_APPROVE_SAFE_COMMANDS",
        "AUTO_APPROVE_COMMANDS",
        "LANGCHAIN_TRACING_V2",
        "LANGCHAIN_API_KEY",
        "LANGSMITH_API_KEY",
        "LANGCHAIN_PROJECT",
    ):
        # setenv first so teardown also removes values exported by the code under test
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch


class TestAgentSettings:
    def test_env_aliases(self, clean_env):
        clean_env.setenv("AI_DEFAULT_MODEL", "claude-opus-4.5")
        clean_env.setenv("AGENT_MAX_STEPS", "3")
        clean_env.setenv("AGENT_OUTPUT_LIMIT", "1200")

        settings = AgentSettings()

        assert settings.default_model == "claude-opus-4.5"
        assert settings.max_steps == 3
        assert settings.output_cap == 1200

    def test_field_names_are_accepted(self, clean_env):
        settings = AgentSettings(max_steps=2, payload_marker="@@")

        assert settings.max_steps == 2
        assert settings.payload_marker == "@@"

    def test_step_budget_must_be_positive(self, clean_env):
        clean_env.setenv("AGENT_MAX_STEPS", "0")

        with pytest.raises(ValidationError):
            AgentSettings()


class TestGovernanceSettings:
    def test_auto_approve_off_by_default(self, clean_env):
        assert GovernanceSettings().auto_approve_safe_commands is False

    def test_auto_approve_from_env(self, clean_env):
        clean_env.setenv("AUTO_APPROVE_SAFE_COMMANDS", "true")

        assert GovernanceSettings().auto_approve_safe_commands is True


class TestRootSettings:
    def test_groups_are_built(self, clean_env):
        settings = Settings()

        assert isinstance(settings.providers, ProviderSettings)
        assert settings.providers.anthropic_base_url.startswith("https://")

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()


class TestConfigureTracing:
    def test_disabled(self, clean_env):
        assert configure_tracing(ObservabilitySettings(tracing_enabled=False)) is False

    def test_enabled_without_key(self, clean_env):
        settings = ObservabilitySettings(tracing_enabled=True, langsmith_api_key=None)

        assert configure_tracing(settings) is False
        assert "LANGCHAIN_API_KEY" not in os.environ

    def test_enabled_exports_variables(self, clean_env):
        settings = ObservabilitySettings(tracing_enabled=True, langsmith_api_key="ls-key")

        assert configure_tracing(settings) is True
        assert os.environ["LANGCHAIN_TRACING_V2"] == "true"
        assert os.environ["LANGCHAIN_API_KEY"] == "ls-key"
        assert os.environ["LANGCHAIN_PROJECT"] == "shellagent"
