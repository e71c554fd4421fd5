"""Configuration for shellagent."""

from .settings import (
    AgentSettings,
    GovernanceSettings,
    ObservabilitySettings,
    ProviderSettings,
    Settings,
    get_settings,
)

__all__ = [
    "AgentSettings",
    "GovernanceSettings",
    "ObservabilitySettings",
    "ProviderSettings",
    "Settings",
    "get_settings",
]
