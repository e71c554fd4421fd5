"""Top-level package exports for shellagent."""

from .runtime.app import build_application
from .runtime.runner import AgentRunner

__all__ = ["AgentRunner", "build_application"]
