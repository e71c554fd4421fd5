"""Command executors."""

from .local_shell import LocalShellExecutor

__all__ = ["LocalShellExecutor"]
