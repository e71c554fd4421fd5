"""Formatting of command output fed back to the user and the model."""

from __future__ import annotations

TRUNCATION_MARKER = "\n... (truncated)"


def format_command_output(output: str, max_chars: int = 4000) -> str:
    """Trim output and cap its visible length."""
    trimmed = (output or "").strip()
    if not trimmed:
        return ""
    if len(trimmed) <= max_chars:
        return trimmed
    return f"{trimmed[:max_chars]}{TRUNCATION_MARKER}"


def format_tool_result(command: str, exit_code: int, output: str) -> str:
    lines = [f"Completed: {command}", f"Exit code: {exit_code}"]
    if output:
        lines.extend(["Output:", output])
    return "\n".join(lines)


def format_observation_note(command: str, exit_code: int, output: str) -> str:
    """Context note handed to the next turn after a batch command finishes."""
    note = f"Command completed: {command}\nExit code: {exit_code}"
    if output:
        note += f"\nOutput:\n{output}"
    return note
