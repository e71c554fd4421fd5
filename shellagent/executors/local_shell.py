"""Command executor running proposals in a local shell."""

from __future__ import annotations

import asyncio
import getpass
import logging
import os
import socket
import subprocess
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

from shellagent.llm.prompts import SessionContext, TerminalContext
from shellagent.runtime.collaborators import CommandOutcome
from shellagent.utils.error_handler import CommandExecutionError

LOGGER = logging.getLogger("shellagent.executor")


class LocalShellExecutor:
    """Runs approved commands on this machine.

    Batch commands run through ``asyncio.create_subprocess_shell`` with stderr
    merged into stdout. Interactive commands inherit the console and are
    confirmed by the user once they exit.

    Args:
        cwd: Working directory for every command (default: current directory)
        timeout: Seconds before a batch command is killed
        buffer_limit: Characters of recent output kept per session
    """

    def __init__(
        self,
        cwd: Optional[Union[str, Path]] = None,
        timeout: float = 60.0,
        buffer_limit: int = 20_000,
    ):
        self.cwd = Path(cwd).resolve() if cwd else Path.cwd()
        self.timeout = timeout
        self.buffer_limit = buffer_limit
        self._buffers: Dict[str, str] = {}
        self._interactive: Dict[str, subprocess.Popen] = {}

    def _record(self, session_id: str, command: str, output: str) -> None:
        buffer = self._buffers.get(session_id, "") + f"$ {command}\n{output}"
        if not buffer.endswith("\n"):
            buffer += "\n"
        self._buffers[session_id] = buffer[-self.buffer_limit:]

    async def execute(self, session_id: str, command: str, tool_call_id: str) -> CommandOutcome:
        LOGGER.info(f"[{session_id[:8]}] Executing {tool_call_id}: {command}")
        try:
            process = await asyncio.create_subprocess_shell(
                command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
                cwd=str(self.cwd),
            )
        except OSError as e:
            raise CommandExecutionError(f"Failed to start command: {e}") from e

        try:
            stdout, _ = await asyncio.wait_for(process.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            process.kill()
            await process.wait()
            raise CommandExecutionError(
                f"Command timed out after {self.timeout:g}s: {command}",
                user_message=f"Command timeout ({self.timeout:g}s)",
            ) from e

        output = stdout.decode("utf-8", errors="replace")
        self._record(session_id, command, output)
        LOGGER.debug(f"[{session_id[:8]}] {tool_call_id} exited with {process.returncode}")
        return CommandOutcome(output=output, exit_code=process.returncode)

    def run_interactive(self, session_id: str, command: str) -> None:
        """Start the command attached to this console and return immediately."""
        LOGGER.info(f"[{session_id[:8]}] Starting interactive command: {command}")
        self._interactive[session_id] = subprocess.Popen(command, shell=True, cwd=str(self.cwd))
        self._record(session_id, command, "(interactive)\n")

    async def wait_interactive(self, session_id: str) -> Optional[int]:
        """Wait for the session's interactive command to exit; return its exit code."""
        process = self._interactive.pop(session_id, None)
        if process is None:
            return None
        return await asyncio.get_running_loop().run_in_executor(None, process.wait)

    def recent_output(self, session_id: str, limit: int) -> Tuple[str, bool]:
        buffer = self._buffers.get(session_id, "")
        if limit <= 0 or len(buffer) <= limit:
            return buffer, False
        return buffer[-limit:], True

    def context_provider(self, session_id: str, output_cap: int) -> TerminalContext:
        output, truncated = self.recent_output(session_id, output_cap)
        session = SessionContext(
            host=socket.gethostname(),
            username=os.environ.get("USER") or getpass.getuser(),
            port=0,
            name=str(self.cwd),
        )
        return TerminalContext(session=session, output=output, truncated=truncated)
