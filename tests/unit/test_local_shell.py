"""Tests for the local shell executor."""

import sys

import pytest

from shellagent.executors import LocalShellExecutor
from shellagent.utils.error_handler import CommandExecutionError

pytestmark = pytest.mark.skipif(sys.platform.startswith("win"), reason="POSIX shell commands")


class TestLocalShellExecutor:
    @pytest.mark.asyncio
    async def test_captures_output_and_exit_code(self, tmp_path):
        executor = LocalShellExecutor(cwd=tmp_path)

        outcome = await executor.execute("s1", "echo hello; echo oops 1>&2; exit 3", "t1")

        assert outcome.exit_code == 3
        assert "hello" in outcome.output
        assert "oops" in outcome.output

    @pytest.mark.asyncio
    async def test_runs_in_working_directory(self, tmp_path):
        (tmp_path / "marker.txt").write_text("x")
        executor = LocalShellExecutor(cwd=tmp_path)

        outcome = await executor.execute("s1", "ls", "t1")

        assert "marker.txt" in outcome.output

    @pytest.mark.asyncio
    async def test_timeout_raises(self, tmp_path):
        executor = LocalShellExecutor(cwd=tmp_path, timeout=0.2)

        with pytest.raises(CommandExecutionError) as exc_info:
            await executor.execute("s1", "sleep 5", "t1")

        assert "timeout" in exc_info.value.user_message.lower()

    @pytest.mark.asyncio
    async def test_recent_output_feeds_context(self, tmp_path):
        executor = LocalShellExecutor(cwd=tmp_path)
        await executor.execute("s1", "echo first", "t1")
        await executor.execute("s1", "echo second", "t2")

        output, truncated = executor.recent_output("s1", 10_000)
        tail, tail_truncated = executor.recent_output("s1", 7)
        context = executor.context_provider("s1", 10_000)

        assert output.index("$ echo first") < output.index("$ echo second")
        assert truncated is False
        assert tail == "second\n" and tail_truncated is True
        assert context.output == output
        assert context.session.name == str(tmp_path.resolve())

    def test_unknown_session_has_no_output(self):
        assert LocalShellExecutor().recent_output("nobody", 100) == ("", False)
