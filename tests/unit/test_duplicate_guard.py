"""Tests for the repeated-command loop breaker."""

from shellagent.runtime import DuplicateCommandGuard, GuardVerdict, LastCommand, Session


def make_session(last_command=None, exit_code=0, step=1):
    session = Session(session_id="s1", goal="say hi", model="gpt-5.2", max_steps=8, step=step)
    if last_command is not None:
        session.last_command = LastCommand(command=last_command, exit_code=exit_code)
    return session


class TestDuplicateCommandGuard:
    def test_no_previous_command_is_clear(self):
        assert DuplicateCommandGuard().inspect(make_session(), "echo hi") is GuardVerdict.CLEAR

    def test_different_command_is_clear(self):
        session = make_session("echo hi")

        assert DuplicateCommandGuard().inspect(session, "echo bye") is GuardVerdict.CLEAR

    def test_failed_previous_command_may_be_retried(self):
        session = make_session("echo hi", exit_code=1)

        assert DuplicateCommandGuard().inspect(session, "echo hi") is GuardVerdict.CLEAR

    def test_whitespace_is_ignored(self):
        session = make_session("echo hi")

        assert DuplicateCommandGuard().is_repeat(session, "  echo hi\n")

    def test_first_repeat_asks_for_correction_then_stops(self):
        guard = DuplicateCommandGuard()
        session = make_session("echo hi")

        assert guard.inspect(session, "echo hi") is GuardVerdict.CORRECT
        guard.mark(session)
        assert session.duplicate_guard_step == 1
        assert guard.inspect(session, "echo hi") is GuardVerdict.STOP

    def test_marker_from_earlier_step_does_not_stop(self):
        guard = DuplicateCommandGuard()
        session = make_session("echo hi", step=2)
        session.duplicate_guard_step = 1

        assert guard.inspect(session, "echo hi") is GuardVerdict.CORRECT
