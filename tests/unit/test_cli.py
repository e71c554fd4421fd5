"""Tests for the console front-end."""

from shellagent.cli import ConsolePrinter, ShellAgentCLI
from shellagent.protocol import (
    MessageEvent,
    PlanStep,
    PlanUpdatedEvent,
    StateChangedEvent,
    ToolCall,
    ToolRequestedEvent,
    WaitingForApprovalEvent,
)


def make_printer():
    output = []
    return ConsolePrinter(write=output.append), output


class TestConsolePrinter:
    def test_partials_print_only_new_text(self):
        printer, output = make_printer()

        printer(MessageEvent(session_id="s", message_id="m", content="Chec", partial=True))
        printer(MessageEvent(session_id="s", message_id="m", content="Checking disk", partial=True))
        printer(MessageEvent(session_id="s", message_id="m", content="Checking disk"))

        assert "".join(output) == "Checking disk\n"

    def test_final_without_partials_is_printed_whole(self):
        printer, output = make_printer()

        printer(MessageEvent(session_id="s", message_id="m", content="Hello!"))

        assert output == ["Agent> Hello!\n"]

    def test_waiting_call_is_taken_once(self):
        printer, output = make_printer()
        call = ToolCall(id="t1", input={"command": "df -h"}, risk="low")

        printer(ToolRequestedEvent(session_id="s", tool_call=call))
        printer(WaitingForApprovalEvent(session_id="s", tool_call_id="t1"))

        assert printer.take_waiting().input["command"] == "df -h"
        assert printer.take_waiting() is None
        assert "Proposed: df -h (risk: low)\n" in output

    def test_plan_and_state_rendering(self):
        printer, output = make_printer()

        printer(PlanUpdatedEvent(session_id="s", plan_id="p", steps=[PlanStep(id="1", description="Look", status="done")]))
        printer(StateChangedEvent(session_id="s", state="act", detail="Awaiting command approval."))

        assert "  [x] Look\n" in output
        assert printer.state == "act"


class TestSlashCommands:
    def make_cli(self, mocker):
        printer, _ = make_printer()
        return ShellAgentCLI(mocker.Mock(), printer, mocker.Mock())

    def test_model_must_be_known(self, mocker, capsys):
        cli = self.make_cli(mocker)

        assert cli._handle_command("/model claude-opus-4.5") is True
        assert cli._handle_command("/model gpt-2") is True

        assert cli.model == "claude-opus-4.5"
        assert "Unknown model" in capsys.readouterr().out

    def test_steps_and_quit(self, mocker):
        cli = self.make_cli(mocker)

        cli._handle_command("/steps 3")

        assert cli.max_steps == 3
        assert cli._handle_command("/quit") is False
