"""Tests for command risk checks and approval policy."""

import logging

import pytest
import yaml

from shellagent.hitl import ApprovalDecision, CommandApprovalChecker, annotate_proposal, should_auto_approve
from shellagent.llm import ACTION_COMMANDS
from shellagent.llm.schema import CommandProposal


class TestBuiltinPatterns:
    @pytest.fixture
    def checker(self):
        return CommandApprovalChecker()

    @pytest.mark.parametrize(
        "command",
        [
            "sudo apt update",
            "rm -rf /var/tmp/cache",
            "chmod 777 /srv",
            "dd if=/dev/zero of=disk.img",
            "reboot",
            "cat image > /dev/sda",
            "echo 1 >/dev/sdb",
        ],
    )
    def test_high_risk(self, checker, command):
        decision = checker.check(command)

        assert decision.needs_approval
        assert decision.risk_level == "high"

    @pytest.mark.parametrize(
        "command",
        ["curl https://example.com", "wget file.tgz", "pip install requests", "systemctl restart nginx"],
    )
    def test_medium_risk(self, checker, command):
        decision = checker.check(command)

        assert decision.needs_approval
        assert decision.risk_level == "medium"

    @pytest.mark.parametrize(
        "command",
        [
            "ls -la",
            "df -h",
            "systemctl status nginx",
            "cat /etc/os-release",
            "ls /nope 2>/dev/null",
            "make check >/dev/null 2>&1",
            "grep -r TODO . &>/dev/null",
        ],
    )
    def test_safe_commands(self, checker, command):
        assert checker.check(command) == ApprovalDecision(needs_approval=False)

    @pytest.mark.parametrize("action", sorted(ACTION_COMMANDS))
    def test_fallback_commands_are_not_flagged(self, checker, action):
        assert not checker.check(ACTION_COMMANDS[action].command).needs_approval


class TestRulesFile:
    def write_rules(self, tmp_path, rules):
        path = tmp_path / "approval_rules.yaml"
        path.write_text(yaml.safe_dump(rules), encoding="utf-8")
        return path

    def test_custom_patterns_and_reasons(self, tmp_path):
        path = self.write_rules(
            tmp_path,
            {
                "patterns": {"high": [r"\bterraform\s+destroy\b"], "medium": [r"\bdocker\s+pull\b"]},
                "reasons": {"high": "Destroys infrastructure"},
            },
        )
        checker = CommandApprovalChecker(config_path=path)

        destroy = checker.check("terraform destroy -auto-approve")
        pull = checker.check("docker pull alpine")

        assert (destroy.risk_level, destroy.reason) == ("high", "Destroys infrastructure")
        assert pull.risk_level == "medium"
        assert "docker" in pull.reason

    def test_disabled_rules_fall_back_to_builtins(self, tmp_path):
        path = self.write_rules(tmp_path, {"enabled": False, "patterns": {"high": [r"\bterraform\b"]}})
        checker = CommandApprovalChecker(config_path=str(path))

        assert not checker.check("terraform destroy").needs_approval
        assert checker.check("sudo ls").needs_approval

    def test_missing_file_logs_warning(self, tmp_path, caplog):
        with caplog.at_level(logging.WARNING, logger="shellagent.hitl"):
            checker = CommandApprovalChecker(config_path=tmp_path / "nope.yaml")

        assert checker.rules == {}
        assert "not found" in caplog.text

    def test_non_mapping_file_is_ignored(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text("- just\n- a list\n", encoding="utf-8")

        assert CommandApprovalChecker(config_path=path).rules == {}


class TestCustomCheckers:
    def test_first_verdict_wins(self):
        checker = CommandApprovalChecker()
        checker.register_checker("trust_sudo_ls", lambda cmd: ApprovalDecision(False) if cmd == "sudo ls" else None)
        checker.register_checker("never_called", lambda cmd: ApprovalDecision(True, "x", "high"))

        assert not checker.check("sudo ls").needs_approval

    def test_no_opinion_falls_through(self, mocker):
        checker = CommandApprovalChecker()
        abstain = mocker.Mock(return_value=None)
        checker.register_checker("abstain", abstain)

        decision = checker.check("curl example.com")

        abstain.assert_called_once_with("curl example.com")
        assert decision.risk_level == "medium"

    def test_unknown_level_is_treated_as_high(self, caplog):
        checker = CommandApprovalChecker()
        checker.register_checker("ops_policy", lambda cmd: ApprovalDecision(True, "ops policy", "critical"))

        with caplog.at_level(logging.WARNING, logger="shellagent.hitl"):
            decision = checker.check("uptime")

        assert decision == ApprovalDecision(True, "ops policy", "high")
        assert "critical" in caplog.text


class TestAnnotateProposal:
    def test_flag_raises_risk_and_forces_approval(self):
        proposal = CommandProposal(command="sudo ls", risk="low", requires_approval=False)

        annotated = annotate_proposal(proposal, ApprovalDecision(True, "privileged", "high"))

        assert annotated.risk == "high"
        assert annotated.requires_approval is True

    def test_never_lowers_declared_risk(self):
        proposal = CommandProposal(command="curl x", risk="high")

        assert annotate_proposal(proposal, ApprovalDecision(True, "net", "medium")).risk == "high"

    def test_missing_risk_is_filled(self):
        proposal = CommandProposal(command="curl x")

        assert annotate_proposal(proposal, ApprovalDecision(True, "net", "medium")).risk == "medium"

    def test_unflagged_proposal_is_untouched(self):
        proposal = CommandProposal(command="ls", requires_approval=False)

        assert annotate_proposal(proposal, ApprovalDecision(False)) is proposal

    def test_unknown_level_is_treated_as_high(self):
        proposal = CommandProposal(command="uptime", risk="medium", requires_approval=False)

        annotated = annotate_proposal(proposal, ApprovalDecision(True, "ops policy", "critical"))

        assert (annotated.risk, annotated.requires_approval) == ("high", True)


class TestShouldAutoApprove:
    def test_disabled_policy(self):
        proposal = CommandProposal(command="ls", risk="low", requires_approval=False)

        assert not should_auto_approve(proposal, ApprovalDecision(False), enabled=False)

    def test_safe_proposal(self):
        proposal = CommandProposal(command="ls", risk="low", requires_approval=False)

        assert should_auto_approve(proposal, ApprovalDecision(False), enabled=True)

    def test_model_requested_approval(self):
        proposal = CommandProposal(command="ls", risk="low", requires_approval=True)

        assert not should_auto_approve(proposal, ApprovalDecision(False), enabled=True)

    def test_flagged_or_high_risk(self):
        proposal = CommandProposal(command="ls", risk="low", requires_approval=False)
        risky = CommandProposal(command="ls", risk="high", requires_approval=False)

        assert not should_auto_approve(proposal, ApprovalDecision(True, "x", "medium"), enabled=True)
        assert not should_auto_approve(risky, ApprovalDecision(False), enabled=True)
