"""Risk checks for proposed shell commands."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple, Union

import yaml

from shellagent.llm.schema import CommandProposal

LOGGER = logging.getLogger("shellagent.hitl")

RISK_ORDER = {"low": 0, "medium": 1, "high": 2}

HIGH_RISK_PATTERNS = [
    r"\brm\s+-rf\b",
    r"\bsudo\b",
    r"\bchmod\s+777\b",
    r"\bmkfs\b",
    r"\bdd\b.*\bif=/dev/",
    r"(?<![0-9&])>\s*/dev/(?!null\b|stdout\b|stderr\b)",  # redirect into a device, not a discard
    r"\bshutdown\b",
    r"\breboot\b",
]

MEDIUM_RISK_PATTERNS = [
    r"\bcurl\b",
    r"\bwget\b",
    r"\bgit\s+clone\b",
    r"\bpip\s+install\b",
    r"\bnpm\s+install\b",
    r"\bapt(-get)?\s+(install|remove|purge)\b",
    r"\bsystemctl\s+(restart|stop|disable)\b",
]


@dataclass
class ApprovalDecision:
    """Risk verdict for one command."""

    needs_approval: bool
    reason: str = ""
    risk_level: str = "low"  # low, medium, high


CommandChecker = Callable[[str], Optional[ApprovalDecision]]


class CommandApprovalChecker:
    """Command risk checker.

    Three rule layers, highest priority first:
    1. Registered custom checkers (code, first non-None verdict wins)
    2. Patterns from the YAML rules file
    3. Built-in patterns for destructive and network/install commands

    Rules file layout::

        enabled: true
        patterns:
          high: ["\\bterraform\\s+destroy\\b"]
          medium: ["\\bdocker\\s+pull\\b"]
        reasons:
          high: "Destroys infrastructure"
    """

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """
        Args:
            config_path: Optional YAML rules file
        """
        self.config_path = Path(config_path) if config_path else None
        self.rules = self._load_config()
        self.custom_checkers: List[Tuple[str, CommandChecker]] = []

    def _load_config(self) -> dict:
        if not self.config_path:
            return {}
        if not self.config_path.exists():
            LOGGER.warning(f"Approval rules file not found: {self.config_path}")
            return {}

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                loaded = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            LOGGER.warning(f"Failed to load approval rules from {self.config_path}: {e}")
            return {}
        if not isinstance(loaded, dict):
            LOGGER.warning(f"Approval rules in {self.config_path} must be a mapping; ignoring")
            return {}
        return loaded

    def register_checker(self, name: str, checker: CommandChecker) -> None:
        """Register a custom checker.

        Args:
            name: Label used in logs
            checker: Receives the command text; returns a decision or None for no opinion
        """
        self.custom_checkers.append((name, checker))

    def check(self, command: str) -> ApprovalDecision:
        """Classify a command.

        Args:
            command: Shell command text

        Returns:
            ApprovalDecision
        """
        for name, checker in self.custom_checkers:
            decision = checker(command)
            if decision is not None:
                LOGGER.debug(f"Custom checker {name} decided: {decision}")
                if decision.risk_level not in RISK_ORDER:
                    LOGGER.warning(
                        f"Custom checker {name} returned unknown risk '{decision.risk_level}'; treating as high"
                    )
                    decision = replace(decision, risk_level="high")
                return decision

        decision = self._check_config_rules(command)
        if decision.needs_approval:
            return decision

        return self._check_builtin_rules(command)

    def _check_config_rules(self, command: str) -> ApprovalDecision:
        if not self.rules or not self.rules.get("enabled", True):
            return ApprovalDecision(needs_approval=False)

        patterns: Dict[str, List[str]] = self.rules.get("patterns") or {}
        reasons: Dict[str, str] = self.rules.get("reasons") or {}
        for risk_level in sorted(patterns, key=lambda level: -RISK_ORDER.get(level, 0)):
            for pattern in patterns[risk_level] or []:
                if re.search(pattern, command, re.IGNORECASE):
                    return ApprovalDecision(
                        needs_approval=True,
                        reason=reasons.get(risk_level, f"Matches {risk_level} risk pattern: {pattern}"),
                        risk_level=risk_level if risk_level in RISK_ORDER else "high",
                    )

        return ApprovalDecision(needs_approval=False)

    def _check_builtin_rules(self, command: str) -> ApprovalDecision:
        for pattern in HIGH_RISK_PATTERNS:
            if re.search(pattern, command, re.IGNORECASE):
                return ApprovalDecision(
                    needs_approval=True,
                    reason="Destructive or privileged operation detected",
                    risk_level="high",
                )

        for pattern in MEDIUM_RISK_PATTERNS:
            if re.search(pattern, command, re.IGNORECASE):
                return ApprovalDecision(
                    needs_approval=True,
                    reason="Network, install or service change detected",
                    risk_level="medium",
                )

        return ApprovalDecision(needs_approval=False)


def annotate_proposal(proposal: CommandProposal, decision: ApprovalDecision) -> CommandProposal:
    """Raise the proposal's risk to the checker's level and force approval when flagged."""
    if not decision.needs_approval:
        return proposal
    level = decision.risk_level if decision.risk_level in RISK_ORDER else "high"
    risk = proposal.risk
    if risk is None or RISK_ORDER[level] > RISK_ORDER[risk]:
        risk = level
    return proposal.model_copy(update={"risk": risk, "requires_approval": True})


def should_auto_approve(proposal: CommandProposal, decision: ApprovalDecision, enabled: bool) -> bool:
    """True when policy allows running the proposal without asking."""
    if not enabled:
        return False
    if proposal.requires_approval or decision.needs_approval:
        return False
    return proposal.risk != "high"
