"""Human-in-the-loop approval policy for proposed commands."""

from .approval_checker import (
    ApprovalDecision,
    CommandApprovalChecker,
    annotate_proposal,
    should_auto_approve,
)

__all__ = ["ApprovalDecision", "CommandApprovalChecker", "annotate_proposal", "should_auto_approve"]
