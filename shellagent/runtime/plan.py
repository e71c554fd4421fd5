"""Per-session plan checklist with a cursor on the step in flight."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from shellagent.protocol.base import PlanStep, StepStatus
from shellagent.protocol.events import PlanUpdatedEvent, plan_id_for

LOGGER = logging.getLogger("shellagent.plan")


@dataclass
class _SessionPlan:
    steps: List[PlanStep] = field(default_factory=list)
    cursor: int = 0


class PlanTracker:
    """Plan steps and cursor keyed by session id.

    Every mutation re-emits the full ordered step list as ``plan_updated``.
    Plans are short, so consumers never have to apply diffs.

    Args:
        emit: Event sink receiving ``PlanUpdatedEvent``
    """

    def __init__(self, emit: Callable[[PlanUpdatedEvent], None]):
        self._emit = emit
        self._plans: Dict[str, _SessionPlan] = {}

    def _plan(self, session_id: str) -> _SessionPlan:
        return self._plans.setdefault(session_id, _SessionPlan())

    def _publish(self, session_id: str) -> None:
        steps = [step.model_copy() for step in self._plan(session_id).steps]
        self._emit(PlanUpdatedEvent(session_id=session_id, plan_id=plan_id_for(session_id), steps=steps))

    def adopt(self, session_id: str, descriptions: List[str]) -> None:
        """Replace the plan wholesale; all steps pending, cursor back to 0."""
        plan = self._plan(session_id)
        plan.steps = [PlanStep(id=str(uuid.uuid4()), description=text) for text in descriptions]
        plan.cursor = 0
        LOGGER.info(f"[{session_id[:8]}] Adopted plan with {len(plan.steps)} step(s)")
        self._publish(session_id)

    def append(self, session_id: str, step_id: str, description: str) -> None:
        self._plan(session_id).steps.append(PlanStep(id=step_id, description=description))
        self._publish(session_id)

    def set_status(self, session_id: str, step_id: str, status: StepStatus) -> None:
        plan = self._plans.get(session_id)
        if plan is None or not plan.steps:
            return
        for step in plan.steps:
            if step.id == step_id:
                step.status = status
        self._publish(session_id)

    def advance_cursor(self, session_id: str, status: StepStatus) -> None:
        """Apply ``status`` to the cursor step; move the cursor on ``done``.

        The cursor step is clamped to the last index, and the cursor itself
        never passes the plan length.
        """
        plan = self._plans.get(session_id)
        if plan is None or not plan.steps:
            return
        index = min(plan.cursor, len(plan.steps) - 1)
        plan.steps[index].status = status
        if status == "done":
            plan.cursor = min(plan.cursor + 1, len(plan.steps))
        self._publish(session_id)

    def reset(self, session_id: str) -> None:
        """Start an empty plan for the session and publish it."""
        self._plans[session_id] = _SessionPlan()
        self._publish(session_id)

    def steps(self, session_id: str) -> List[PlanStep]:
        plan = self._plans.get(session_id)
        return [step.model_copy() for step in plan.steps] if plan else []

    def cursor(self, session_id: str) -> int:
        plan = self._plans.get(session_id)
        return plan.cursor if plan else 0

    def is_empty(self, session_id: str) -> bool:
        plan = self._plans.get(session_id)
        return plan is None or not plan.steps

    def get_step(self, session_id: str, step_id: str) -> Optional[PlanStep]:
        for step in self.steps(session_id):
            if step.id == step_id:
                return step
        return None

    def clear(self, session_id: str) -> None:
        self._plans.pop(session_id, None)
