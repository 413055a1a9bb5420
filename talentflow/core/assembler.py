from __future__ import annotations

from datetime import datetime, timedelta
from typing import Sequence

from talentflow.core.config import DEFAULT_CONFIG, WorkflowConfig
from talentflow.core.schema import DevelopmentPlan, EmployeeFact, ReviewRecord
from talentflow.core.stages import derive_stage_facts
from talentflow.core.steps import build_steps_from_facts
from talentflow.core.timeutils import days_since, ensure_utc, round_half_up, utc_now
from talentflow.domain import EmployeeWorkflow, WorkflowStep, WorkflowStepStatus


def _current_index(steps: Sequence[WorkflowStep]) -> int:
    for index, step in enumerate(steps):
        if step.status == WorkflowStepStatus.CURRENT:
            return index
    return len(steps) - 1


def _last_advanced_at(steps: Sequence[WorkflowStep]) -> datetime | None:
    dates = [
        step.completed_at
        for step in steps
        if step.status == WorkflowStepStatus.COMPLETED and step.completed_at is not None
    ]
    return max(dates) if dates else None


def _estimate_completion(
    steps: Sequence[WorkflowStep], current_index: int, now: datetime, config: WorkflowConfig
) -> datetime | None:
    if steps[current_index].status == WorkflowStepStatus.CURRENT:
        remaining = len(steps) - current_index - 1
    else:
        # nothing current: waiting on a plan or check-in to age
        remaining = sum(1 for step in steps if step.status != WorkflowStepStatus.COMPLETED)
    if remaining <= 0:
        return None
    return now + timedelta(days=remaining * config.days_per_remaining_step)


def assemble_workflow(
    employee: EmployeeFact,
    steps: Sequence[WorkflowStep],
    *,
    now: datetime | None = None,
    config: WorkflowConfig | None = None,
) -> EmployeeWorkflow:
    """Fold the seven steps into a single per-employee workflow record."""

    now = ensure_utc(now) if now is not None else utc_now()
    config = config or DEFAULT_CONFIG
    steps = tuple(steps)

    current_index = _current_index(steps)
    current_step = steps[current_index]
    completed = sum(1 for step in steps if step.status == WorkflowStepStatus.COMPLETED)

    first = steps[0]
    if first.status == WorkflowStepStatus.COMPLETED:
        total_days = days_since(first.completed_at, now)
    else:
        total_days = 0

    return EmployeeWorkflow(
        employee_id=employee.id,
        employee_name=employee.name,
        current_stage=current_step.stage,
        current_step_index=current_index,
        steps=steps,
        overall_progress=round_half_up(100 * completed / len(steps)),
        total_days_in_workflow=total_days,
        is_stuck=current_step.days_in_stage > config.stuck_after_days,
        estimated_completion=_estimate_completion(steps, current_index, now, config),
        last_advanced_at=_last_advanced_at(steps),
    )


def calculate_employee_workflow(
    employee: EmployeeFact,
    review_record: ReviewRecord | None = None,
    plan: DevelopmentPlan | None = None,
    *,
    now: datetime | None = None,
    config: WorkflowConfig | None = None,
) -> EmployeeWorkflow:
    now = ensure_utc(now) if now is not None else utc_now()
    facts = derive_stage_facts(employee, review_record, plan, now=now)
    steps = build_steps_from_facts(employee, facts, now=now, config=config)
    return assemble_workflow(employee, steps, now=now, config=config)
