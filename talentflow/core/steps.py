"""Expand employee facts into the seven annotated lifecycle steps."""
from __future__ import annotations

import math
from dataclasses import dataclass, replace
from datetime import datetime

from talentflow.core.config import DEFAULT_CONFIG, WorkflowConfig
from talentflow.core.schema import DevelopmentPlan, EmployeeFact, ReviewRecord
from talentflow.core.stages import StageFacts, derive_stage_facts
from talentflow.core.timeutils import days_since, ensure_utc, utc_now
from talentflow.domain import WorkflowStage, WorkflowStep, WorkflowStepStatus


@dataclass(frozen=True, slots=True)
class StepDefinition:
    next_action: str
    can_auto_advance: bool = False


STEP_DEFINITIONS: dict[WorkflowStage, StepDefinition] = {
    WorkflowStage.ASSESS: StepDefinition("Drag employee to 9-box grid position"),
    WorkflowStage.SELF_REVIEW: StepDefinition("Send self-review invitation to employee", can_auto_advance=True),
    WorkflowStage.MANAGER_REVIEW: StepDefinition("Complete manager performance review", can_auto_advance=True),
    WorkflowStage.CALIBRATE: StepDefinition("Review in calibration session"),
    WorkflowStage.PLAN: StepDefinition("Create development plan with AI assist", can_auto_advance=True),
    WorkflowStage.EXECUTE_30: StepDefinition("Conduct 30-day progress check-in"),
    WorkflowStage.MONITOR_90: StepDefinition("Complete 90-day progress review"),
}


def _make_step(
    stage: WorkflowStage,
    *,
    completed: bool,
    ready: bool,
    started_at: datetime | None,
    completed_at: datetime | None,
    days_in_stage: int,
    blockers: tuple[str, ...] = (),
) -> WorkflowStep:
    if completed:
        status = WorkflowStepStatus.COMPLETED
    elif ready:
        status = WorkflowStepStatus.CURRENT
    else:
        status = WorkflowStepStatus.UPCOMING
    definition = STEP_DEFINITIONS[stage]
    return WorkflowStep(
        stage=stage,
        status=status,
        started_at=started_at,
        completed_at=completed_at,
        days_in_stage=days_in_stage,
        blockers=blockers,
        can_auto_advance=definition.can_auto_advance,
        next_action=definition.next_action,
    )


def _single_current(steps: list[WorkflowStep]) -> tuple[WorkflowStep, ...]:
    """Keep the earliest ``current`` step; later candidates wait on it."""

    seen_current = False
    normalised: list[WorkflowStep] = []
    for step in steps:
        if step.status == WorkflowStepStatus.CURRENT:
            if seen_current:
                step = replace(step, status=WorkflowStepStatus.BLOCKED)
            seen_current = True
        normalised.append(step)
    return tuple(normalised)


def build_steps_from_facts(
    employee: EmployeeFact,
    facts: StageFacts,
    *,
    now: datetime,
    config: WorkflowConfig | None = None,
) -> tuple[WorkflowStep, ...]:
    config = config or DEFAULT_CONFIG

    execute_due = facts.has_plan and facts.plan_age_days >= config.execute_after_days
    monitor_due = facts.has_plan and facts.plan_age_days >= config.monitor_after_days
    has_ninety_day_review = monitor_due and facts.has_check_in

    if not facts.has_plan:
        execute_blockers: tuple[str, ...] = ("Needs development plan",)
    elif facts.plan_age_days < config.execute_after_days:
        execute_blockers = (f"Plan is less than {config.execute_after_days} days old",)
    else:
        execute_blockers = ()

    steps = [
        _make_step(
            WorkflowStage.ASSESS,
            completed=facts.has_assessment,
            ready=True,
            started_at=employee.created_at,
            completed_at=facts.assessment_date,
            days_in_stage=0 if facts.has_assessment else days_since(employee.created_at, now),
        ),
        _make_step(
            WorkflowStage.SELF_REVIEW,
            completed=facts.has_self_review,
            ready=facts.has_assessment,
            started_at=facts.assessment_date,
            completed_at=facts.self_review_date,
            days_in_stage=0 if facts.has_self_review else days_since(facts.assessment_date, now),
            blockers=() if facts.has_assessment else ("Needs 9-box assessment",),
        ),
        _make_step(
            WorkflowStage.MANAGER_REVIEW,
            completed=facts.has_manager_review,
            ready=facts.has_self_review,
            started_at=facts.self_review_date,
            completed_at=facts.manager_review_date,
            days_in_stage=0 if facts.has_manager_review else days_since(facts.self_review_date, now),
            blockers=() if facts.has_self_review else ("Waiting for self-review",),
        ),
        _make_step(
            WorkflowStage.CALIBRATE,
            completed=facts.is_calibrated,
            ready=facts.has_manager_review,
            started_at=facts.manager_review_date,
            completed_at=facts.calibration_date,
            days_in_stage=0 if facts.is_calibrated else days_since(facts.manager_review_date, now),
            blockers=() if facts.has_manager_review else ("Waiting for manager review",),
        ),
        _make_step(
            WorkflowStage.PLAN,
            completed=facts.has_plan,
            ready=facts.is_calibrated,
            started_at=facts.calibration_date,
            completed_at=facts.plan_date,
            days_in_stage=0 if facts.has_plan else days_since(facts.calibration_date, now),
            blockers=() if facts.is_calibrated else ("Waiting for calibration",),
        ),
        _make_step(
            WorkflowStage.EXECUTE_30,
            completed=facts.has_check_in,
            ready=execute_due,
            started_at=facts.plan_date,
            completed_at=facts.check_in_date,
            days_in_stage=(
                math.floor(facts.plan_age_days - config.execute_after_days)
                if execute_due and not facts.has_check_in
                else 0
            ),
            blockers=execute_blockers,
        ),
        _make_step(
            WorkflowStage.MONITOR_90,
            completed=has_ninety_day_review,
            ready=has_ninety_day_review,
            started_at=facts.check_in_date,
            completed_at=None,
            days_in_stage=math.floor(facts.plan_age_days - config.monitor_after_days) if monitor_due else 0,
            blockers=() if facts.has_check_in else ("Needs 30-day check-in",),
        ),
    ]
    return _single_current(steps)


def build_steps(
    employee: EmployeeFact,
    review_record: ReviewRecord | None = None,
    plan: DevelopmentPlan | None = None,
    *,
    now: datetime | None = None,
    config: WorkflowConfig | None = None,
) -> tuple[WorkflowStep, ...]:
    """Return all seven lifecycle steps for ``employee`` in stage order."""

    now = ensure_utc(now) if now is not None else utc_now()
    facts = derive_stage_facts(employee, review_record, plan, now=now)
    return build_steps_from_facts(employee, facts, now=now, config=config)
