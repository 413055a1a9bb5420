"""Resolve the lifecycle stage an employee currently sits in.

Resolution works on a small frozen :class:`StageFacts` record derived from the
raw employee, review and plan facts.  The rules are evaluated top to bottom and
the first predicate that matches names the stage, so the ordering below is the
whole state machine.  The step builder derives its per-stage completion flags
from the same record, which keeps both views consistent.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from talentflow.core.config import DEFAULT_CONFIG, WorkflowConfig
from talentflow.core.schema import DevelopmentPlan, EmployeeFact, ReviewRecord, ReviewSubmission
from talentflow.core.timeutils import ensure_utc, fractional_days, utc_now
from talentflow.domain import WorkflowStage

SELF_REVIEW_DONE_STATUSES = frozenset({"submitted", "completed"})
MANAGER_REVIEW_DONE_STATUSES = frozenset({"completed"})


@dataclass(frozen=True, slots=True)
class StageFacts:
    """Boolean and temporal facts the lifecycle is decided on."""

    has_assessment: bool
    assessment_date: datetime | None
    has_self_review: bool
    self_review_date: datetime | None
    has_manager_review: bool
    manager_review_date: datetime | None
    has_plan: bool
    plan_date: datetime | None
    plan_age_days: float
    has_check_in: bool
    check_in_date: datetime | None

    @property
    def is_calibrated(self) -> bool:
        # calibration sessions are not tracked; both reviews plus the
        # assessment stand in for it
        return self.has_assessment and self.has_self_review and self.has_manager_review

    @property
    def calibration_date(self) -> datetime | None:
        return self.manager_review_date


def _review_done(submission: ReviewSubmission | None, statuses: frozenset[str]) -> bool:
    return submission is not None and submission.status in statuses


def derive_stage_facts(
    employee: EmployeeFact,
    review_record: ReviewRecord | None = None,
    plan: DevelopmentPlan | None = None,
    *,
    now: datetime | None = None,
) -> StageFacts:
    now = ensure_utc(now) if now is not None else utc_now()

    assessment = employee.assessment
    self_review = review_record.self_review if review_record else None
    manager_review = review_record.manager if review_record else None

    has_self_review = _review_done(self_review, SELF_REVIEW_DONE_STATUSES)
    has_manager_review = _review_done(manager_review, MANAGER_REVIEW_DONE_STATUSES)

    plan_date = plan.created_at if plan else None
    plan_age_days = fractional_days(plan_date, now) if plan_date else 0.0
    has_check_in = bool(
        plan
        and plan.last_reviewed is not None
        and plan_date is not None
        and plan.last_reviewed > plan_date
    )

    return StageFacts(
        has_assessment=assessment is not None,
        assessment_date=assessment.assessed_at if assessment else None,
        has_self_review=has_self_review,
        self_review_date=self_review.submitted_at if has_self_review and self_review else None,
        has_manager_review=has_manager_review,
        manager_review_date=manager_review.submitted_at if has_manager_review and manager_review else None,
        has_plan=plan is not None,
        plan_date=plan_date,
        plan_age_days=plan_age_days,
        has_check_in=has_check_in,
        check_in_date=plan.last_reviewed if has_check_in and plan else None,
    )


StageRule = tuple[Callable[[StageFacts, WorkflowConfig], bool], WorkflowStage]

STAGE_RULES: tuple[StageRule, ...] = (
    (lambda facts, _: not facts.has_assessment, WorkflowStage.ASSESS),
    (lambda facts, _: not facts.has_self_review, WorkflowStage.SELF_REVIEW),
    (lambda facts, _: not facts.has_manager_review, WorkflowStage.MANAGER_REVIEW),
    # unreachable once the three rules above pass; kept so calibration can
    # gain its own predicate without reordering the chain
    (lambda facts, _: not facts.is_calibrated, WorkflowStage.CALIBRATE),
    (lambda facts, _: not facts.has_plan, WorkflowStage.PLAN),
    (
        lambda facts, config: facts.plan_age_days >= config.execute_after_days and not facts.has_check_in,
        WorkflowStage.EXECUTE_30,
    ),
)


def stage_from_facts(facts: StageFacts, config: WorkflowConfig | None = None) -> WorkflowStage:
    config = config or DEFAULT_CONFIG
    for predicate, stage in STAGE_RULES:
        if predicate(facts, config):
            return stage
    return WorkflowStage.MONITOR_90


def resolve_stage(
    employee: EmployeeFact,
    review_record: ReviewRecord | None = None,
    plan: DevelopmentPlan | None = None,
    *,
    now: datetime | None = None,
    config: WorkflowConfig | None = None,
) -> WorkflowStage:
    """Return the stage the employee currently sits in. Never raises."""

    facts = derive_stage_facts(employee, review_record, plan, now=now)
    return stage_from_facts(facts, config)
