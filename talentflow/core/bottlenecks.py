"""Population-level bottleneck detection over assembled workflows.

Workflows are grouped by their current stage.  A stage is flagged when too
many employees sit in it or when they have been there too long on average;
each flagged stage carries advisory remediation prompts that consumers may
surface.  Nothing here executes those prompts.
"""
from __future__ import annotations

import logging
from collections import defaultdict
from typing import Iterable

from talentflow.core.config import DEFAULT_CONFIG, BottleneckThresholds, WorkflowConfig
from talentflow.core.timeutils import round_half_up
from talentflow.domain import (
    BottleneckAction,
    BottleneckSeverity,
    EmployeeWorkflow,
    WorkflowBottleneck,
    WorkflowStage,
)

logger = logging.getLogger(__name__)


def classify_severity(
    employee_count: int, average_days: float, thresholds: BottleneckThresholds
) -> BottleneckSeverity:
    if employee_count >= thresholds.critical_employees or average_days > thresholds.critical_average_days:
        return BottleneckSeverity.CRITICAL
    if employee_count >= thresholds.high_employees or average_days > thresholds.high_average_days:
        return BottleneckSeverity.HIGH
    if employee_count >= thresholds.min_employees or average_days > thresholds.min_average_days:
        return BottleneckSeverity.MEDIUM
    return BottleneckSeverity.LOW


def is_bottleneck(employee_count: int, average_days: float, thresholds: BottleneckThresholds) -> bool:
    return employee_count >= thresholds.min_employees or average_days > thresholds.min_average_days


def suggested_actions(stage: WorkflowStage, employee_count: int) -> tuple[BottleneckAction, ...]:
    if stage == WorkflowStage.ASSESS:
        return (
            BottleneckAction(
                label=f"Review {employee_count} unassessed employees",
                action_type="view-list",
                payload={"stage": stage.value},
                estimated_impact="Place all on 9-box in 1-2 hours",
            ),
        )
    if stage == WorkflowStage.SELF_REVIEW:
        return (
            BottleneckAction(
                label=f"Send reminder to {employee_count} employees",
                action_type="bulk-remind",
                payload={"stage": stage.value, "recipientType": "employee"},
                estimated_impact="Get 70% completion in 3-5 days",
            ),
        )
    if stage == WorkflowStage.MANAGER_REVIEW:
        return (
            BottleneckAction(
                label=f"Remind {employee_count} managers",
                action_type="bulk-remind",
                payload={"stage": stage.value, "recipientType": "manager"},
                estimated_impact="Clear bottleneck in 2-3 days",
            ),
            BottleneckAction(
                label="Escalate to VP HR",
                action_type="escalate",
                payload={"stage": stage.value},
                estimated_impact="Executive visibility on delays",
            ),
        )
    if stage == WorkflowStage.CALIBRATE:
        return (
            BottleneckAction(
                label="Schedule calibration session",
                action_type="schedule-session",
                payload={"employeeCount": employee_count},
                estimated_impact="Calibrate all in one 2-hour session",
            ),
        )
    if stage == WorkflowStage.PLAN:
        return (
            BottleneckAction(
                label=f"AI draft {employee_count} plans",
                action_type="auto-draft",
                payload={"stage": stage.value, "employeeCount": employee_count},
                estimated_impact="Generate drafts in 5 minutes",
            ),
            BottleneckAction(
                label="View employees needing plans",
                action_type="view-list",
                payload={"stage": stage.value},
                estimated_impact="Create plans individually",
            ),
        )
    if stage == WorkflowStage.EXECUTE_30:
        return (
            BottleneckAction(
                label=f"View {employee_count} employees due for check-in",
                action_type="view-list",
                payload={"stage": stage.value},
                estimated_impact="Schedule 1:1s to review progress",
            ),
        )
    return (
        BottleneckAction(
            label=f"Review {employee_count} 90-day milestones",
            action_type="view-list",
            payload={"stage": stage.value},
            estimated_impact="Complete progress reviews",
        ),
    )


def impact_description(stage: WorkflowStage, employee_count: int, average_days: float) -> str:
    days = round_half_up(average_days)
    descriptions = {
        WorkflowStage.ASSESS: f"{employee_count} employees cannot begin review cycle until assessed",
        WorkflowStage.SELF_REVIEW: f"{employee_count} employees waiting to provide input, averaging {days} days",
        WorkflowStage.MANAGER_REVIEW: (
            f"{employee_count} employees blocked from calibration, averaging {days} days stuck"
        ),
        WorkflowStage.CALIBRATE: f"{employee_count} employees cannot receive development plans until calibrated",
        WorkflowStage.PLAN: f"{employee_count} employees at risk of disengagement without clear development path",
        WorkflowStage.EXECUTE_30: f"{employee_count} employees missing crucial 30-day check-ins, momentum at risk",
        WorkflowStage.MONITOR_90: f"{employee_count} employees overdue for progress reviews",
    }
    return descriptions.get(stage, f"{employee_count} employees stuck at {stage.value} stage")


def _days_in_current_step(workflow: EmployeeWorkflow) -> int:
    step = workflow.current_step
    return step.days_in_stage if step is not None else 0


def detect_bottlenecks(
    workflows: Iterable[EmployeeWorkflow],
    *,
    config: WorkflowConfig | None = None,
) -> list[WorkflowBottleneck]:
    """Return flagged stages ordered most severe first."""

    thresholds = (config or DEFAULT_CONFIG).bottleneck

    by_stage: dict[WorkflowStage, list[EmployeeWorkflow]] = defaultdict(list)
    for workflow in workflows:
        by_stage[workflow.current_stage].append(workflow)

    bottlenecks: list[WorkflowBottleneck] = []
    for stage, members in by_stage.items():
        employee_count = len(members)
        average_days = sum(_days_in_current_step(member) for member in members) / employee_count
        if not is_bottleneck(employee_count, average_days, thresholds):
            continue

        severity = classify_severity(employee_count, average_days, thresholds)
        logger.debug(
            "Bottleneck at stage=%s employees=%s average_days=%.1f severity=%s",
            stage.value,
            employee_count,
            average_days,
            severity.value,
        )
        bottlenecks.append(
            WorkflowBottleneck(
                stage=stage,
                employee_count=employee_count,
                average_days_stuck=round_half_up(average_days),
                severity=severity,
                affected_employees=tuple(sorted(member.employee_id for member in members)),
                suggested_actions=suggested_actions(stage, employee_count),
                impact_description=impact_description(stage, employee_count, average_days),
            )
        )

    bottlenecks.sort(key=lambda item: (item.severity.rank, item.stage.position))
    return bottlenecks
