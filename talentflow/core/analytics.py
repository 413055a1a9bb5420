from __future__ import annotations

from typing import Iterable

from talentflow.core.bottlenecks import detect_bottlenecks
from talentflow.core.config import WorkflowConfig
from talentflow.core.timeutils import round_half_up
from talentflow.core.velocity import calculate_velocity_metrics
from talentflow.domain import (
    STAGE_ORDER,
    EmployeeWorkflow,
    StageSummary,
    WorkflowAnalytics,
    WorkflowStage,
    WorkflowStepStatus,
)


def should_auto_advance(workflow: EmployeeWorkflow, completed_stage: WorkflowStage) -> bool:
    """Whether finishing ``completed_stage`` may trigger the next one unattended."""

    step = workflow.step_for(completed_stage)
    return bool(step and step.can_auto_advance)


def get_next_action(workflow: EmployeeWorkflow) -> str:
    step = workflow.current_step
    return step.next_action if step and step.next_action else "Continue workflow"


def summarise_stages(workflows: Iterable[EmployeeWorkflow]) -> dict[WorkflowStage, StageSummary]:
    workflows = list(workflows)
    total = len(workflows)
    summary: dict[WorkflowStage, StageSummary] = {}
    for stage in STAGE_ORDER:
        members = [workflow for workflow in workflows if workflow.current_stage == stage]
        days = [member.current_step.days_in_stage if member.current_step else 0 for member in members]
        completed = sum(
            1
            for workflow in workflows
            if workflow.steps[stage.position].status == WorkflowStepStatus.COMPLETED
        )
        summary[stage] = StageSummary(
            count=len(members),
            average_days_in_stage=round_half_up(sum(days) / len(days)) if days else 0,
            completion_rate=round_half_up(100 * completed / total) if total else 0,
        )
    return summary


def build_stage_analytics(
    workflows: Iterable[EmployeeWorkflow],
    *,
    config: WorkflowConfig | None = None,
) -> WorkflowAnalytics:
    """Per-stage distribution plus the bottleneck and velocity reports."""

    workflows = list(workflows)
    return WorkflowAnalytics(
        by_stage=summarise_stages(workflows),
        bottlenecks=tuple(detect_bottlenecks(workflows, config=config)),
        velocity=calculate_velocity_metrics(workflows),
    )
