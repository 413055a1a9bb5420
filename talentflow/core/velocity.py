from __future__ import annotations

from typing import Iterable

from talentflow.core.timeutils import fractional_days, round_half_up
from talentflow.domain import EmployeeWorkflow, WorkflowStage, WorkflowVelocityMetrics


def average_time_to_stage(workflows: Iterable[EmployeeWorkflow], stage: WorkflowStage) -> float:
    """Mean days from the first step's start to ``stage`` completing.

    Only workflows that have reached the stage and carry both timestamps
    contribute; the rest are left out rather than counted as zero.
    """

    durations: list[float] = []
    for workflow in workflows:
        if workflow.current_step_index < stage.position:
            continue
        target = workflow.step_for(stage)
        started_at = workflow.steps[0].started_at if workflow.steps else None
        if target is None or target.completed_at is None or started_at is None:
            continue
        durations.append(fractional_days(started_at, target.completed_at))
    if not durations:
        return 0.0
    return sum(durations) / len(durations)


def calculate_velocity_metrics(workflows: Iterable[EmployeeWorkflow]) -> WorkflowVelocityMetrics:
    workflows = list(workflows)
    if not workflows:
        return WorkflowVelocityMetrics()

    completed = [workflow for workflow in workflows if workflow.overall_progress == 100]
    cycle_times = [workflow.total_days_in_workflow for workflow in completed]

    return WorkflowVelocityMetrics(
        average_time_to_assess=round_half_up(average_time_to_stage(workflows, WorkflowStage.ASSESS)),
        average_time_to_review=round_half_up(average_time_to_stage(workflows, WorkflowStage.MANAGER_REVIEW)),
        average_time_to_calibrate=round_half_up(average_time_to_stage(workflows, WorkflowStage.CALIBRATE)),
        average_time_to_plan=round_half_up(average_time_to_stage(workflows, WorkflowStage.PLAN)),
        average_complete_cycle=round_half_up(sum(cycle_times) / len(cycle_times)) if cycle_times else 0,
        completion_rate=round_half_up(100 * len(completed) / len(workflows)),
        stuck_count=sum(1 for workflow in workflows if workflow.is_stuck),
        fastest_cycle=min(cycle_times) if cycle_times else 0,
        slowest_cycle=max(cycle_times) if cycle_times else 0,
    )
