from __future__ import annotations

from factories import NOW, completed_reviews, employee, full_cycle_facts, plan
from talentflow.core.assembler import calculate_employee_workflow
from talentflow.core.velocity import average_time_to_stage, calculate_velocity_metrics
from talentflow.domain import WorkflowStage, WorkflowVelocityMetrics


def _completed(employee_id: str, assessed_days_ago: float):
    fact, record, dev_plan = full_cycle_facts(employee_id, assessed_days_ago=assessed_days_ago)
    return calculate_employee_workflow(fact, record, dev_plan, now=NOW)


def test_no_workflows_yields_zeroes():
    metrics = calculate_velocity_metrics([])

    assert metrics == WorkflowVelocityMetrics()
    assert metrics.completion_rate == 0


def test_completed_cycle_feeds_cycle_statistics():
    workflows = [
        _completed("emp-001", 95),
        _completed("emp-002", 110),
        calculate_employee_workflow(employee("emp-003", created_days_ago=5), now=NOW),
        calculate_employee_workflow(employee("emp-004", assessed_days_ago=30), now=NOW),
    ]

    metrics = calculate_velocity_metrics(workflows)

    assert metrics.completion_rate == 50
    assert metrics.average_complete_cycle == 103
    assert metrics.fastest_cycle == 95
    assert metrics.slowest_cycle == 110
    assert metrics.stuck_count == 1


def test_time_to_stage_excludes_workflows_that_never_got_there():
    workflows = [
        _completed("emp-001", 95),
        calculate_employee_workflow(employee("emp-002", created_days_ago=5), now=NOW),
    ]

    metrics = calculate_velocity_metrics(workflows)

    # created 120 days ago; assessed 95, manager review 93, plan 92 days ago
    assert metrics.average_time_to_assess == 25
    assert metrics.average_time_to_review == 27
    assert metrics.average_time_to_calibrate == 27
    assert metrics.average_time_to_plan == 28


def test_average_time_to_stage_over_partial_progress():
    workflows = [
        calculate_employee_workflow(
            employee("emp-001", created_days_ago=50, assessed_days_ago=40), completed_reviews(30, 20), now=NOW
        ),
        calculate_employee_workflow(
            employee("emp-002", created_days_ago=50, assessed_days_ago=20), completed_reviews(10, 5), plan(2), now=NOW
        ),
    ]

    assert average_time_to_stage(workflows, WorkflowStage.ASSESS) == 20
    assert average_time_to_stage(workflows, WorkflowStage.MANAGER_REVIEW) == 37.5
    assert average_time_to_stage(workflows, WorkflowStage.PLAN) == 48
    assert calculate_velocity_metrics(workflows).average_time_to_review == 38


def test_completion_rate_rounds_half_up():
    workflows = [_completed("emp-000", 95)] + [
        calculate_employee_workflow(employee(f"emp-{index:03d}", created_days_ago=2), now=NOW)
        for index in range(1, 8)
    ]

    assert calculate_velocity_metrics(workflows).completion_rate == 13


def test_nothing_completed_keeps_cycle_bounds_at_zero():
    workflows = [calculate_employee_workflow(employee(f"emp-{index}", created_days_ago=20), now=NOW) for index in range(3)]

    metrics = calculate_velocity_metrics(workflows)

    assert metrics.completion_rate == 0
    assert metrics.fastest_cycle == 0
    assert metrics.slowest_cycle == 0
    assert metrics.average_complete_cycle == 0
    assert metrics.stuck_count == 3
