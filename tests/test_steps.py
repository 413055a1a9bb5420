from __future__ import annotations

from factories import NOW, completed_reviews, days_ago, employee, full_cycle_facts, plan, reviews
from talentflow.core.steps import build_steps
from talentflow.domain import STAGE_ORDER, WorkflowStage, WorkflowStepStatus, stage_label


def _statuses(steps):
    return [step.status for step in steps]


def test_new_employee_sits_in_assessment():
    steps = build_steps(employee(created_days_ago=5), now=NOW)

    assert [step.stage for step in steps] == list(STAGE_ORDER)
    assert steps[0].status == WorkflowStepStatus.CURRENT
    assert steps[0].days_in_stage == 5
    assert steps[0].started_at == days_ago(5)
    assert all(step.status == WorkflowStepStatus.UPCOMING for step in steps[1:])
    assert steps[1].blockers == ("Needs 9-box assessment",)


def test_auto_advance_flags_and_next_actions():
    steps = build_steps(employee(), now=NOW)

    assert [step.can_auto_advance for step in steps] == [False, True, True, False, True, False, False]
    assert steps[0].next_action == "Drag employee to 9-box grid position"
    assert steps[4].next_action == "Create development plan with AI assist"
    assert all(step.next_action for step in steps)


def test_self_review_clock_starts_at_assessment():
    steps = build_steps(employee(assessed_days_ago=20), now=NOW)

    assessed = steps[0]
    assert assessed.status == WorkflowStepStatus.COMPLETED
    assert assessed.completed_at == days_ago(20)
    assert assessed.days_in_stage == 0

    self_review = steps[1]
    assert self_review.status == WorkflowStepStatus.CURRENT
    assert self_review.started_at == days_ago(20)
    assert self_review.days_in_stage == 20
    assert self_review.blockers == ()

    manager = steps[2]
    assert manager.status == WorkflowStepStatus.UPCOMING
    assert manager.blockers == ("Waiting for self-review",)


def test_draft_self_review_keeps_its_date_out_of_the_timeline():
    record = reviews(self_status="draft", self_days_ago=3)
    steps = build_steps(employee(assessed_days_ago=10), record, now=NOW)

    assert steps[1].status == WorkflowStepStatus.CURRENT
    assert steps[1].completed_at is None
    assert steps[2].started_at is None


def test_calibration_uses_manager_review_as_proxy():
    steps = build_steps(employee(assessed_days_ago=40), completed_reviews(30, 20), now=NOW)

    calibrate = steps[3]
    assert calibrate.status == WorkflowStepStatus.COMPLETED
    assert calibrate.completed_at == days_ago(20)

    plan_step = steps[4]
    assert plan_step.status == WorkflowStepStatus.CURRENT
    assert plan_step.started_at == days_ago(20)
    assert plan_step.days_in_stage == 20
    assert plan_step.blockers == ()


def test_plan_younger_than_thirty_days_blocks_check_in():
    steps = build_steps(employee(assessed_days_ago=60), completed_reviews(50, 40), plan(12), now=NOW)

    execute = steps[5]
    assert execute.status == WorkflowStepStatus.UPCOMING
    assert execute.days_in_stage == 0
    assert execute.blockers == ("Plan is less than 30 days old",)
    assert steps[6].blockers == ("Needs 30-day check-in",)
    assert WorkflowStepStatus.CURRENT not in _statuses(steps)


def test_overdue_check_in_counts_days_past_the_thirty_day_mark():
    steps = build_steps(employee(assessed_days_ago=90), completed_reviews(80, 70), plan(45), now=NOW)

    execute = steps[5]
    assert execute.status == WorkflowStepStatus.CURRENT
    assert execute.started_at == days_ago(45)
    assert execute.days_in_stage == 15
    assert execute.blockers == ()


def test_missing_plan_blocks_later_stages():
    steps = build_steps(employee(assessed_days_ago=60), completed_reviews(50, 40), now=NOW)

    assert steps[5].blockers == ("Needs development plan",)
    assert steps[5].status == WorkflowStepStatus.UPCOMING
    assert steps[6].status == WorkflowStepStatus.UPCOMING


def test_full_cycle_completes_every_step():
    fact, record, dev_plan = full_cycle_facts()
    steps = build_steps(fact, record, dev_plan, now=NOW)

    assert all(status == WorkflowStepStatus.COMPLETED for status in _statuses(steps))
    assert steps[5].completed_at == days_ago(60)
    assert steps[6].started_at == days_ago(60)
    assert steps[6].completed_at is None
    assert steps[6].days_in_stage == 2


def test_only_one_step_is_current_for_out_of_order_facts():
    # reviews and an aged plan exist but the 9-box assessment is missing
    steps = build_steps(employee(assessed_days_ago=None), completed_reviews(30, 20), plan(40), now=NOW)

    statuses = _statuses(steps)
    assert statuses.count(WorkflowStepStatus.CURRENT) == 1
    assert steps[0].status == WorkflowStepStatus.CURRENT
    assert steps[3].status == WorkflowStepStatus.BLOCKED
    assert steps[4].status == WorkflowStepStatus.COMPLETED
    assert steps[5].status == WorkflowStepStatus.BLOCKED


def test_future_timestamps_never_produce_negative_days():
    fact = employee(created_days_ago=-3)
    steps = build_steps(fact, now=NOW)

    assert steps[0].days_in_stage == 0
    assert all(step.days_in_stage >= 0 for step in steps)


def test_stage_order_matches_enum():
    assert [stage.position for stage in STAGE_ORDER] == list(range(7))
    assert STAGE_ORDER[0] == WorkflowStage.ASSESS
    assert STAGE_ORDER[-1] == WorkflowStage.MONITOR_90


def test_stage_labels():
    assert WorkflowStage.CALIBRATE.label == "Calibration"
    assert WorkflowStage.MANAGER_REVIEW.short_label == "Manager"
    assert stage_label(WorkflowStage.PLAN) == "Development Plan"
    assert stage_label(None) == "Unknown"
