from __future__ import annotations

import logging

import pytest

from factories import NOW, completed_reviews, employee, full_cycle_facts, plan, reviews
from talentflow.core.config import WorkflowConfig
from talentflow.domain import WorkflowStage, WorkflowVelocityMetrics
from talentflow.infrastructure import WorkflowCache


def _facts():
    finished, finished_reviews, finished_plan = full_cycle_facts("emp-009")
    employees = [
        employee("emp-001", created_days_ago=5),
        employee("emp-002", assessed_days_ago=20),
        employee("emp-003", assessed_days_ago=40),
        finished,
    ]
    review_records = {
        "emp-002": reviews(self_status="draft"),
        "emp-003": completed_reviews(30, 20),
        "emp-009": finished_reviews,
    }
    plans = {"emp-009": finished_plan}
    return employees, review_records, plans


def test_refresh_populates_every_employee():
    cache = WorkflowCache()
    employees, review_records, plans = _facts()

    snapshot = cache.refresh(employees, review_records, plans, now=NOW)

    assert set(snapshot.workflows) == {"emp-001", "emp-002", "emp-003", "emp-009"}
    assert snapshot.generated_at == NOW
    assert cache.get("emp-002").current_stage == WorkflowStage.SELF_REVIEW
    assert cache.get("emp-003").current_stage == WorkflowStage.PLAN
    assert cache.get("missing") is None
    assert cache.velocity().completion_rate == 25


def test_get_by_stage_accepts_stage_names():
    cache = WorkflowCache()
    cache.refresh(*_facts(), now=NOW)

    by_name = cache.get_by_stage("self-review")
    by_enum = cache.get_by_stage(WorkflowStage.SELF_REVIEW)

    assert [workflow.employee_id for workflow in by_name] == ["emp-002"]
    assert by_name == by_enum
    assert cache.get_by_stage(WorkflowStage.CALIBRATE) == []
    with pytest.raises(ValueError):
        cache.get_by_stage("nowhere")


def test_refresh_with_same_inputs_is_idempotent():
    cache = WorkflowCache()
    facts = _facts()

    first = cache.refresh(*facts, now=NOW)
    second = cache.refresh(*facts, now=NOW)

    assert dict(first.workflows) == dict(second.workflows)
    assert first.bottlenecks == second.bottlenecks
    assert first.velocity == second.velocity


def test_refresh_swaps_rather_than_patches():
    cache = WorkflowCache()
    employees, review_records, plans = _facts()
    before = cache.refresh(employees, review_records, plans, now=NOW)

    cache.refresh(employees[:1], {}, {}, now=NOW)

    assert len(before.workflows) == 4
    assert set(cache.workflows()) == {"emp-001"}
    assert cache.get("emp-009") is None


def test_snapshot_mapping_is_read_only():
    cache = WorkflowCache()
    snapshot = cache.refresh(*_facts(), now=NOW)

    with pytest.raises(TypeError):
        snapshot.workflows["emp-404"] = snapshot.workflows["emp-001"]

    copied = cache.workflows()
    copied.pop("emp-001")
    assert cache.get("emp-001") is not None


def test_refresh_leaves_inputs_untouched():
    cache = WorkflowCache()
    employees, review_records, plans = _facts()
    employees_before = list(employees)
    reviews_before = dict(review_records)
    plans_before = dict(plans)

    cache.refresh(employees, review_records, plans, now=NOW)

    assert employees == employees_before
    assert review_records == reviews_before
    assert plans == plans_before


def test_empty_refresh():
    cache = WorkflowCache()

    snapshot = cache.refresh([], {}, {}, now=NOW)

    assert dict(snapshot.workflows) == {}
    assert cache.bottlenecks() == []
    assert cache.velocity() == WorkflowVelocityMetrics()


def test_clear_drops_everything():
    cache = WorkflowCache()
    cache.refresh(*_facts(), now=NOW)

    cache.clear()

    assert cache.workflows() == {}
    assert cache.snapshot().generated_at is None


def test_refresh_uses_cache_config():
    cache = WorkflowCache(WorkflowConfig(stuck_after_days=3))
    cache.refresh([employee("emp-001", assessed_days_ago=5)], {}, {}, now=NOW)

    assert cache.get("emp-001").is_stuck is True
    assert cache.config.stuck_after_days == 3


def test_refresh_logs_summary(caplog):
    cache = WorkflowCache()

    with caplog.at_level(logging.INFO, logger="talentflow.infrastructure.workflows"):
        cache.refresh([employee("emp-001")], {}, {"emp-001": plan(3)}, now=NOW)

    assert "employees=1" in caplog.text
