"""Application service layer for the talent workflow orchestrator."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from talentflow.core.analytics import build_stage_analytics, get_next_action
from talentflow.core.config import WorkflowConfig, load_workflow_config
from talentflow.core.schema import DevelopmentPlan, EmployeeFact, ReviewRecord
from talentflow.core.timeutils import utc_now
from talentflow.domain import (
    EmployeeWorkflow,
    WorkflowAnalytics,
    WorkflowBottleneck,
    WorkflowSnapshot,
    WorkflowStage,
    WorkflowVelocityMetrics,
)
from talentflow.infrastructure import FactRepository, InMemoryFactRepository, WorkflowCache

logger = logging.getLogger(__name__)


class WorkflowService:
    """Keeps the workflow cache in step with the stored employee facts."""

    def __init__(
        self,
        repository: FactRepository,
        cache: WorkflowCache,
        *,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._repository = repository
        self._cache = cache
        self._clock = clock

    @property
    def config(self) -> WorkflowConfig:
        return self._cache.config

    # ------------------------------------------------------------------
    # fact ingestion
    # ------------------------------------------------------------------
    def register_employee(self, employee: EmployeeFact) -> EmployeeWorkflow | None:
        self._repository.upsert_employee(employee)
        logger.info("Employee registered id=%s", employee.id)
        self.refresh()
        return self._cache.get(employee.id)

    def list_employees(self) -> list[EmployeeFact]:
        return self._repository.list_employees()

    def record_reviews(self, employee_id: str, record: ReviewRecord) -> EmployeeWorkflow | None:
        self._repository.save_review_record(employee_id, record)
        logger.info("Review record saved employee=%s", employee_id)
        self.refresh()
        return self._cache.get(employee_id)

    def record_plan(self, employee_id: str, plan: DevelopmentPlan) -> EmployeeWorkflow | None:
        self._repository.save_plan(employee_id, plan)
        logger.info("Development plan saved employee=%s", employee_id)
        self.refresh()
        return self._cache.get(employee_id)

    # ------------------------------------------------------------------
    # recomputation
    # ------------------------------------------------------------------
    def refresh(self, now: datetime | None = None) -> WorkflowSnapshot:
        return self._cache.refresh(
            self._repository.list_employees(),
            self._repository.review_records(),
            self._repository.plans(),
            now=now or self._clock(),
        )

    # ------------------------------------------------------------------
    # queries
    # ------------------------------------------------------------------
    def get_workflow(self, employee_id: str) -> EmployeeWorkflow | None:
        return self._cache.get(employee_id)

    def list_workflows(self) -> list[EmployeeWorkflow]:
        return list(self._cache.workflows().values())

    def list_by_stage(self, stage: WorkflowStage | str) -> list[EmployeeWorkflow]:
        return self._cache.get_by_stage(stage)

    def next_action(self, employee_id: str) -> str | None:
        workflow = self._cache.get(employee_id)
        return get_next_action(workflow) if workflow else None

    def get_bottlenecks(self) -> list[WorkflowBottleneck]:
        return self._cache.bottlenecks()

    def get_velocity(self) -> WorkflowVelocityMetrics:
        return self._cache.velocity()

    def get_analytics(self) -> WorkflowAnalytics:
        return build_stage_analytics(self.list_workflows(), config=self.config)

    def snapshot(self) -> WorkflowSnapshot:
        return self._cache.snapshot()

    # ------------------------------------------------------------------
    # testing helpers
    # ------------------------------------------------------------------
    def reset(self) -> None:
        self._repository.reset()
        self._cache.clear()


_repository = InMemoryFactRepository()
_service = WorkflowService(_repository, WorkflowCache(load_workflow_config()))


def get_workflow_service() -> WorkflowService:
    """Return the singleton workflow service for the process."""

    return _service


def reset_workflow_state() -> None:
    """Reset the in-memory store (used in tests)."""

    _service.reset()
