"""Keyed cache of derived employee workflows."""
from __future__ import annotations

import logging
import threading
from datetime import datetime
from types import MappingProxyType
from typing import Iterable, Mapping

from talentflow.core.assembler import calculate_employee_workflow
from talentflow.core.bottlenecks import detect_bottlenecks
from talentflow.core.config import WorkflowConfig
from talentflow.core.schema import DevelopmentPlan, EmployeeFact, ReviewRecord
from talentflow.core.timeutils import ensure_utc, utc_now
from talentflow.core.velocity import calculate_velocity_metrics
from talentflow.domain import (
    EmployeeWorkflow,
    WorkflowBottleneck,
    WorkflowSnapshot,
    WorkflowStage,
    WorkflowVelocityMetrics,
)

logger = logging.getLogger(__name__)


class WorkflowCache:
    """Owns the current :class:`WorkflowSnapshot`.

    ``refresh`` rebuilds every workflow from scratch and swaps the snapshot
    reference in one assignment; the previous snapshot is never patched.
    Writers serialise on a lock, readers just grab the current reference.
    """

    def __init__(self, config: WorkflowConfig | None = None) -> None:
        self._config = config or WorkflowConfig()
        self._write_lock = threading.Lock()
        self._snapshot = WorkflowSnapshot(workflows=MappingProxyType({}))

    @property
    def config(self) -> WorkflowConfig:
        return self._config

    def refresh(
        self,
        employees: Iterable[EmployeeFact],
        review_records: Mapping[str, ReviewRecord],
        plans: Mapping[str, DevelopmentPlan],
        *,
        now: datetime | None = None,
    ) -> WorkflowSnapshot:
        now = ensure_utc(now) if now is not None else utc_now()
        with self._write_lock:
            workflows: dict[str, EmployeeWorkflow] = {}
            for employee in employees:
                workflows[employee.id] = calculate_employee_workflow(
                    employee,
                    review_records.get(employee.id),
                    plans.get(employee.id),
                    now=now,
                    config=self._config,
                )
            values = list(workflows.values())
            snapshot = WorkflowSnapshot(
                workflows=MappingProxyType(workflows),
                bottlenecks=tuple(detect_bottlenecks(values, config=self._config)),
                velocity=calculate_velocity_metrics(values),
                generated_at=now,
            )
            self._snapshot = snapshot
        logger.info(
            "Workflow snapshot rebuilt employees=%s bottlenecks=%s",
            len(workflows),
            len(snapshot.bottlenecks),
        )
        return snapshot

    # ------------------------------------------------------------------
    # read accessors
    # ------------------------------------------------------------------
    def snapshot(self) -> WorkflowSnapshot:
        return self._snapshot

    def get(self, employee_id: str) -> EmployeeWorkflow | None:
        return self._snapshot.workflows.get(employee_id)

    def get_by_stage(self, stage: WorkflowStage | str) -> list[EmployeeWorkflow]:
        stage = WorkflowStage(stage)
        return [workflow for workflow in self._snapshot.workflows.values() if workflow.current_stage == stage]

    def workflows(self) -> dict[str, EmployeeWorkflow]:
        return dict(self._snapshot.workflows)

    def bottlenecks(self) -> list[WorkflowBottleneck]:
        return list(self._snapshot.bottlenecks)

    def velocity(self) -> WorkflowVelocityMetrics:
        return self._snapshot.velocity

    def clear(self) -> None:
        with self._write_lock:
            self._snapshot = WorkflowSnapshot(workflows=MappingProxyType({}))
