"""Domain entities for the talent-management lifecycle."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Mapping


class WorkflowStage(str, Enum):
    """The seven lifecycle stages, declared in progression order."""

    ASSESS = "assess"
    SELF_REVIEW = "self-review"
    MANAGER_REVIEW = "manager-review"
    CALIBRATE = "calibrate"
    PLAN = "plan"
    EXECUTE_30 = "execute-30"
    MONITOR_90 = "monitor-90"

    @property
    def position(self) -> int:
        return STAGE_ORDER.index(self)

    @property
    def label(self) -> str:
        return _STAGE_LABELS[self][0]

    @property
    def short_label(self) -> str:
        return _STAGE_LABELS[self][1]


STAGE_ORDER: tuple[WorkflowStage, ...] = tuple(WorkflowStage)

_STAGE_LABELS: dict[WorkflowStage, tuple[str, str]] = {
    WorkflowStage.ASSESS: ("9-Box Assessment", "Assess"),
    WorkflowStage.SELF_REVIEW: ("Self Review", "Self"),
    WorkflowStage.MANAGER_REVIEW: ("Manager Review", "Manager"),
    WorkflowStage.CALIBRATE: ("Calibration", "Calibrate"),
    WorkflowStage.PLAN: ("Development Plan", "Plan"),
    WorkflowStage.EXECUTE_30: ("30-Day Check-In", "30-Day"),
    WorkflowStage.MONITOR_90: ("90-Day Review", "90-Day"),
}


def stage_label(stage: WorkflowStage | None) -> str:
    return stage.label if stage is not None else "Unknown"


class WorkflowStepStatus(str, Enum):
    COMPLETED = "completed"
    CURRENT = "current"
    UPCOMING = "upcoming"
    BLOCKED = "blocked"
    SKIPPED = "skipped"


class BottleneckSeverity(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        """Sort key, most severe first."""

        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {
    BottleneckSeverity.CRITICAL: 0,
    BottleneckSeverity.HIGH: 1,
    BottleneckSeverity.MEDIUM: 2,
    BottleneckSeverity.LOW: 3,
}


@dataclass(frozen=True, slots=True)
class WorkflowStep:
    """State of one lifecycle stage for one employee."""

    stage: WorkflowStage
    status: WorkflowStepStatus
    started_at: datetime | None = None
    completed_at: datetime | None = None
    days_in_stage: int = 0
    blockers: tuple[str, ...] = ()
    can_auto_advance: bool = False
    next_action: str = ""


@dataclass(frozen=True, slots=True)
class EmployeeWorkflow:
    """Assembled lifecycle record for a single employee."""

    employee_id: str
    employee_name: str
    current_stage: WorkflowStage
    current_step_index: int
    steps: tuple[WorkflowStep, ...]
    overall_progress: int
    total_days_in_workflow: int
    is_stuck: bool
    estimated_completion: datetime | None = None
    last_advanced_at: datetime | None = None

    @property
    def current_step(self) -> WorkflowStep | None:
        if 0 <= self.current_step_index < len(self.steps):
            return self.steps[self.current_step_index]
        return None

    def step_for(self, stage: WorkflowStage) -> WorkflowStep | None:
        for step in self.steps:
            if step.stage == stage:
                return step
        return None


@dataclass(frozen=True, slots=True)
class BottleneckAction:
    """Advisory remediation prompt; never executed by the engine."""

    label: str
    action_type: str
    payload: dict[str, Any] = field(default_factory=dict)
    estimated_impact: str = ""


@dataclass(frozen=True, slots=True)
class WorkflowBottleneck:
    stage: WorkflowStage
    employee_count: int
    average_days_stuck: int
    severity: BottleneckSeverity
    affected_employees: tuple[str, ...]
    suggested_actions: tuple[BottleneckAction, ...]
    impact_description: str


@dataclass(frozen=True, slots=True)
class WorkflowVelocityMetrics:
    """Organisation-wide timing snapshot, durations in whole days."""

    average_time_to_assess: int = 0
    average_time_to_review: int = 0
    average_time_to_calibrate: int = 0
    average_time_to_plan: int = 0
    average_complete_cycle: int = 0
    completion_rate: int = 0
    stuck_count: int = 0
    fastest_cycle: int = 0
    slowest_cycle: int = 0


@dataclass(frozen=True, slots=True)
class StageSummary:
    count: int
    average_days_in_stage: int
    completion_rate: int


@dataclass(frozen=True, slots=True)
class WorkflowAnalytics:
    by_stage: Mapping[WorkflowStage, StageSummary]
    bottlenecks: tuple[WorkflowBottleneck, ...]
    velocity: WorkflowVelocityMetrics


@dataclass(frozen=True, slots=True)
class WorkflowSnapshot:
    """Immutable result of one cache refresh."""

    workflows: Mapping[str, EmployeeWorkflow]
    bottlenecks: tuple[WorkflowBottleneck, ...] = ()
    velocity: WorkflowVelocityMetrics = field(default_factory=WorkflowVelocityMetrics)
    generated_at: datetime | None = None
