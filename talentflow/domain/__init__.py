"""Domain layer definitions."""

from .workflow import (
    STAGE_ORDER,
    BottleneckAction,
    BottleneckSeverity,
    EmployeeWorkflow,
    StageSummary,
    WorkflowAnalytics,
    WorkflowBottleneck,
    WorkflowSnapshot,
    WorkflowStage,
    WorkflowStep,
    WorkflowStepStatus,
    WorkflowVelocityMetrics,
    stage_label,
)

__all__ = [
    "STAGE_ORDER",
    "BottleneckAction",
    "BottleneckSeverity",
    "EmployeeWorkflow",
    "StageSummary",
    "WorkflowAnalytics",
    "WorkflowBottleneck",
    "WorkflowSnapshot",
    "WorkflowStage",
    "WorkflowStep",
    "WorkflowStepStatus",
    "WorkflowVelocityMetrics",
    "stage_label",
]
