from __future__ import annotations

from pathlib import Path
from typing import Iterable

import pandas as pd

from talentflow.domain import EmployeeWorkflow, stage_label

COLUMNS = [
    "employee_id",
    "employee_name",
    "current_stage",
    "current_stage_label",
    "overall_progress",
    "total_days_in_workflow",
    "days_in_stage",
    "is_stuck",
    "estimated_completion",
    "last_advanced_at",
]


def workflows_frame(workflows: Iterable[EmployeeWorkflow]) -> pd.DataFrame:
    records = []
    for workflow in workflows:
        step = workflow.current_step
        records.append(
            {
                "employee_id": workflow.employee_id,
                "employee_name": workflow.employee_name,
                "current_stage": workflow.current_stage.value,
                "current_stage_label": stage_label(workflow.current_stage),
                "overall_progress": workflow.overall_progress,
                "total_days_in_workflow": workflow.total_days_in_workflow,
                "days_in_stage": step.days_in_stage if step else 0,
                "is_stuck": workflow.is_stuck,
                "estimated_completion": (
                    workflow.estimated_completion.isoformat() if workflow.estimated_completion else None
                ),
                "last_advanced_at": workflow.last_advanced_at.isoformat() if workflow.last_advanced_at else None,
            }
        )
    return pd.DataFrame(records, columns=COLUMNS)


def export_workflows_csv(path: Path, workflows: Iterable[EmployeeWorkflow]) -> Path:
    df = workflows_frame(workflows)
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False)
    return path
