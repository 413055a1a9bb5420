from __future__ import annotations

import pandas as pd

from factories import NOW, employee, full_cycle_facts
from talentflow.core.assembler import calculate_employee_workflow
from talentflow.exporters.workflow_csv import COLUMNS, export_workflows_csv, workflows_frame


def _workflows():
    finished = calculate_employee_workflow(*full_cycle_facts("emp-009"), now=NOW)
    fresh = calculate_employee_workflow(employee("emp-001", created_days_ago=20), now=NOW)
    return [fresh, finished]


def test_export_writes_one_row_per_workflow(tmp_path):
    target = tmp_path / "out" / "workflows.csv"

    written = export_workflows_csv(target, _workflows())

    assert written == target
    df = pd.read_csv(target)
    assert list(df.columns) == COLUMNS
    assert df["employee_id"].tolist() == ["emp-001", "emp-009"]
    assert df["current_stage"].tolist() == ["assess", "monitor-90"]
    assert df["current_stage_label"].tolist() == ["9-Box Assessment", "90-Day Review"]
    assert df["overall_progress"].tolist() == [0, 100]
    assert df["is_stuck"].tolist() == [True, False]


def test_frame_keeps_columns_when_empty():
    df = workflows_frame([])

    assert df.empty
    assert list(df.columns) == COLUMNS


def test_frame_renders_timestamps_as_iso_strings():
    df = workflows_frame(_workflows())

    assert df.loc[0, "estimated_completion"].startswith("2025-")
    assert pd.isna(df.loc[0, "last_advanced_at"])
