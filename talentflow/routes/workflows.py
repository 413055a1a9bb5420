from __future__ import annotations

from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, HTTPException
from fastapi.responses import Response

from talentflow.application import get_workflow_service
from talentflow.domain import EmployeeWorkflow, WorkflowAnalytics, WorkflowBottleneck, WorkflowStage
from talentflow.exporters.workflow_csv import workflows_frame

router = APIRouter(tags=["workflow"])


def serialise_workflow(workflow: EmployeeWorkflow) -> dict[str, Any]:
    data = asdict(workflow)
    data["current_stage_label"] = workflow.current_stage.label
    return data


def serialise_bottleneck(bottleneck: WorkflowBottleneck) -> dict[str, Any]:
    return asdict(bottleneck)


def _serialise_analytics(analytics: WorkflowAnalytics) -> dict[str, Any]:
    return {
        "by_stage": {
            stage.value: {"label": stage.label, "short_label": stage.short_label, **asdict(summary)}
            for stage, summary in analytics.by_stage.items()
        },
        "bottlenecks": [serialise_bottleneck(item) for item in analytics.bottlenecks],
        "velocity": asdict(analytics.velocity),
    }


def _parse_stage(value: str) -> WorkflowStage:
    try:
        return WorkflowStage(value)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=f"unknown stage: {value}") from exc


@router.get("/workflows")
async def list_workflows() -> dict:
    service = get_workflow_service()
    snapshot = service.snapshot()
    return {
        "generated_at": snapshot.generated_at,
        "items": [serialise_workflow(workflow) for workflow in snapshot.workflows.values()],
    }


@router.post("/workflows/refresh")
async def refresh_workflows() -> dict:
    service = get_workflow_service()
    snapshot = service.refresh()
    return {"generated_at": snapshot.generated_at, "count": len(snapshot.workflows)}


@router.get("/workflows/export")
async def export_workflows() -> Response:
    service = get_workflow_service()
    frame = workflows_frame(service.list_workflows())
    return Response(
        content=frame.to_csv(index=False),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="workflows.csv"'},
    )


@router.get("/workflows/{employee_id}")
async def get_workflow(employee_id: str) -> dict:
    service = get_workflow_service()
    workflow = service.get_workflow(employee_id)
    if workflow is None:
        raise HTTPException(status_code=404, detail="workflow not found")
    return serialise_workflow(workflow)


@router.get("/workflows/{employee_id}/next-action")
async def get_next_action(employee_id: str) -> dict:
    service = get_workflow_service()
    action = service.next_action(employee_id)
    if action is None:
        raise HTTPException(status_code=404, detail="workflow not found")
    return {"employee_id": employee_id, "next_action": action}


@router.get("/stages/{stage}/workflows")
async def list_stage_workflows(stage: str) -> dict:
    parsed = _parse_stage(stage)
    service = get_workflow_service()
    items = service.list_by_stage(parsed)
    return {
        "stage": parsed.value,
        "label": parsed.label,
        "items": [serialise_workflow(workflow) for workflow in items],
    }


@router.get("/bottlenecks")
async def list_bottlenecks() -> dict:
    service = get_workflow_service()
    return {"items": [serialise_bottleneck(item) for item in service.get_bottlenecks()]}


@router.get("/velocity")
async def get_velocity() -> dict:
    service = get_workflow_service()
    return asdict(service.get_velocity())


@router.get("/analytics")
async def get_analytics() -> dict:
    service = get_workflow_service()
    return _serialise_analytics(service.get_analytics())


@router.get("/config")
async def get_config() -> dict:
    """Thresholds and advisory flags the engine is running with."""
    service = get_workflow_service()
    return service.config.model_dump()
