from __future__ import annotations

from fastapi import APIRouter, HTTPException

from talentflow.application import get_workflow_service
from talentflow.core.schema import DevelopmentPlan, EmployeeFact, ReviewRecord
from talentflow.routes.workflows import serialise_workflow

router = APIRouter(prefix="/employees", tags=["employees"])


@router.get("")
async def list_employees() -> dict:
    service = get_workflow_service()
    return {"items": [employee.model_dump(mode="json") for employee in service.list_employees()]}


@router.post("")
async def register_employee(employee: EmployeeFact) -> dict:
    service = get_workflow_service()
    workflow = service.register_employee(employee)
    return {
        "employee_id": employee.id,
        "workflow": serialise_workflow(workflow) if workflow else None,
    }


@router.put("/{employee_id}/reviews")
async def record_reviews(employee_id: str, record: ReviewRecord) -> dict:
    service = get_workflow_service()
    try:
        workflow = service.record_reviews(employee_id, record)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="employee not found") from exc
    return {
        "employee_id": employee_id,
        "workflow": serialise_workflow(workflow) if workflow else None,
    }


@router.put("/{employee_id}/plan")
async def record_plan(employee_id: str, plan: DevelopmentPlan) -> dict:
    service = get_workflow_service()
    try:
        workflow = service.record_plan(employee_id, plan)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="employee not found") from exc
    return {
        "employee_id": employee_id,
        "workflow": serialise_workflow(workflow) if workflow else None,
    }
