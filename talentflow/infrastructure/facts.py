"""Infrastructure layer for the employee facts the engine reads."""
from __future__ import annotations

from typing import Protocol

from talentflow.core.schema import DevelopmentPlan, EmployeeFact, ReviewRecord


class FactRepository(Protocol):
    """Storage contract for employees, review records and plans."""

    def upsert_employee(self, employee: EmployeeFact) -> None: ...

    def get_employee(self, employee_id: str) -> EmployeeFact | None: ...

    def list_employees(self) -> list[EmployeeFact]: ...

    def save_review_record(self, employee_id: str, record: ReviewRecord) -> None: ...

    def review_records(self) -> dict[str, ReviewRecord]: ...

    def save_plan(self, employee_id: str, plan: DevelopmentPlan) -> None: ...

    def plans(self) -> dict[str, DevelopmentPlan]: ...

    def reset(self) -> None: ...


class InMemoryFactRepository:
    """Simple in-memory repository for fast iteration and tests."""

    def __init__(self) -> None:
        self._employees: dict[str, EmployeeFact] = {}
        self._reviews: dict[str, ReviewRecord] = {}
        self._plans: dict[str, DevelopmentPlan] = {}

    def _require_employee(self, employee_id: str) -> None:
        if employee_id not in self._employees:
            raise KeyError(employee_id)

    # ------------------------------------------------------------------
    # employees
    # ------------------------------------------------------------------
    def upsert_employee(self, employee: EmployeeFact) -> None:
        self._employees[employee.id] = employee

    def get_employee(self, employee_id: str) -> EmployeeFact | None:
        return self._employees.get(employee_id)

    def list_employees(self) -> list[EmployeeFact]:
        return list(self._employees.values())

    # ------------------------------------------------------------------
    # reviews & plans
    # ------------------------------------------------------------------
    def save_review_record(self, employee_id: str, record: ReviewRecord) -> None:
        self._require_employee(employee_id)
        self._reviews[employee_id] = record

    def review_records(self) -> dict[str, ReviewRecord]:
        return dict(self._reviews)

    def save_plan(self, employee_id: str, plan: DevelopmentPlan) -> None:
        self._require_employee(employee_id)
        self._plans[employee_id] = plan

    def plans(self) -> dict[str, DevelopmentPlan]:
        return dict(self._plans)

    def reset(self) -> None:
        self._employees.clear()
        self._reviews.clear()
        self._plans.clear()
