from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from talentflow.core.timeutils import ensure_utc


class FactModel(BaseModel):
    """Base for read-only facts supplied by the host application."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class Assessment(FactModel):
    performance: str
    potential: str
    assessed_at: datetime | None = None

    @field_validator("assessed_at")
    @classmethod
    def normalise_timestamp(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value)


class EmployeeFact(FactModel):
    id: str
    name: str
    created_at: datetime
    assessment: Assessment | None = None

    @field_validator("created_at")
    @classmethod
    def normalise_timestamp(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class ReviewSubmission(FactModel):
    status: str = "draft"
    submitted_at: datetime | None = None

    @field_validator("submitted_at")
    @classmethod
    def normalise_timestamp(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value)


class ReviewRecord(FactModel):
    self_review: ReviewSubmission | None = Field(default=None, alias="self")
    manager: ReviewSubmission | None = None


class DevelopmentPlan(FactModel):
    created_at: datetime | None = None
    last_reviewed: datetime | None = None
    action_items: list[Any] = Field(default_factory=list)

    @field_validator("created_at", "last_reviewed")
    @classmethod
    def normalise_timestamp(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value)
