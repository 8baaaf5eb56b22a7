"""Pydantic schemas for the training enrollment API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator

from traintrack.core.validators import sanitize_html
from traintrack.models.enums import EnrollmentStatus


class TrainingEnrollmentCreate(BaseModel):
    session_id: int
    employee_id: UUID
    status: EnrollmentStatus = EnrollmentStatus.ENROLLED
    notes: str | None = None

    @field_validator("notes")
    @classmethod
    def validate_notes(cls, v: str | None) -> str | None:
        return sanitize_html(v)


class TrainingEnrollmentRead(BaseModel):
    id: int
    session_id: int
    employee_id: UUID
    status: EnrollmentStatus
    completion_date: datetime | None
    score: int | None
    notes: str | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
