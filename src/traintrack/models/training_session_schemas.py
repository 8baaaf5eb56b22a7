"""Pydantic schemas for the training session API."""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator

from traintrack.core.validators import validate_title
from traintrack.models.enums import SessionStatus


class TrainingSessionCreate(BaseModel):
    catalog_id: int | None = None
    title: str = Field(..., min_length=1, max_length=200)
    session_date: datetime
    duration_hours: int = Field(1, gt=0, le=1000)
    venue: str | None = Field(None, max_length=200)
    trainer_name: str | None = Field(None, max_length=200)
    max_participants: int | None = Field(None, gt=0, description="Omit for no seat limit")
    status: SessionStatus = SessionStatus.SCHEDULED

    @field_validator("title")
    @classmethod
    def validate_title_field(cls, v: str) -> str:
        return validate_title(v, field_name="Title")

    @field_validator("session_date")
    @classmethod
    def to_naive_utc(cls, v: datetime) -> datetime:
        """Stored as naive UTC; aware inputs are converted first."""
        if v.tzinfo is not None:
            return v.astimezone(timezone.utc).replace(tzinfo=None)
        return v


class TrainingSessionRead(BaseModel):
    id: int
    catalog_id: int | None
    title: str
    session_date: datetime
    duration_hours: int
    venue: str | None
    trainer_name: str | None
    max_participants: int | None
    status: SessionStatus
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TrainingSessionCapacityRead(TrainingSessionRead):
    """Session with seat bookkeeping. seats_remaining is None for unlimited sessions."""

    enrolled_count: int
    seats_remaining: int | None
    is_full: bool
