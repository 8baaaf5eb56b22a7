"""Pydantic schemas for Nomination API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from traintrack.models.enums import NominationAction, NominationSource, NominationStatus


class NominationCreate(BaseModel):
    """Nominate an employee for a session. employee_id defaults to the caller."""

    session_id: int
    source: NominationSource = NominationSource.SELF
    employee_id: UUID | None = None


class NominationReject(BaseModel):
    # Emptiness is checked by the workflow so it surfaces as a VALIDATION_ERROR
    reason: str | None = None


class NominationWaitlist(BaseModel):
    reason: str | None = Field(None, max_length=1000)


class NominationRead(BaseModel):
    id: int
    session_id: int
    employee_id: UUID
    source: NominationSource
    status: NominationStatus
    created_by: UUID | None
    decided_by: UUID | None
    decided_at: datetime | None
    reason: str | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class NominationAuditLogRead(BaseModel):
    id: int
    nomination_id: int
    action: NominationAction
    from_status: NominationStatus | None
    to_status: NominationStatus
    changed_by: UUID | None
    changed_at: datetime
    reason: str | None

    model_config = ConfigDict(from_attributes=True)
