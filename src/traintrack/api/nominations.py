"""Nomination workflow API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from traintrack.api.auth import get_current_user
from traintrack.core import nominations as workflow
from traintrack.core.db import get_db
from traintrack.core.errors import NotFoundError
from traintrack.models import (
    NominationAuditLogRead,
    NominationCreate,
    NominationRead,
    NominationReject,
    NominationWaitlist,
    User,
)

router = APIRouter(prefix="/nominations", tags=["nominations"])


@router.get("", response_model=list[NominationRead])
async def list_nominations(
    session_id: int | None = Query(None),
    employee_id: UUID | None = Query(None),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List nominations. Employees see their own; managers and HR admins see all."""
    return await workflow.list_nominations(
        db, current_user, session_id=session_id, employee_id=employee_id
    )


@router.post("", response_model=NominationRead, status_code=status.HTTP_201_CREATED)
async def create_nomination(
    payload: NominationCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Nominate the caller, or (manager / HR admin) another employee, for a session."""
    employee = current_user
    if payload.employee_id is not None and payload.employee_id != current_user.id:
        employee = await db.get(User, payload.employee_id)
        if employee is None or not employee.is_active:
            raise NotFoundError("User", payload.employee_id)

    workflow.authorize_nomination(current_user, employee, payload.source)

    nomination = await workflow.nominate(
        db,
        session_id=payload.session_id,
        employee_id=employee.id,
        source=payload.source,
        created_by=current_user.id,
    )
    await db.commit()
    await db.refresh(nomination)
    return nomination


@router.get("/{nomination_id}", response_model=NominationRead)
async def get_nomination(
    nomination_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await workflow.get_nomination(db, nomination_id, current_user)


@router.get("/{nomination_id}/history", response_model=list[NominationAuditLogRead])
async def get_nomination_history(
    nomination_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Audit trail of a nomination, oldest first."""
    return await workflow.get_history(db, nomination_id, current_user)


@router.patch("/{nomination_id}/approve", response_model=NominationRead)
async def approve_nomination(
    nomination_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    nomination = await workflow.approve(db, nomination_id, current_user)
    await db.commit()
    return nomination


@router.patch("/{nomination_id}/reject", response_model=NominationRead)
async def reject_nomination(
    nomination_id: int,
    payload: NominationReject | None = None,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    nomination = await workflow.reject(
        db, nomination_id, payload.reason if payload else None, current_user
    )
    await db.commit()
    return nomination


@router.patch("/{nomination_id}/waitlist", response_model=NominationRead)
async def waitlist_nomination(
    nomination_id: int,
    payload: NominationWaitlist | None = None,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    reason = payload.reason if payload else None
    nomination = await workflow.waitlist(db, nomination_id, reason, current_user)
    await db.commit()
    return nomination
