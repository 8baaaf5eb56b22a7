"""Training enrollment API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from traintrack.api.auth import get_current_user
from traintrack.api.auth_helpers import require_hr_admin
from traintrack.core import capacity
from traintrack.core.db import get_db
from traintrack.core.errors import AuthorizationError, ConflictError, NotFoundError
from traintrack.core.logging import get_logger
from traintrack.core.nominations import APPROVER_ROLES
from traintrack.models import (
    TrainingEnrollment,
    TrainingEnrollmentCreate,
    TrainingEnrollmentRead,
    TrainingSession,
    User,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/training-enrollments", tags=["training-enrollments"])


async def _enrollments_for(db: AsyncSession, employee_id: UUID | None) -> list[TrainingEnrollment]:
    stmt = select(TrainingEnrollment).order_by(TrainingEnrollment.created_at.desc())
    if employee_id is not None:
        stmt = stmt.where(TrainingEnrollment.employee_id == employee_id)
    result = await db.execute(stmt)
    return list(result.scalars().all())


@router.get("", response_model=list[TrainingEnrollmentRead])
async def list_enrollments(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Employees see their own enrollments; managers and HR admins see all."""
    employee_id = None if current_user.role in APPROVER_ROLES else current_user.id
    return await _enrollments_for(db, employee_id)


@router.get("/employee/{employee_id}", response_model=list[TrainingEnrollmentRead])
async def list_employee_enrollments(
    employee_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    if current_user.role not in APPROVER_ROLES and current_user.id != employee_id:
        raise AuthorizationError("Employees can only view their own enrollments")
    return await _enrollments_for(db, employee_id)


@router.post("", response_model=TrainingEnrollmentRead, status_code=status.HTTP_201_CREATED)
async def create_enrollment(
    payload: TrainingEnrollmentCreate,
    current_user: User = Depends(require_hr_admin),
    db: AsyncSession = Depends(get_db),
):
    """Enroll an employee directly. HR admin only; refuses full sessions."""
    session = await db.get(TrainingSession, payload.session_id)
    if session is None:
        raise NotFoundError("TrainingSession", payload.session_id)

    employee = await db.get(User, payload.employee_id)
    if employee is None:
        raise NotFoundError("User", payload.employee_id)

    if await capacity.is_enrolled(db, session.id, employee.id):
        raise ConflictError(
            "Employee is already enrolled in this session",
            details={"session_id": session.id, "employee_id": str(employee.id)},
        )

    count = await capacity.enrolled_count(db, session.id)
    if capacity.is_full(session, count):
        raise ConflictError(
            "Training session is full",
            details={
                "session_id": session.id,
                "enrolled_count": count,
                "max_participants": session.max_participants,
            },
        )

    enrollment = TrainingEnrollment(
        session_id=session.id,
        employee_id=employee.id,
        status=payload.status.value,
        notes=payload.notes,
    )
    db.add(enrollment)
    await db.commit()
    await db.refresh(enrollment)

    logger.info(
        "training_enrollment.created",
        enrollment_id=enrollment.id,
        session_id=session.id,
        employee_id=str(employee.id),
        created_by=str(current_user.id),
    )
    return enrollment
