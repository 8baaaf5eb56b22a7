"""Nomination approval workflow.

PENDING is the initial state. Approvers (managers and HR admins) move a
nomination to APPROVED, REJECTED or WAITLIST. A waitlisted nomination can
later be approved or rejected; APPROVED and REJECTED are final.

Every transition is a compare-and-set UPDATE on the status read just before
it, so two concurrent decisions on the same nomination cannot both succeed.
"""

import uuid

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from traintrack.core import capacity
from traintrack.core.audit import log_nomination_change
from traintrack.core.errors import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    StateError,
    ValidationError,
)
from traintrack.core.logging import get_logger
from traintrack.core.validators import normalize_reason
from traintrack.models.enums import (
    NominationAction,
    NominationSource,
    NominationStatus,
    SessionStatus,
    UserRole,
)
from traintrack.models.nomination import Nomination
from traintrack.models.nomination_audit_log import NominationAuditLog
from traintrack.models.training_session import TrainingSession
from traintrack.models.user import User
from traintrack.utils.datetime import now_utc

logger = get_logger(__name__)

APPROVER_ROLES = frozenset({UserRole.MANAGER.value, UserRole.HR_ADMIN.value})

# Statuses each decision may be taken from
ALLOWED_FROM: dict[NominationStatus, frozenset[NominationStatus]] = {
    NominationStatus.APPROVED: frozenset({NominationStatus.PENDING, NominationStatus.WAITLIST}),
    NominationStatus.REJECTED: frozenset({NominationStatus.PENDING, NominationStatus.WAITLIST}),
    NominationStatus.WAITLIST: frozenset({NominationStatus.PENDING}),
}

_ACTIONS = {
    NominationStatus.APPROVED: NominationAction.APPROVE,
    NominationStatus.REJECTED: NominationAction.REJECT,
    NominationStatus.WAITLIST: NominationAction.WAITLIST,
}


def require_approver(actor: User, action: str) -> None:
    """Raise AuthorizationError unless the actor is a manager or HR admin."""
    if actor.role not in APPROVER_ROLES:
        logger.warning(
            "nomination.permission_denied",
            action=action,
            user_id=str(actor.id),
            user_role=actor.role,
        )
        raise AuthorizationError(
            f"Only managers and HR admins can {action} nominations",
            details={"required_roles": sorted(APPROVER_ROLES), "user_role": str(actor.role)},
        )


def authorize_nomination(actor: User, employee: User, source: NominationSource) -> None:
    """Check that the actor may raise a nomination of this source for this employee.

    SELF nominations are only for oneself. MANAGER nominations are raised by a
    manager for one of their direct reports. HR nominations are raised by HR
    admins for anyone.
    """
    if source == NominationSource.SELF:
        allowed = employee.id == actor.id
    elif source == NominationSource.MANAGER:
        allowed = actor.role == UserRole.MANAGER.value and employee.manager_id == actor.id
    else:
        allowed = actor.role == UserRole.HR_ADMIN.value

    if not allowed:
        logger.warning(
            "nomination.permission_denied",
            action="nominate",
            source=source.value,
            user_id=str(actor.id),
            user_role=actor.role,
            employee_id=str(employee.id),
        )
        raise AuthorizationError(
            f"You cannot raise a {source.value} nomination for this employee",
            details={"source": source.value, "employee_id": str(employee.id)},
        )


async def get_active_nomination(
    db: AsyncSession, session_id: int, employee_id: uuid.UUID
) -> Nomination | None:
    stmt = select(Nomination).where(
        Nomination.session_id == session_id,
        Nomination.employee_id == employee_id,
        Nomination.status != NominationStatus.REJECTED.value,
    )
    result = await db.execute(stmt)
    return result.scalars().first()


async def nominate(
    db: AsyncSession,
    session_id: int,
    employee_id: uuid.UUID,
    source: NominationSource,
    created_by: uuid.UUID | None = None,
) -> Nomination:
    """Create a PENDING nomination for an employee.

    Raises:
        NotFoundError: session or employee does not exist
        ConflictError: session is not scheduled, or the employee already holds
            an active nomination for it
    """
    source = NominationSource(source)

    session = await db.get(TrainingSession, session_id)
    if session is None:
        raise NotFoundError("TrainingSession", session_id)

    employee = await db.get(User, employee_id)
    if employee is None or not employee.is_active:
        raise NotFoundError("User", employee_id)

    if session.status != SessionStatus.SCHEDULED.value:
        raise ConflictError(
            f"Training session {session_id} is {session.status} and not open for nominations",
            details={"session_id": session_id, "session_status": session.status},
        )

    existing = await get_active_nomination(db, session_id, employee_id)
    if existing is not None:
        raise ConflictError(
            "Employee already has an active nomination for this session",
            details={"nomination_id": existing.id, "status": existing.status},
        )

    nomination = Nomination(
        session_id=session_id,
        employee_id=employee_id,
        source=source.value,
        status=NominationStatus.PENDING.value,
        created_by=created_by or employee_id,
    )
    try:
        # Savepoint so a lost race only undoes this insert
        async with db.begin_nested():
            db.add(nomination)
    except IntegrityError as exc:
        raise ConflictError(
            "Employee already has an active nomination for this session",
            details={"session_id": session_id, "employee_id": str(employee_id)},
        ) from exc

    log_nomination_change(
        db,
        nomination,
        NominationAction.CREATE,
        changed_by=nomination.created_by,
        from_status=None,
    )
    await db.flush()

    logger.info(
        "nomination.created",
        nomination_id=nomination.id,
        session_id=session_id,
        employee_id=str(employee_id),
        source=source.value,
    )
    return nomination


async def _lock_open_session(db: AsyncSession, nomination: Nomination) -> TrainingSession:
    """Lock the nomination's session row and require it to still be scheduled.

    The lock serialises concurrent decisions for the same session on databases
    that support SELECT ... FOR UPDATE.
    """
    stmt = (
        select(TrainingSession)
        .where(TrainingSession.id == nomination.session_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    result = await db.execute(stmt)
    session = result.scalar_one()

    if session.status != SessionStatus.SCHEDULED.value:
        raise ConflictError(
            f"Training session {session.id} is {session.status} and no longer takes decisions",
            details={
                "nomination_id": nomination.id,
                "session_id": session.id,
                "session_status": session.status,
            },
        )
    return session


async def _check_capacity(
    db: AsyncSession, nomination: Nomination, session: TrainingSession
) -> None:
    """Refuse an approval that would overfill the session."""
    if session.max_participants is None:
        return
    if await capacity.is_enrolled(db, session.id, nomination.employee_id):
        return

    count = await capacity.enrolled_count(db, session.id)
    if capacity.is_full(session, count):
        logger.info(
            "nomination.session_full",
            nomination_id=nomination.id,
            session_id=session.id,
            enrolled_count=count,
            max_participants=session.max_participants,
        )
        raise ConflictError(
            "Training session is full",
            details={
                "session_id": session.id,
                "enrolled_count": count,
                "max_participants": session.max_participants,
            },
        )


async def _transition(
    db: AsyncSession,
    nomination_id: int,
    actor: User,
    target: NominationStatus,
    reason: str | None = None,
    set_reason: bool = False,
) -> Nomination:
    nomination = await db.get(Nomination, nomination_id, populate_existing=True)
    if nomination is None:
        raise NotFoundError("Nomination", nomination_id)

    from_status = nomination.status
    allowed = ALLOWED_FROM[target]
    if from_status not in {s.value for s in allowed}:
        raise StateError(
            f"Nomination {nomination_id} is {from_status} and cannot move to {target.value}",
            details={
                "nomination_id": nomination_id,
                "status": from_status,
                "target_status": target.value,
            },
        )

    if target in (NominationStatus.APPROVED, NominationStatus.WAITLIST):
        session = await _lock_open_session(db, nomination)
        if target == NominationStatus.APPROVED:
            await _check_capacity(db, nomination, session)

    decided_at = now_utc()
    values = {
        "status": target.value,
        "decided_by": actor.id,
        "decided_at": decided_at,
        "updated_at": decided_at,
    }
    if set_reason:
        values["reason"] = reason

    stmt = (
        update(Nomination)
        .where(Nomination.id == nomination_id, Nomination.status == from_status)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    result = await db.execute(stmt)
    if result.rowcount != 1:
        raise StateError(
            f"Nomination {nomination_id} was changed by another request",
            details={"nomination_id": nomination_id, "status": from_status},
        )

    await db.refresh(nomination)

    log_nomination_change(
        db,
        nomination,
        _ACTIONS[target],
        changed_by=actor.id,
        from_status=from_status,
        reason=reason,
    )
    await db.flush()

    logger.info(
        f"nomination.{target.value.lower()}",
        nomination_id=nomination_id,
        from_status=from_status,
        decided_by=str(actor.id),
    )
    return nomination


async def approve(db: AsyncSession, nomination_id: int, actor: User) -> Nomination:
    """Approve a PENDING or WAITLIST nomination."""
    require_approver(actor, "approve")
    return await _transition(db, nomination_id, actor, NominationStatus.APPROVED)


async def reject(db: AsyncSession, nomination_id: int, reason: str | None, actor: User) -> Nomination:
    """Reject a PENDING or WAITLIST nomination. A reason is required."""
    require_approver(actor, "reject")
    cleaned = normalize_reason(reason)
    if not cleaned:
        raise ValidationError(
            "A reason is required to reject a nomination",
            details={"field": "reason"},
        )
    return await _transition(
        db, nomination_id, actor, NominationStatus.REJECTED, reason=cleaned, set_reason=True
    )


async def waitlist(
    db: AsyncSession, nomination_id: int, reason: str | None, actor: User
) -> Nomination:
    """Move a PENDING nomination to the waitlist, optionally with a reason."""
    require_approver(actor, "waitlist")
    return await _transition(
        db,
        nomination_id,
        actor,
        NominationStatus.WAITLIST,
        reason=normalize_reason(reason),
        set_reason=True,
    )


def _check_visible(viewer: User, employee_id: uuid.UUID) -> None:
    if viewer.role in APPROVER_ROLES or viewer.id == employee_id:
        return
    raise AuthorizationError("Employees can only view their own nominations")


async def list_nominations(
    db: AsyncSession,
    viewer: User,
    session_id: int | None = None,
    employee_id: uuid.UUID | None = None,
) -> list[Nomination]:
    """Nominations visible to the viewer, newest first.

    Employees only ever see their own; managers and HR admins see all.
    """
    if viewer.role not in APPROVER_ROLES:
        if employee_id is not None:
            _check_visible(viewer, employee_id)
        employee_id = viewer.id

    stmt = select(Nomination)
    if session_id is not None:
        stmt = stmt.where(Nomination.session_id == session_id)
    if employee_id is not None:
        stmt = stmt.where(Nomination.employee_id == employee_id)
    stmt = stmt.order_by(Nomination.created_at.desc(), Nomination.id.desc())

    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_nomination(db: AsyncSession, nomination_id: int, viewer: User) -> Nomination:
    nomination = await db.get(Nomination, nomination_id)
    if nomination is None:
        raise NotFoundError("Nomination", nomination_id)
    _check_visible(viewer, nomination.employee_id)
    return nomination


async def get_history(
    db: AsyncSession, nomination_id: int, viewer: User
) -> list[NominationAuditLog]:
    """Audit trail of a nomination, oldest entry first."""
    nomination = await get_nomination(db, nomination_id, viewer)
    stmt = (
        select(NominationAuditLog)
        .where(NominationAuditLog.nomination_id == nomination.id)
        .order_by(NominationAuditLog.id)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())
