"""Training session API endpoints with seat bookkeeping."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from traintrack.api.auth import get_current_user
from traintrack.api.auth_helpers import require_hr_admin
from traintrack.core import capacity
from traintrack.core.db import get_db
from traintrack.core.errors import NotFoundError
from traintrack.core.logging import get_logger
from traintrack.models import (
    SessionStatus,
    TrainingCatalog,
    TrainingSession,
    TrainingSessionCapacityRead,
    TrainingSessionCreate,
    TrainingSessionRead,
    User,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/training-sessions", tags=["training-sessions"])


def _capacity_read(item: capacity.SessionCapacity) -> TrainingSessionCapacityRead:
    base = TrainingSessionRead.model_validate(item.session)
    return TrainingSessionCapacityRead(
        **base.model_dump(),
        enrolled_count=item.enrolled_count,
        seats_remaining=item.seats_remaining,
        is_full=item.is_full,
    )


@router.get("", response_model=list[TrainingSessionCapacityRead])
async def list_sessions(
    status_filter: SessionStatus | None = Query(None, alias="status"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List sessions by date with enrolled counts. All roles can read."""
    stmt = select(TrainingSession).order_by(TrainingSession.session_date, TrainingSession.id)
    if status_filter is not None:
        stmt = stmt.where(TrainingSession.status == status_filter.value)
    result = await db.execute(stmt)
    sessions = list(result.scalars().all())

    return [_capacity_read(c) for c in await capacity.session_capacities(db, sessions)]


@router.get("/available", response_model=list[TrainingSessionCapacityRead])
async def list_available_sessions(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Scheduled sessions with free seats that the caller is not already nominated for."""
    available = await capacity.available_sessions(db, current_user.id)
    return [_capacity_read(c) for c in available]


@router.get("/{session_id}", response_model=TrainingSessionCapacityRead)
async def get_session(
    session_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    session = await db.get(TrainingSession, session_id)
    if session is None:
        raise NotFoundError("TrainingSession", session_id)

    count = await capacity.enrolled_count(db, session_id)
    return _capacity_read(capacity.SessionCapacity(session=session, enrolled_count=count))


@router.post("", response_model=TrainingSessionRead, status_code=status.HTTP_201_CREATED)
async def create_session(
    payload: TrainingSessionCreate,
    current_user: User = Depends(require_hr_admin),
    db: AsyncSession = Depends(get_db),
):
    """Schedule a session. HR admin only."""
    if payload.catalog_id is not None and await db.get(TrainingCatalog, payload.catalog_id) is None:
        raise NotFoundError("TrainingCatalog", payload.catalog_id)

    data = payload.model_dump()
    data["status"] = payload.status.value
    session = TrainingSession(**data, created_by=current_user.id)
    db.add(session)
    await db.commit()
    await db.refresh(session)

    logger.info(
        "training_session.created",
        session_id=session.id,
        catalog_id=session.catalog_id,
        max_participants=session.max_participants,
        created_by=str(current_user.id),
    )
    return session
