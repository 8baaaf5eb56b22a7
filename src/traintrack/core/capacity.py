"""Session capacity bookkeeping: who holds a seat and which sessions are open."""

import uuid
from dataclasses import dataclass
from typing import Iterable

from sqlalchemy import exists, func, select, union
from sqlalchemy.ext.asyncio import AsyncSession

from traintrack.models.enums import NominationStatus, SessionStatus
from traintrack.models.nomination import Nomination
from traintrack.models.training_enrollment import TrainingEnrollment
from traintrack.models.training_session import TrainingSession


@dataclass
class SessionCapacity:
    """A session together with its seat count."""

    session: TrainingSession
    enrolled_count: int

    @property
    def seats_remaining(self) -> int | None:
        return seats_remaining(self.session, self.enrolled_count)

    @property
    def is_full(self) -> bool:
        return is_full(self.session, self.enrolled_count)


def seats_remaining(session: TrainingSession, count: int) -> int | None:
    """Free seats left, or None when the session has no seat limit."""
    if session.max_participants is None:
        return None
    return max(session.max_participants - count, 0)


def is_full(session: TrainingSession, count: int) -> bool:
    if session.max_participants is None:
        return False
    return count >= session.max_participants


async def enrolled_counts(db: AsyncSession, session_ids: Iterable[int]) -> dict[int, int]:
    """
    Count seated employees per session.

    An employee holds a seat when they have an enrollment for the session or
    an APPROVED nomination for it. Someone with both is counted once.
    Sessions with nobody seated are reported as 0.
    """
    ids = list(session_ids)
    if not ids:
        return {}

    seated = union(
        select(TrainingEnrollment.session_id, TrainingEnrollment.employee_id).where(
            TrainingEnrollment.session_id.in_(ids)
        ),
        select(Nomination.session_id, Nomination.employee_id).where(
            Nomination.session_id.in_(ids),
            Nomination.status == NominationStatus.APPROVED.value,
        ),
    ).subquery()

    stmt = select(seated.c.session_id, func.count()).group_by(seated.c.session_id)
    result = await db.execute(stmt)

    counts = {session_id: 0 for session_id in ids}
    counts.update({session_id: count for session_id, count in result.all()})
    return counts


async def enrolled_count(db: AsyncSession, session_id: int) -> int:
    counts = await enrolled_counts(db, [session_id])
    return counts[session_id]


async def is_enrolled(db: AsyncSession, session_id: int, employee_id: uuid.UUID) -> bool:
    stmt = select(
        exists().where(
            TrainingEnrollment.session_id == session_id,
            TrainingEnrollment.employee_id == employee_id,
        )
    )
    result = await db.execute(stmt)
    return bool(result.scalar())


async def session_capacities(
    db: AsyncSession, sessions: list[TrainingSession]
) -> list[SessionCapacity]:
    counts = await enrolled_counts(db, [s.id for s in sessions])
    return [SessionCapacity(session=s, enrolled_count=counts[s.id]) for s in sessions]


async def available_sessions(db: AsyncSession, employee_id: uuid.UUID) -> list[SessionCapacity]:
    """
    Sessions the employee can still be nominated for.

    Excludes sessions that are not scheduled, sessions already at
    max_participants, and sessions where the employee already holds an active
    (non-REJECTED) nomination or an enrollment.
    """
    active_nomination = select(Nomination.session_id).where(
        Nomination.employee_id == employee_id,
        Nomination.status != NominationStatus.REJECTED.value,
    )
    enrolled = select(TrainingEnrollment.session_id).where(
        TrainingEnrollment.employee_id == employee_id
    )

    stmt = (
        select(TrainingSession)
        .where(
            TrainingSession.status == SessionStatus.SCHEDULED.value,
            TrainingSession.id.not_in(active_nomination),
            TrainingSession.id.not_in(enrolled),
        )
        .order_by(TrainingSession.session_date, TrainingSession.id)
    )
    result = await db.execute(stmt)
    sessions = list(result.scalars().all())

    capacities = await session_capacities(db, sessions)
    return [c for c in capacities if not c.is_full]
