"""Nomination model for the training approval workflow."""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, Integer, String, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from traintrack.core.db import Base
from traintrack.models.enums import NominationStatus
from traintrack.utils.datetime import now_utc_naive

if TYPE_CHECKING:
    from traintrack.models.nomination_audit_log import NominationAuditLog
    from traintrack.models.training_session import TrainingSession
    from traintrack.models.user import User

ACTIVE_NOMINATION_PREDICATE = "status <> 'REJECTED'"


class Nomination(Base):
    """
    A request for an employee to attend a training session.

    Rows are never deleted. Status only moves through the workflow in
    traintrack.core.nominations; a REJECTED row stays as history and frees
    the (session, employee) pair for a fresh nomination.
    """

    __tablename__ = "nominations"
    __table_args__ = (
        Index(
            "uq_nominations_one_active_per_session_employee",
            "session_id",
            "employee_id",
            unique=True,
            postgresql_where=text(ACTIVE_NOMINATION_PREDICATE),
            sqlite_where=text(ACTIVE_NOMINATION_PREDICATE),
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    session_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("training_sessions.id"),
        nullable=False,
        index=True,
    )

    employee_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    # SELF, MANAGER, HR
    source: Mapped[str] = mapped_column(String(20), nullable=False)

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=NominationStatus.PENDING.value,
        index=True,
    )

    # Who raised it (the employee for SELF, otherwise the manager / HR admin)
    created_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("users.id"),
        nullable=True,
    )

    decided_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("users.id"),
        nullable=True,
    )

    decided_at: Mapped[datetime | None] = mapped_column(nullable=True)

    # Rejection or waitlist reason
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        nullable=False,
        default=now_utc_naive,
    )

    updated_at: Mapped[datetime] = mapped_column(
        nullable=False,
        default=now_utc_naive,
        onupdate=now_utc_naive,
    )

    session: Mapped["TrainingSession"] = relationship(
        "TrainingSession",
        back_populates="nominations",
    )

    employee: Mapped["User"] = relationship(
        "User",
        back_populates="nominations",
        foreign_keys=[employee_id],
    )

    decided_by_user: Mapped["User | None"] = relationship(
        "User",
        foreign_keys=[decided_by],
    )

    audit_logs: Mapped[list["NominationAuditLog"]] = relationship(
        "NominationAuditLog",
        back_populates="nomination",
        order_by="NominationAuditLog.id",
    )

    @property
    def is_active(self) -> bool:
        return self.status != NominationStatus.REJECTED.value

    def __repr__(self) -> str:
        return (
            f"<Nomination(id={self.id}, session_id={self.session_id}, "
            f"employee_id={self.employee_id}, status={self.status})>"
        )
