"""TrainingEnrollment model: confirmed attendance, distinct from a nomination."""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from traintrack.core.db import Base
from traintrack.models.enums import EnrollmentStatus
from traintrack.utils.datetime import now_utc_naive

if TYPE_CHECKING:
    from traintrack.models.training_session import TrainingSession
    from traintrack.models.user import User


class TrainingEnrollment(Base):
    """One employee's attendance record for one session."""

    __tablename__ = "training_enrollments"
    __table_args__ = (
        UniqueConstraint("session_id", "employee_id", name="uq_training_enrollments_session_employee"),
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

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=EnrollmentStatus.ENROLLED.value,
    )

    completion_date: Mapped[datetime | None] = mapped_column(nullable=True)

    score: Mapped[int | None] = mapped_column(Integer, nullable=True)

    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

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
        back_populates="enrollments",
    )

    employee: Mapped["User"] = relationship(
        "User",
        back_populates="enrollments",
    )

    def __repr__(self) -> str:
        return (
            f"<TrainingEnrollment(session_id={self.session_id}, "
            f"employee_id={self.employee_id}, status={self.status})>"
        )
