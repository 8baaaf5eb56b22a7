"""TrainingSession model: a scheduled delivery of a catalog course."""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from traintrack.core.db import Base
from traintrack.models.enums import SessionStatus
from traintrack.utils.datetime import now_utc_naive

if TYPE_CHECKING:
    from traintrack.models.nomination import Nomination
    from traintrack.models.training_catalog import TrainingCatalog
    from traintrack.models.training_enrollment import TrainingEnrollment


class TrainingSession(Base):
    """Scheduled training session. max_participants of None means no seat limit."""

    __tablename__ = "training_sessions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    catalog_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("training_catalog.id"),
        nullable=True,
        index=True,
    )

    catalog: Mapped["TrainingCatalog | None"] = relationship(
        "TrainingCatalog",
        back_populates="sessions",
    )

    title: Mapped[str] = mapped_column(String(200), nullable=False)

    session_date: Mapped[datetime] = mapped_column(nullable=False, index=True)

    duration_hours: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    venue: Mapped[str | None] = mapped_column(String(200), nullable=True)

    trainer_name: Mapped[str | None] = mapped_column(String(200), nullable=True)

    max_participants: Mapped[int | None] = mapped_column(Integer, nullable=True)

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=SessionStatus.SCHEDULED.value,
        index=True,
    )

    created_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("users.id"),
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        nullable=False,
        default=now_utc_naive,
    )

    updated_at: Mapped[datetime] = mapped_column(
        nullable=False,
        default=now_utc_naive,
        onupdate=now_utc_naive,
    )

    enrollments: Mapped[list["TrainingEnrollment"]] = relationship(
        "TrainingEnrollment",
        back_populates="session",
    )

    nominations: Mapped[list["Nomination"]] = relationship(
        "Nomination",
        back_populates="session",
    )

    @property
    def is_scheduled(self) -> bool:
        return self.status == SessionStatus.SCHEDULED.value

    def __repr__(self) -> str:
        return f"<TrainingSession(id={self.id}, title={self.title}, status={self.status})>"
