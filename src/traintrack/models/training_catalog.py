"""Training catalog model: the courses sessions are scheduled from."""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from traintrack.core.db import Base
from traintrack.models.enums import TrainingType
from traintrack.utils.datetime import now_utc_naive

if TYPE_CHECKING:
    from traintrack.models.training_session import TrainingSession


class TrainingCatalog(Base):
    """
    A course offered to employees.

    Compliance courses carry the standard they satisfy (ISO45001, OSHA, ...)
    and how many months a completion stays valid before retraining is due.
    """

    __tablename__ = "training_catalog"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(String(200), nullable=False, index=True)

    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=TrainingType.INTERNAL.value,
    )

    # safety, quality, compliance, technical
    category: Mapped[str] = mapped_column(String(50), nullable=False, index=True)

    duration_hours: Mapped[int] = mapped_column(Integer, nullable=False)

    validity_period_months: Mapped[int | None] = mapped_column(Integer, nullable=True)

    is_required: Mapped[bool] = mapped_column(default=False, nullable=False)

    compliance_standard: Mapped[str | None] = mapped_column(String(100), nullable=True)

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

    sessions: Mapped[list["TrainingSession"]] = relationship(
        "TrainingSession",
        back_populates="catalog",
    )

    def __repr__(self) -> str:
        return f"<TrainingCatalog(id={self.id}, title={self.title})>"
