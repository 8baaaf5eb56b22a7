"""Audit logging model for Nomination status changes."""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from traintrack.core.db import Base
from traintrack.utils.datetime import now_utc_naive

if TYPE_CHECKING:
    from traintrack.models.nomination import Nomination


class NominationAuditLog(Base):
    """Immutable audit trail for every Nomination creation and decision."""

    __tablename__ = "nomination_audit_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    nomination_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("nominations.id"),
        nullable=False,
        index=True,
    )

    nomination: Mapped["Nomination"] = relationship(
        "Nomination",
        back_populates="audit_logs",
    )

    # WHO
    changed_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("users.id"),
        nullable=True,
    )

    # WHEN
    changed_at: Mapped[datetime] = mapped_column(
        nullable=False,
        default=now_utc_naive,
        index=True,
    )

    # WHAT
    action: Mapped[str] = mapped_column(String(20), nullable=False)  # CREATE, APPROVE, REJECT, WAITLIST

    from_status: Mapped[str | None] = mapped_column(String(20), nullable=True)
    to_status: Mapped[str] = mapped_column(String(20), nullable=False)

    reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return (
            f"<NominationAuditLog(nomination_id={self.nomination_id}, "
            f"action={self.action}, changed_by={self.changed_by})>"
        )
