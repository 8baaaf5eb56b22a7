"""User model for employees, managers and HR admins."""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from traintrack.core.db import Base
from traintrack.models.enums import UserRole
from traintrack.utils.datetime import now_utc_naive

if TYPE_CHECKING:
    from traintrack.models.nomination import Nomination
    from traintrack.models.training_enrollment import TrainingEnrollment


class User(Base):
    """An employee account. Managers are linked to their direct reports via manager_id."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
    )

    hashed_password: Mapped[str] = mapped_column(
        String,
        nullable=False,
    )

    first_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        default="",
    )

    last_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        default="",
    )

    role: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=UserRole.EMPLOYEE.value,
        index=True,
    )

    department: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
        index=True,
    )

    # Plant badge / HR system number, distinct from the primary key
    employee_number: Mapped[str | None] = mapped_column(
        String(50),
        nullable=True,
        unique=True,
    )

    manager_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("users.id"),
        nullable=True,
        index=True,
    )

    is_active: Mapped[bool] = mapped_column(
        default=True,
        nullable=False,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        nullable=False,
        default=now_utc_naive,
    )

    # Relationships
    manager: Mapped["User | None"] = relationship(
        "User",
        remote_side=[id],
        foreign_keys=[manager_id],
    )

    enrollments: Mapped[list["TrainingEnrollment"]] = relationship(
        "TrainingEnrollment",
        back_populates="employee",
    )

    nominations: Mapped[list["Nomination"]] = relationship(
        "Nomination",
        back_populates="employee",
        foreign_keys="Nomination.employee_id",
    )

    @property
    def display_name(self) -> str:
        """Return formatted display name (first_name last_name or email fallback)."""
        full_name = f"{self.first_name} {self.last_name}".strip()
        return full_name if full_name else self.email

    @property
    def is_approver(self) -> bool:
        return self.role in (UserRole.MANAGER.value, UserRole.HR_ADMIN.value)

    def __repr__(self) -> str:
        return f"<User(email={self.email}, role={self.role}, is_active={self.is_active})>"
