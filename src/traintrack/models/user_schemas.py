"""Pydantic schemas for User API."""

import re
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from traintrack.core.validators import validate_email
from traintrack.models.enums import UserRole


class UserCreate(BaseModel):
    """Schema for creating a new user."""

    email: str = Field(..., min_length=5, max_length=255)
    password: str = Field(..., min_length=8, max_length=128)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    role: UserRole = Field(UserRole.EMPLOYEE, description="employee, manager or hr_admin")
    department: str | None = Field(None, max_length=100)
    employee_number: str | None = Field(None, max_length=50)
    manager_id: UUID | None = None

    @field_validator("email")
    @classmethod
    def validate_and_lowercase_email(cls, v: str) -> str:
        return validate_email(v)

    @field_validator("first_name", "last_name")
    @classmethod
    def validate_names(cls, v: str, info) -> str:
        """Validate name fields."""
        cleaned = v.strip()
        if not cleaned:
            raise ValueError(f"{info.field_name} cannot be empty")

        if not re.match(r"^[^\W\d_]+(?:[\s'-][^\W\d_]+)*$", cleaned):
            raise ValueError(
                f"{info.field_name} can only contain letters, spaces, hyphens, and apostrophes"
            )

        return cleaned

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, v: str) -> str:
        """Ensure password has at least one letter and one number."""
        if not re.search(r"[a-zA-Z]", v):
            raise ValueError("Password must contain at least one letter")
        if not re.search(r"\d", v):
            raise ValueError("Password must contain at least one number")
        return v


class LoginRequest(BaseModel):
    email: str
    password: str


class UserResponse(BaseModel):
    """Schema for reading a user from the database."""

    id: UUID
    email: str
    first_name: str
    last_name: str
    display_name: str
    role: UserRole
    department: str | None
    employee_number: str | None
    manager_id: UUID | None
    is_active: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
