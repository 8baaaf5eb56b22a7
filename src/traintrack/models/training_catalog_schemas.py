"""Pydantic schemas for the training catalog API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from traintrack.core.validators import sanitize_html, validate_title
from traintrack.models.enums import TrainingType


class TrainingCatalogBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    type: TrainingType = TrainingType.INTERNAL
    category: str = Field(..., min_length=1, max_length=50)
    duration_hours: int = Field(..., gt=0, le=1000)
    validity_period_months: int | None = Field(None, gt=0, le=240)
    is_required: bool = False
    compliance_standard: str | None = Field(None, max_length=100)

    @field_validator("title")
    @classmethod
    def validate_title_field(cls, v: str) -> str:
        return validate_title(v, field_name="Title")

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str | None) -> str | None:
        """Strip markup from the description."""
        return sanitize_html(v)

    @field_validator("category")
    @classmethod
    def normalize_category(cls, v: str) -> str:
        return v.strip().lower()


class TrainingCatalogCreate(TrainingCatalogBase):
    pass


class TrainingCatalogUpdate(BaseModel):
    """Schema for updating a catalog entry (partial update allowed)."""

    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    type: TrainingType | None = None
    category: str | None = Field(None, min_length=1, max_length=50)
    duration_hours: int | None = Field(None, gt=0, le=1000)
    validity_period_months: int | None = Field(None, gt=0, le=240)
    is_required: bool | None = None
    compliance_standard: str | None = Field(None, max_length=100)

    @field_validator("title")
    @classmethod
    def validate_title_field(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return validate_title(v, field_name="Title")

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str | None) -> str | None:
        return sanitize_html(v)


class TrainingCatalogRead(TrainingCatalogBase):
    id: int
    created_by: UUID | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
