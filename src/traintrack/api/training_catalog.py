"""Training catalog API endpoints."""

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from traintrack.api.auth import get_current_user
from traintrack.api.auth_helpers import require_hr_admin
from traintrack.core.db import get_db
from traintrack.core.errors import NotFoundError
from traintrack.core.logging import get_logger
from traintrack.models import (
    TrainingCatalog,
    TrainingCatalogCreate,
    TrainingCatalogRead,
    TrainingCatalogUpdate,
    User,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/training-catalog", tags=["training-catalog"])


@router.get("", response_model=list[TrainingCatalogRead])
async def list_catalog(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List all courses. All roles can read."""
    stmt = select(TrainingCatalog).order_by(TrainingCatalog.title)
    result = await db.execute(stmt)
    return result.scalars().all()


@router.post("", response_model=TrainingCatalogRead, status_code=status.HTTP_201_CREATED)
async def create_catalog_entry(
    payload: TrainingCatalogCreate,
    current_user: User = Depends(require_hr_admin),
    db: AsyncSession = Depends(get_db),
):
    """Create a course. HR admin only."""
    data = payload.model_dump()
    data["type"] = payload.type.value
    entry = TrainingCatalog(**data, created_by=current_user.id)
    db.add(entry)
    await db.commit()
    await db.refresh(entry)
    logger.info(
        "training_catalog.created",
        catalog_id=entry.id,
        title=entry.title,
        created_by=str(current_user.id),
    )
    return entry


@router.put("/{catalog_id}", response_model=TrainingCatalogRead)
async def update_catalog_entry(
    catalog_id: int,
    payload: TrainingCatalogUpdate,
    current_user: User = Depends(require_hr_admin),
    db: AsyncSession = Depends(get_db),
):
    """Update a course. HR admin only."""
    entry = await db.get(TrainingCatalog, catalog_id)
    if entry is None:
        raise NotFoundError("TrainingCatalog", catalog_id)

    # Only fields the client sent
    update_data = payload.model_dump(exclude_unset=True)
    for key, value in update_data.items():
        if value is None:
            continue
        if key == "type":
            value = value.value
        setattr(entry, key, value)

    await db.commit()
    await db.refresh(entry)
    logger.info(
        "training_catalog.updated",
        catalog_id=entry.id,
        fields=sorted(update_data),
        updated_by=str(current_user.id),
    )
    return entry
