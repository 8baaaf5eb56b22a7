"""User management API endpoints."""

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from traintrack.api.auth_helpers import require_approver, require_hr_admin
from traintrack.core.db import get_db
from traintrack.core.errors import ConflictError, NotFoundError
from traintrack.core.logging import get_logger
from traintrack.core.security import hash_password
from traintrack.models import User, UserCreate, UserResponse, UserRole

logger = get_logger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=list[UserResponse])
async def list_users(
    current_user: User = Depends(require_approver),
    db: AsyncSession = Depends(get_db),
):
    """HR admins see everyone; managers see their direct reports."""
    stmt = select(User).where(User.is_active).order_by(User.last_name, User.first_name)
    if current_user.role == UserRole.MANAGER.value:
        stmt = stmt.where(User.manager_id == current_user.id)
    result = await db.execute(stmt)
    return result.scalars().all()


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: UserCreate,
    current_user: User = Depends(require_hr_admin),
    db: AsyncSession = Depends(get_db),
):
    """Create an employee account. HR admin only."""
    existing = await db.execute(select(User.id).where(User.email == payload.email))
    if existing.scalar_one_or_none() is not None:
        raise ConflictError("A user with this email already exists", details={"email": payload.email})

    if payload.manager_id is not None and await db.get(User, payload.manager_id) is None:
        raise NotFoundError("User", payload.manager_id)

    user = User(
        email=payload.email,
        hashed_password=hash_password(payload.password),
        first_name=payload.first_name,
        last_name=payload.last_name,
        role=payload.role.value,
        department=payload.department,
        employee_number=payload.employee_number,
        manager_id=payload.manager_id,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)

    logger.info(
        "user.created",
        user_id=str(user.id),
        role=user.role,
        created_by=str(current_user.id),
    )
    return user
