"""Authentication endpoints and dependencies."""

from datetime import datetime, timedelta
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.requests import Request

from traintrack.core.db import get_db
from traintrack.core.errors import UnauthorizedError
from traintrack.core.logging import get_logger
from traintrack.core.security import verify_password
from traintrack.models.enums import UserRole
from traintrack.models.user import User
from traintrack.models.user_schemas import LoginRequest, UserResponse
from traintrack.utils.datetime import now_utc_naive

logger = get_logger(__name__)

router = APIRouter(tags=["auth"])


# Inactivity timeout by role (seconds)
ROLE_TIMEOUTS = {
    UserRole.EMPLOYEE.value: 30 * 60,
    UserRole.MANAGER.value: 2 * 60 * 60,
    UserRole.HR_ADMIN.value: 2 * 60 * 60,
}


def _session_expired(request: Request, user_role: str | None) -> bool:
    """Check the role's inactivity window and refresh last_activity when still valid."""
    timeout = ROLE_TIMEOUTS.get(user_role)
    if timeout is None:
        return False

    now = now_utc_naive()
    last_activity_raw = request.session.get("last_activity")
    try:
        last_activity = datetime.fromisoformat(last_activity_raw) if last_activity_raw else None
    except (ValueError, TypeError):
        last_activity = None

    if last_activity and (now - last_activity) > timedelta(seconds=timeout):
        logger.info(
            "auth.session_expired",
            user_id=request.session.get("user_id"),
            role=user_role,
            timeout_seconds=timeout,
            time_elapsed_seconds=round((now - last_activity).total_seconds(), 2),
        )
        return True

    request.session["last_activity"] = now.isoformat()
    return False


async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> User:
    """Dependency to get current authenticated user from the cookie session."""
    user_id = request.session.get("user_id")
    if not user_id:
        raise UnauthorizedError("Not authenticated")

    if _session_expired(request, request.session.get("user_role")):
        request.session.clear()
        raise UnauthorizedError("Session expired")

    try:
        user_uuid = UUID(user_id)
    except ValueError:
        raise UnauthorizedError("Invalid user session") from None

    stmt = select(User).where((User.id == user_uuid) & (User.is_active))
    result = await db.execute(stmt)
    user = result.scalar_one_or_none()

    if not user:
        raise UnauthorizedError("User not found or inactive")

    return user


@router.post("/login", response_model=UserResponse)
async def login(
    request: Request,
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    """Validate credentials and start a cookie session."""
    email = credentials.email.strip().lower()
    stmt = select(User).where(User.email == email)
    result = await db.execute(stmt)
    user = result.scalar_one_or_none()

    if not verify_password(credentials.password, user.hashed_password if user else None):
        logger.warning("auth.login_failed", email=email)
        raise UnauthorizedError("Invalid email or password")

    if not user.is_active:
        logger.warning("auth.login_disabled_account", email=user.email, user_id=str(user.id))
        raise UnauthorizedError("Account is disabled")

    request.session["user_id"] = str(user.id)
    request.session["user_role"] = user.role
    request.session["last_activity"] = now_utc_naive().isoformat()

    logger.info(
        "auth.login_success",
        email=user.email,
        user_id=str(user.id),
        role=user.role,
    )
    return user


@router.post("/logout", status_code=204)
async def logout(request: Request):
    """Clear the session."""
    user_id = request.session.get("user_id")
    if user_id:
        logger.info("auth.logout", user_id=user_id)

    request.session.clear()


@router.get("/me", response_model=UserResponse)
async def me(current_user: User = Depends(get_current_user)):
    return current_user
