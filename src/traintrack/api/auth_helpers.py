"""Role-based authorization helpers."""

from fastapi import Depends

from traintrack.api.auth import get_current_user
from traintrack.core.errors import AuthorizationError
from traintrack.core.logging import get_logger
from traintrack.models.enums import UserRole
from traintrack.models.user import User

logger = get_logger(__name__)


def require_roles(*roles: UserRole):
    """Build a dependency that admits only the given roles."""
    allowed = {role.value for role in roles}

    async def dependency(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed:
            logger.warning(
                "auth.permission_denied",
                user_id=str(current_user.id),
                required_roles=sorted(allowed),
                user_role=current_user.role,
            )
            raise AuthorizationError("You don't have permission to access this resource")
        return current_user

    return dependency


require_hr_admin = require_roles(UserRole.HR_ADMIN)
require_approver = require_roles(UserRole.MANAGER, UserRole.HR_ADMIN)
