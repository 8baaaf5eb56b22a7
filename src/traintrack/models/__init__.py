"""Domain models package."""

from traintrack.models.enums import (
    EnrollmentStatus,
    NominationAction,
    NominationSource,
    NominationStatus,
    SessionStatus,
    TrainingType,
    UserRole,
)
from traintrack.models.nomination import Nomination
from traintrack.models.nomination_audit_log import NominationAuditLog
from traintrack.models.nomination_schemas import (
    NominationAuditLogRead,
    NominationCreate,
    NominationRead,
    NominationReject,
    NominationWaitlist,
)
from traintrack.models.training_catalog import TrainingCatalog
from traintrack.models.training_catalog_schemas import (
    TrainingCatalogCreate,
    TrainingCatalogRead,
    TrainingCatalogUpdate,
)
from traintrack.models.training_enrollment import TrainingEnrollment
from traintrack.models.training_enrollment_schemas import (
    TrainingEnrollmentCreate,
    TrainingEnrollmentRead,
)
from traintrack.models.training_session import TrainingSession
from traintrack.models.training_session_schemas import (
    TrainingSessionCapacityRead,
    TrainingSessionCreate,
    TrainingSessionRead,
)
from traintrack.models.user import User
from traintrack.models.user_schemas import LoginRequest, UserCreate, UserResponse

__all__ = [
    "EnrollmentStatus",
    "LoginRequest",
    "Nomination",
    "NominationAction",
    "NominationAuditLog",
    "NominationAuditLogRead",
    "NominationCreate",
    "NominationRead",
    "NominationReject",
    "NominationSource",
    "NominationStatus",
    "NominationWaitlist",
    "SessionStatus",
    "TrainingCatalog",
    "TrainingCatalogCreate",
    "TrainingCatalogRead",
    "TrainingCatalogUpdate",
    "TrainingEnrollment",
    "TrainingEnrollmentCreate",
    "TrainingEnrollmentRead",
    "TrainingSession",
    "TrainingSessionCapacityRead",
    "TrainingSessionCreate",
    "TrainingSessionRead",
    "TrainingType",
    "User",
    "UserCreate",
    "UserResponse",
    "UserRole",
]
