"""
Enums for domain models.
Enums provide type safety and clarity. Validation for categorical fields.
"""

import enum


class UserRole(str, enum.Enum):
    """Role tiers gating feature access."""

    EMPLOYEE = "employee"
    MANAGER = "manager"
    HR_ADMIN = "hr_admin"


class TrainingType(str, enum.Enum):
    INTERNAL = "internal"
    EXTERNAL = "external"
    CERTIFICATION = "certification"
    COMPLIANCE = "compliance"


class SessionStatus(str, enum.Enum):
    """Training session lifecycle states."""

    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class EnrollmentStatus(str, enum.Enum):
    ENROLLED = "enrolled"
    ATTENDED = "attended"
    COMPLETED = "completed"
    ABSENT = "absent"


class NominationSource(str, enum.Enum):
    """Who initiated the nomination."""

    SELF = "SELF"
    MANAGER = "MANAGER"
    HR = "HR"


class NominationStatus(str, enum.Enum):
    """Nomination approval states. PENDING is initial; APPROVED and REJECTED are terminal."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    WAITLIST = "WAITLIST"


class NominationAction(str, enum.Enum):
    CREATE = "CREATE"
    APPROVE = "APPROVE"
    REJECT = "REJECT"
    WAITLIST = "WAITLIST"
