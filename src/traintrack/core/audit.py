"""Audit logging utilities for tracking Nomination changes."""

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from traintrack.models.enums import NominationAction
from traintrack.models.nomination import Nomination
from traintrack.models.nomination_audit_log import NominationAuditLog
from traintrack.utils.datetime import now_utc


def log_nomination_change(
    db: AsyncSession,
    nomination: Nomination,
    action: NominationAction,
    changed_by: uuid.UUID | None,
    from_status: str | None,
    reason: str | None = None,
) -> NominationAuditLog:
    """Add an audit row for a nomination change to the current transaction.

    Args:
        db: Database session
        nomination: The Nomination after the change
        action: CREATE, APPROVE, REJECT or WAITLIST
        changed_by: User making the change
        from_status: Status before the change (None on creation)
        reason: Optional reason recorded with the decision

    Returns:
        Created NominationAuditLog record
    """
    audit_log = NominationAuditLog(
        nomination_id=nomination.id,
        changed_by=changed_by,
        action=action.value,
        from_status=from_status,
        to_status=nomination.status,
        reason=reason,
        changed_at=now_utc(),
    )

    db.add(audit_log)
    return audit_log
