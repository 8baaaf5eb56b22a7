"""Tests for the nomination approval workflow (service layer)."""

import uuid

import pytest
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from traintrack.core import nominations as workflow
from traintrack.core.errors import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    StateError,
    ValidationError,
)
from traintrack.models import Nomination, NominationAuditLog
from traintrack.models.enums import NominationSource, NominationStatus, SessionStatus, UserRole
from tests.factories import (
    NominationFactory,
    TrainingEnrollmentFactory,
    TrainingSessionFactory,
    UserFactory,
)


class TestNominate:
    """Creating nominations."""

    @pytest.mark.asyncio
    async def test_self_nomination_starts_pending(self, db_session: AsyncSession, employee):
        session = await TrainingSessionFactory.create(db_session, id=5)

        nomination = await workflow.nominate(db_session, 5, employee.id, NominationSource.SELF)

        assert nomination.id is not None
        assert nomination.session_id == session.id == 5
        assert nomination.employee_id == employee.id
        assert nomination.source == "SELF"
        assert nomination.status == NominationStatus.PENDING.value
        assert nomination.decided_by is None
        assert nomination.decided_at is None
        assert nomination.created_by == employee.id

    @pytest.mark.asyncio
    async def test_nomination_records_creator_when_raised_by_someone_else(
        self, db_session: AsyncSession, employee, manager
    ):
        session = await TrainingSessionFactory.create(db_session)

        nomination = await workflow.nominate(
            db_session, session.id, employee.id, NominationSource.MANAGER, created_by=manager.id
        )

        assert nomination.source == "MANAGER"
        assert nomination.created_by == manager.id

    @pytest.mark.asyncio
    async def test_creation_is_audited(self, db_session: AsyncSession, employee):
        session = await TrainingSessionFactory.create(db_session)

        nomination = await workflow.nominate(db_session, session.id, employee.id, "SELF")

        result = await db_session.execute(
            select(NominationAuditLog).where(NominationAuditLog.nomination_id == nomination.id)
        )
        logs = result.scalars().all()
        assert len(logs) == 1
        assert logs[0].action == "CREATE"
        assert logs[0].from_status is None
        assert logs[0].to_status == "PENDING"
        assert logs[0].changed_by == employee.id

    @pytest.mark.asyncio
    async def test_duplicate_active_nomination_conflicts(self, db_session: AsyncSession, employee):
        session = await TrainingSessionFactory.create(db_session)
        await workflow.nominate(db_session, session.id, employee.id, NominationSource.SELF)

        with pytest.raises(ConflictError) as exc_info:
            await workflow.nominate(db_session, session.id, employee.id, NominationSource.HR)

        assert exc_info.value.status_code == 409

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "existing_status",
        [NominationStatus.PENDING, NominationStatus.APPROVED, NominationStatus.WAITLIST],
    )
    async def test_any_non_rejected_nomination_blocks_a_new_one(
        self, db_session: AsyncSession, employee, existing_status
    ):
        session = await TrainingSessionFactory.create(db_session)
        await NominationFactory.create(
            db_session, session.id, employee.id, status=existing_status.value
        )

        with pytest.raises(ConflictError):
            await workflow.nominate(db_session, session.id, employee.id, NominationSource.SELF)

    @pytest.mark.asyncio
    async def test_rejected_nomination_does_not_block_renomination(
        self, db_session: AsyncSession, employee
    ):
        session = await TrainingSessionFactory.create(db_session)
        await NominationFactory.create(
            db_session, session.id, employee.id, status="REJECTED", reason="Shift clash"
        )

        nomination = await workflow.nominate(db_session, session.id, employee.id, "SELF")

        assert nomination.status == "PENDING"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("session_status", [SessionStatus.COMPLETED, SessionStatus.CANCELLED])
    async def test_session_must_be_scheduled(
        self, db_session: AsyncSession, employee, session_status
    ):
        session = await TrainingSessionFactory.create(db_session, status=session_status.value)

        with pytest.raises(ConflictError) as exc_info:
            await workflow.nominate(db_session, session.id, employee.id, "SELF")

        assert exc_info.value.details["session_status"] == session_status.value

    @pytest.mark.asyncio
    async def test_unknown_session_not_found(self, db_session: AsyncSession, employee):
        with pytest.raises(NotFoundError):
            await workflow.nominate(db_session, 9999, employee.id, "SELF")

    @pytest.mark.asyncio
    async def test_unknown_employee_not_found(self, db_session: AsyncSession):
        session = await TrainingSessionFactory.create(db_session)

        with pytest.raises(NotFoundError):
            await workflow.nominate(db_session, session.id, uuid.uuid4(), "SELF")

    @pytest.mark.asyncio
    async def test_database_rejects_second_active_row(self, db_session: AsyncSession, employee):
        """The partial unique index backs the invariant even when the service is bypassed."""
        session = await TrainingSessionFactory.create(db_session)
        await NominationFactory.create(db_session, session.id, employee.id)

        with pytest.raises(IntegrityError):
            await NominationFactory.create(db_session, session.id, employee.id, status="WAITLIST")

        await db_session.rollback()


class TestApprove:
    @pytest.mark.asyncio
    async def test_hr_admin_approves_pending(self, db_session: AsyncSession, employee, hr_admin):
        await TrainingSessionFactory.create(db_session, id=5)
        nomination = await workflow.nominate(db_session, 5, employee.id, NominationSource.SELF)
        assert nomination.status == "PENDING"

        approved = await workflow.approve(db_session, nomination.id, hr_admin)

        assert approved.status == NominationStatus.APPROVED.value
        assert approved.decided_by == hr_admin.id
        assert approved.decided_at is not None

    @pytest.mark.asyncio
    async def test_manager_can_approve(self, db_session: AsyncSession, employee, manager):
        session = await TrainingSessionFactory.create(db_session)
        nomination = await NominationFactory.create(db_session, session.id, employee.id)

        approved = await workflow.approve(db_session, nomination.id, manager)

        assert approved.status == "APPROVED"
        assert approved.decided_by == manager.id

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", ["PENDING", "WAITLIST", "APPROVED", "REJECTED"])
    async def test_employee_can_never_approve(
        self, db_session: AsyncSession, employee, status
    ):
        session = await TrainingSessionFactory.create(db_session)
        nomination = await NominationFactory.create(
            db_session, session.id, employee.id, status=status
        )

        with pytest.raises(AuthorizationError) as exc_info:
            await workflow.approve(db_session, nomination.id, employee)

        assert exc_info.value.status_code == 403
        await db_session.refresh(nomination)
        assert nomination.status == status

    @pytest.mark.asyncio
    async def test_employee_gets_authorization_error_even_for_missing_id(
        self, db_session: AsyncSession, employee
    ):
        with pytest.raises(AuthorizationError):
            await workflow.approve(db_session, 424242, employee)

    @pytest.mark.asyncio
    async def test_reapproving_fails(self, db_session: AsyncSession, employee, hr_admin):
        session = await TrainingSessionFactory.create(db_session)
        nomination = await NominationFactory.create(db_session, session.id, employee.id)
        await workflow.approve(db_session, nomination.id, hr_admin)

        with pytest.raises(StateError) as exc_info:
            await workflow.approve(db_session, nomination.id, hr_admin)

        assert exc_info.value.details["status"] == "APPROVED"

    @pytest.mark.asyncio
    async def test_approve_reads_current_status_not_cached_object(
        self, db_session: AsyncSession, employee, hr_admin
    ):
        session = await TrainingSessionFactory.create(db_session)
        nomination = await NominationFactory.create(db_session, session.id, employee.id)

        # Another request rejected it behind this session's back
        await db_session.execute(
            update(Nomination)
            .where(Nomination.id == nomination.id)
            .values(status="REJECTED", reason="Budget")
            .execution_options(synchronize_session=False)
        )
        assert nomination.status == "PENDING"

        with pytest.raises(StateError):
            await workflow.approve(db_session, nomination.id, hr_admin)


class TestReject:
    @pytest.mark.asyncio
    async def test_reject_with_reason(self, db_session: AsyncSession, employee, hr_admin):
        session = await TrainingSessionFactory.create(db_session)
        nomination = await NominationFactory.create(db_session, session.id, employee.id)

        rejected = await workflow.reject(db_session, nomination.id, "  Not certified yet ", hr_admin)

        assert rejected.status == "REJECTED"
        assert rejected.reason == "Not certified yet"
        assert rejected.decided_by == hr_admin.id

    @pytest.mark.asyncio
    @pytest.mark.parametrize("reason", [None, "", "   "])
    async def test_reject_requires_reason(
        self, db_session: AsyncSession, employee, hr_admin, reason
    ):
        session = await TrainingSessionFactory.create(db_session)
        nomination = await NominationFactory.create(db_session, session.id, employee.id)

        with pytest.raises(ValidationError) as exc_info:
            await workflow.reject(db_session, nomination.id, reason, hr_admin)

        assert exc_info.value.details == {"field": "reason"}
        await db_session.refresh(nomination)
        assert nomination.status == "PENDING"

    @pytest.mark.asyncio
    async def test_employee_cannot_reject(self, db_session: AsyncSession, employee):
        session = await TrainingSessionFactory.create(db_session)
        nomination = await NominationFactory.create(db_session, session.id, employee.id)

        with pytest.raises(AuthorizationError):
            await workflow.reject(db_session, nomination.id, "Nope", employee)

    @pytest.mark.asyncio
    async def test_rejected_is_terminal(self, db_session: AsyncSession, employee, hr_admin):
        session = await TrainingSessionFactory.create(db_session)
        nomination = await NominationFactory.create(db_session, session.id, employee.id)
        await workflow.reject(db_session, nomination.id, "Session clashes with audit", hr_admin)

        with pytest.raises(StateError):
            await workflow.approve(db_session, nomination.id, hr_admin)
        with pytest.raises(StateError):
            await workflow.waitlist(db_session, nomination.id, None, hr_admin)
        with pytest.raises(StateError):
            await workflow.reject(db_session, nomination.id, "Again", hr_admin)

    @pytest.mark.asyncio
    async def test_waitlisted_can_be_rejected(self, db_session: AsyncSession, employee, manager):
        session = await TrainingSessionFactory.create(db_session)
        nomination = await NominationFactory.create(
            db_session, session.id, employee.id, status="WAITLIST"
        )

        rejected = await workflow.reject(db_session, nomination.id, "No seat opened", manager)

        assert rejected.status == "REJECTED"


class TestWaitlist:
    @pytest.mark.asyncio
    async def test_waitlist_with_and_without_reason(
        self, db_session: AsyncSession, employee, manager, hr_admin
    ):
        session = await TrainingSessionFactory.create(db_session)
        other = await UserFactory.create(db_session, manager_id=manager.id)
        first = await NominationFactory.create(db_session, session.id, employee.id)
        second = await NominationFactory.create(db_session, session.id, other.id)

        with_reason = await workflow.waitlist(db_session, first.id, "Training is full", hr_admin)
        without_reason = await workflow.waitlist(db_session, second.id, None, manager)

        assert with_reason.status == "WAITLIST"
        assert with_reason.reason == "Training is full"
        assert without_reason.status == "WAITLIST"
        assert without_reason.reason is None

    @pytest.mark.asyncio
    async def test_waitlist_then_approve(self, db_session: AsyncSession, employee, hr_admin):
        session = await TrainingSessionFactory.create(db_session)
        nomination = await workflow.nominate(db_session, session.id, employee.id, "SELF")

        await workflow.waitlist(db_session, nomination.id, "Waiting for a seat", hr_admin)
        approved = await workflow.approve(db_session, nomination.id, hr_admin)

        assert approved.status == "APPROVED"

        history = await workflow.get_history(db_session, nomination.id, hr_admin)
        assert [(h.action, h.from_status, h.to_status) for h in history] == [
            ("CREATE", None, "PENDING"),
            ("WAITLIST", "PENDING", "WAITLIST"),
            ("APPROVE", "WAITLIST", "APPROVED"),
        ]
        assert history[1].reason == "Waiting for a seat"

    @pytest.mark.asyncio
    async def test_cannot_waitlist_twice(self, db_session: AsyncSession, employee, hr_admin):
        session = await TrainingSessionFactory.create(db_session)
        nomination = await NominationFactory.create(
            db_session, session.id, employee.id, status="WAITLIST"
        )

        with pytest.raises(StateError):
            await workflow.waitlist(db_session, nomination.id, None, hr_admin)

    @pytest.mark.asyncio
    async def test_employee_cannot_waitlist(self, db_session: AsyncSession, employee):
        session = await TrainingSessionFactory.create(db_session)
        nomination = await NominationFactory.create(db_session, session.id, employee.id)

        with pytest.raises(AuthorizationError):
            await workflow.waitlist(db_session, nomination.id, None, employee)


class TestMissingNomination:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("action", ["approve", "reject", "waitlist"])
    async def test_transitions_on_unknown_id_not_found(
        self, db_session: AsyncSession, hr_admin, action
    ):
        with pytest.raises(NotFoundError) as exc_info:
            if action == "approve":
                await workflow.approve(db_session, 31337, hr_admin)
            elif action == "reject":
                await workflow.reject(db_session, 31337, "Reason", hr_admin)
            else:
                await workflow.waitlist(db_session, 31337, None, hr_admin)

        assert exc_info.value.details == {"resource": "Nomination", "resource_id": "31337"}


class TestCapacityOnApproval:
    @pytest.mark.asyncio
    async def test_approval_into_full_session_conflicts(
        self, db_session: AsyncSession, employee, hr_admin
    ):
        session = await TrainingSessionFactory.create(db_session, max_participants=1)
        seated = await UserFactory.create(db_session)
        await TrainingEnrollmentFactory.create(db_session, session.id, seated.id)
        nomination = await NominationFactory.create(db_session, session.id, employee.id)

        with pytest.raises(ConflictError) as exc_info:
            await workflow.approve(db_session, nomination.id, hr_admin)

        assert exc_info.value.details["max_participants"] == 1
        await db_session.refresh(nomination)
        assert nomination.status == "PENDING"

    @pytest.mark.asyncio
    async def test_approved_nominations_consume_seats(
        self, db_session: AsyncSession, employee, hr_admin
    ):
        session = await TrainingSessionFactory.create(db_session, max_participants=1)
        other = await UserFactory.create(db_session)
        first = await NominationFactory.create(db_session, session.id, other.id)
        second = await NominationFactory.create(db_session, session.id, employee.id)

        await workflow.approve(db_session, first.id, hr_admin)

        with pytest.raises(ConflictError):
            await workflow.approve(db_session, second.id, hr_admin)

    @pytest.mark.asyncio
    async def test_already_enrolled_employee_does_not_need_a_seat(
        self, db_session: AsyncSession, employee, hr_admin
    ):
        session = await TrainingSessionFactory.create(db_session, max_participants=1)
        await TrainingEnrollmentFactory.create(db_session, session.id, employee.id)
        nomination = await NominationFactory.create(db_session, session.id, employee.id)

        approved = await workflow.approve(db_session, nomination.id, hr_admin)

        assert approved.status == "APPROVED"

    @pytest.mark.asyncio
    async def test_unlimited_session_never_full(self, db_session: AsyncSession, hr_admin):
        session = await TrainingSessionFactory.create(db_session, max_participants=None)
        for _ in range(3):
            user = await UserFactory.create(db_session)
            nomination = await NominationFactory.create(db_session, session.id, user.id)
            approved = await workflow.approve(db_session, nomination.id, hr_admin)
            assert approved.status == "APPROVED"


class TestAuthorizeNomination:
    @pytest.mark.asyncio
    async def test_self_only_for_oneself(self, db_session: AsyncSession, employee, hr_admin):
        workflow.authorize_nomination(employee, employee, NominationSource.SELF)

        with pytest.raises(AuthorizationError):
            workflow.authorize_nomination(hr_admin, employee, NominationSource.SELF)

    @pytest.mark.asyncio
    async def test_manager_only_for_direct_reports(
        self, db_session: AsyncSession, employee, manager
    ):
        stranger = await UserFactory.create(db_session)

        workflow.authorize_nomination(manager, employee, NominationSource.MANAGER)
        with pytest.raises(AuthorizationError):
            workflow.authorize_nomination(manager, stranger, NominationSource.MANAGER)

    @pytest.mark.asyncio
    async def test_hr_source_reserved_for_hr_admins(
        self, db_session: AsyncSession, employee, manager, hr_admin
    ):
        workflow.authorize_nomination(hr_admin, employee, NominationSource.HR)

        for actor in (employee, manager):
            with pytest.raises(AuthorizationError):
                workflow.authorize_nomination(actor, employee, NominationSource.HR)


class TestListNominations:
    @pytest.mark.asyncio
    async def test_employee_sees_only_own(
        self, db_session: AsyncSession, employee, manager, hr_admin
    ):
        session = await TrainingSessionFactory.create(db_session)
        other = await UserFactory.create(db_session)
        mine = await NominationFactory.create(db_session, session.id, employee.id)
        await NominationFactory.create(db_session, session.id, other.id)

        own = await workflow.list_nominations(db_session, employee)
        everything = await workflow.list_nominations(db_session, hr_admin)
        for_manager = await workflow.list_nominations(db_session, manager)

        assert [n.id for n in own] == [mine.id]
        assert len(everything) == 2
        assert len(for_manager) == 2

    @pytest.mark.asyncio
    async def test_employee_cannot_filter_by_someone_else(
        self, db_session: AsyncSession, employee
    ):
        other = await UserFactory.create(db_session)

        with pytest.raises(AuthorizationError):
            await workflow.list_nominations(db_session, employee, employee_id=other.id)

    @pytest.mark.asyncio
    async def test_filter_by_session(self, db_session: AsyncSession, employee, hr_admin):
        first = await TrainingSessionFactory.create(db_session, title="Forklift Refresher")
        second = await TrainingSessionFactory.create(db_session, title="First Aid")
        await NominationFactory.create(db_session, first.id, employee.id)
        wanted = await NominationFactory.create(db_session, second.id, employee.id)

        result = await workflow.list_nominations(db_session, hr_admin, session_id=second.id)

        assert [n.id for n in result] == [wanted.id]

    @pytest.mark.asyncio
    async def test_employee_cannot_read_another_employees_nomination(
        self, db_session: AsyncSession, employee
    ):
        session = await TrainingSessionFactory.create(db_session)
        other = await UserFactory.create(db_session, role=UserRole.EMPLOYEE.value)
        theirs = await NominationFactory.create(db_session, session.id, other.id)

        with pytest.raises(AuthorizationError):
            await workflow.get_nomination(db_session, theirs.id, employee)


class TestOneActiveNominationInvariant:
    @pytest.mark.asyncio
    async def test_invariant_holds_across_a_full_lifecycle(
        self, db_session: AsyncSession, employee, hr_admin
    ):
        session = await TrainingSessionFactory.create(db_session)

        first = await workflow.nominate(db_session, session.id, employee.id, "SELF")
        with pytest.raises(ConflictError):
            await workflow.nominate(db_session, session.id, employee.id, "SELF")

        await workflow.reject(db_session, first.id, "Wrong shift", hr_admin)
        second = await workflow.nominate(db_session, session.id, employee.id, "SELF")
        await workflow.waitlist(db_session, second.id, None, hr_admin)
        with pytest.raises(ConflictError):
            await workflow.nominate(db_session, session.id, employee.id, "SELF")

        result = await db_session.execute(
            select(Nomination).where(
                Nomination.session_id == session.id,
                Nomination.employee_id == employee.id,
            )
        )
        rows = result.scalars().all()
        assert len(rows) == 2
        assert sum(1 for n in rows if n.status != "REJECTED") == 1


class TestConcurrentDecisions:
    @pytest.mark.asyncio
    async def test_decision_lost_to_concurrent_request_fails(
        self, db_session: AsyncSession, employee, hr_admin, monkeypatch
    ):
        session = await TrainingSessionFactory.create(db_session)
        nomination = await NominationFactory.create(db_session, session.id, employee.id)

        async def rejected_meanwhile(db, nom, training_session):
            # Another request rejects between the status read and the guarded UPDATE
            await db.execute(
                update(Nomination)
                .where(Nomination.id == nom.id)
                .values(status="REJECTED", reason="Decided elsewhere")
                .execution_options(synchronize_session=False)
            )

        monkeypatch.setattr(workflow, "_check_capacity", rejected_meanwhile)

        with pytest.raises(StateError) as exc_info:
            await workflow.approve(db_session, nomination.id, hr_admin)

        assert "changed by another request" in exc_info.value.message
        assert exc_info.value.details["status"] == "PENDING"

        await db_session.refresh(nomination)
        assert nomination.status == "REJECTED"
        assert nomination.decided_by is None

        result = await db_session.execute(
            select(NominationAuditLog).where(NominationAuditLog.nomination_id == nomination.id)
        )
        assert result.scalars().all() == []

    @pytest.mark.asyncio
    async def test_nomination_lost_to_concurrent_insert_keeps_session_usable(
        self, db_session: AsyncSession, employee, monkeypatch
    ):
        session = await TrainingSessionFactory.create(db_session)
        other_session = await TrainingSessionFactory.create(db_session, title="First Aid")
        await NominationFactory.create(db_session, session.id, employee.id)

        async def not_seen_yet(db, session_id, employee_id):
            return None

        monkeypatch.setattr(workflow, "get_active_nomination", not_seen_yet)

        with pytest.raises(ConflictError):
            await workflow.nominate(db_session, session.id, employee.id, "SELF")

        # Only the failed insert was undone; loaded objects and the transaction survive
        assert employee.email == "employee@example.com"
        nomination = await workflow.nominate(db_session, other_session.id, employee.id, "SELF")
        await db_session.commit()

        result = await db_session.execute(
            select(Nomination).where(Nomination.employee_id == employee.id)
        )
        assert sorted(n.session_id for n in result.scalars().all()) == sorted(
            [session.id, nomination.session_id]
        )


class TestClosedSessionDecisions:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("session_status", [SessionStatus.CANCELLED, SessionStatus.COMPLETED])
    async def test_no_approval_or_waitlist_after_session_closes(
        self, db_session: AsyncSession, employee, hr_admin, session_status
    ):
        session = await TrainingSessionFactory.create(db_session)
        nomination = await workflow.nominate(db_session, session.id, employee.id, "SELF")
        session.status = session_status.value
        await db_session.commit()

        with pytest.raises(ConflictError) as approve_exc:
            await workflow.approve(db_session, nomination.id, hr_admin)
        with pytest.raises(ConflictError):
            await workflow.waitlist(db_session, nomination.id, None, hr_admin)

        assert approve_exc.value.details["session_status"] == session_status.value
        await db_session.refresh(nomination)
        assert nomination.status == "PENDING"

    @pytest.mark.asyncio
    async def test_nomination_can_still_be_rejected_after_cancellation(
        self, db_session: AsyncSession, employee, hr_admin
    ):
        session = await TrainingSessionFactory.create(db_session)
        nomination = await NominationFactory.create(
            db_session, session.id, employee.id, status="WAITLIST"
        )
        session.status = SessionStatus.CANCELLED.value
        await db_session.commit()

        rejected = await workflow.reject(db_session, nomination.id, "Session cancelled", hr_admin)

        assert rejected.status == "REJECTED"
