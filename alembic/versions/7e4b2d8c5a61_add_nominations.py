"""add_nominations

Nomination workflow table, its audit trail, and the one-active-nomination
per (session, employee) constraint.

Revision ID: 7e4b2d8c5a61
Revises: 3c9a1f2e7b10
Create Date: 2026-10-12 10:40:00.000000

"""
from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op


# revision identifiers, used by Alembic.
revision: str = '7e4b2d8c5a61'
down_revision: Union[str, None] = '3c9a1f2e7b10'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'nominations',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('session_id', sa.Integer(), nullable=False),
        sa.Column('employee_id', sa.Uuid(), nullable=False),
        sa.Column('source', sa.String(20), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='PENDING'),
        sa.Column('created_by', sa.Uuid(), nullable=True),
        sa.Column('decided_by', sa.Uuid(), nullable=True),
        sa.Column('decided_at', sa.DateTime(), nullable=True),
        sa.Column('reason', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['session_id'], ['training_sessions.id']),
        sa.ForeignKeyConstraint(['employee_id'], ['users.id']),
        sa.ForeignKeyConstraint(['created_by'], ['users.id']),
        sa.ForeignKeyConstraint(['decided_by'], ['users.id']),
    )
    op.create_index(op.f('ix_nominations_session_id'), 'nominations', ['session_id'], unique=False)
    op.create_index(op.f('ix_nominations_employee_id'), 'nominations', ['employee_id'], unique=False)
    op.create_index(op.f('ix_nominations_status'), 'nominations', ['status'], unique=False)

    # Partial unique index: REJECTED rows are history and do not block a new nomination
    op.create_index(
        'uq_nominations_one_active_per_session_employee',
        'nominations',
        ['session_id', 'employee_id'],
        unique=True,
        postgresql_where=sa.text("status <> 'REJECTED'"),
        sqlite_where=sa.text("status <> 'REJECTED'"),
    )

    op.create_table(
        'nomination_audit_logs',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('nomination_id', sa.Integer(), nullable=False),
        sa.Column('changed_by', sa.Uuid(), nullable=True),
        sa.Column('changed_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('action', sa.String(20), nullable=False),
        sa.Column('from_status', sa.String(20), nullable=True),
        sa.Column('to_status', sa.String(20), nullable=False),
        sa.Column('reason', sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['nomination_id'], ['nominations.id']),
        sa.ForeignKeyConstraint(['changed_by'], ['users.id']),
    )
    op.create_index(op.f('ix_nomination_audit_logs_nomination_id'), 'nomination_audit_logs', ['nomination_id'], unique=False)
    op.create_index(op.f('ix_nomination_audit_logs_changed_at'), 'nomination_audit_logs', ['changed_at'], unique=False)


def downgrade() -> None:
    op.drop_table('nomination_audit_logs')
    op.drop_index('uq_nominations_one_active_per_session_employee', table_name='nominations')
    op.drop_table('nominations')
