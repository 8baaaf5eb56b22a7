"""create_training_tables

Users, training catalog, training sessions and enrollments.

Revision ID: 3c9a1f2e7b10
Revises:
Create Date: 2026-10-12 09:15:00.000000

"""
from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op


# revision identifiers, used by Alembic.
revision: str = '3c9a1f2e7b10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('first_name', sa.String(100), nullable=False, server_default=''),
        sa.Column('last_name', sa.String(100), nullable=False, server_default=''),
        sa.Column('role', sa.String(20), nullable=False, server_default='employee'),
        sa.Column('department', sa.String(100), nullable=True),
        sa.Column('employee_number', sa.String(50), nullable=True),
        sa.Column('manager_id', sa.Uuid(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['manager_id'], ['users.id']),
        sa.UniqueConstraint('employee_number'),
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_role'), 'users', ['role'], unique=False)
    op.create_index(op.f('ix_users_department'), 'users', ['department'], unique=False)
    op.create_index(op.f('ix_users_manager_id'), 'users', ['manager_id'], unique=False)
    op.create_index(op.f('ix_users_is_active'), 'users', ['is_active'], unique=False)

    op.create_table(
        'training_catalog',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('type', sa.String(20), nullable=False, server_default='internal'),
        sa.Column('category', sa.String(50), nullable=False),
        sa.Column('duration_hours', sa.Integer(), nullable=False),
        sa.Column('validity_period_months', sa.Integer(), nullable=True),
        sa.Column('is_required', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('compliance_standard', sa.String(100), nullable=True),
        sa.Column('created_by', sa.Uuid(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['created_by'], ['users.id']),
    )
    op.create_index(op.f('ix_training_catalog_title'), 'training_catalog', ['title'], unique=False)
    op.create_index(op.f('ix_training_catalog_category'), 'training_catalog', ['category'], unique=False)

    op.create_table(
        'training_sessions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('catalog_id', sa.Integer(), nullable=True),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('session_date', sa.DateTime(), nullable=False),
        sa.Column('duration_hours', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('venue', sa.String(200), nullable=True),
        sa.Column('trainer_name', sa.String(200), nullable=True),
        sa.Column('max_participants', sa.Integer(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='scheduled'),
        sa.Column('created_by', sa.Uuid(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['catalog_id'], ['training_catalog.id']),
        sa.ForeignKeyConstraint(['created_by'], ['users.id']),
    )
    op.create_index(op.f('ix_training_sessions_catalog_id'), 'training_sessions', ['catalog_id'], unique=False)
    op.create_index(op.f('ix_training_sessions_session_date'), 'training_sessions', ['session_date'], unique=False)
    op.create_index(op.f('ix_training_sessions_status'), 'training_sessions', ['status'], unique=False)

    op.create_table(
        'training_enrollments',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('session_id', sa.Integer(), nullable=False),
        sa.Column('employee_id', sa.Uuid(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='enrolled'),
        sa.Column('completion_date', sa.DateTime(), nullable=True),
        sa.Column('score', sa.Integer(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['session_id'], ['training_sessions.id']),
        sa.ForeignKeyConstraint(['employee_id'], ['users.id']),
        sa.UniqueConstraint('session_id', 'employee_id', name='uq_training_enrollments_session_employee'),
    )
    op.create_index(op.f('ix_training_enrollments_session_id'), 'training_enrollments', ['session_id'], unique=False)
    op.create_index(op.f('ix_training_enrollments_employee_id'), 'training_enrollments', ['employee_id'], unique=False)


def downgrade() -> None:
    op.drop_table('training_enrollments')
    op.drop_table('training_sessions')
    op.drop_table('training_catalog')
    op.drop_table('users')
