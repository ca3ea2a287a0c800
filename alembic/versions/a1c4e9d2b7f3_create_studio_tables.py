"""Create sessions, classes and registrations tables

Revision ID: a1c4e9d2b7f3
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'a1c4e9d2b7f3'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the schedule and the registration ledger."""
    op.create_table(
        'sessions',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('start', sa.DateTime(), nullable=False),
        sa.Column('end', sa.DateTime(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_sessions_end', 'sessions', ['end'])

    op.create_table(
        'classes',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.String(), nullable=True),
        sa.Column('teacher_id', sa.String(), nullable=True),
        sa.Column('weekday', sa.Integer(), nullable=True),
        sa.Column('start_time', sa.Time(), nullable=True),
        sa.Column('duration_minutes', sa.Integer(), nullable=True),
        sa.Column('capacity', sa.Integer(), nullable=False),
        sa.Column('session_id', sa.Integer(), sa.ForeignKey('sessions.id'), nullable=True),
        sa.Column('drop_in_only', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('version', sa.Integer(), nullable=False, server_default='0'),
    )
    op.create_index('ix_classes_title', 'classes', ['title'])
    op.create_index('ix_classes_teacher_id', 'classes', ['teacher_id'])
    op.create_index('ix_classes_session_id', 'classes', ['session_id'])

    op.create_table(
        'registrations',
        sa.Column('class_id', sa.Integer(), sa.ForeignKey('classes.id'), primary_key=True),
        sa.Column('student_id', sa.String(), primary_key=True),
        sa.Column('first_name', sa.String(), nullable=False, server_default=''),
        sa.Column('last_name', sa.String(), nullable=False, server_default=''),
        sa.Column('email', sa.String(), nullable=False, server_default=''),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('kind', sa.String(), nullable=False),
        sa.Column('date', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_registrations_student_id', 'registrations', ['student_id'])
    op.create_index('ix_registrations_email', 'registrations', ['email'])
    op.create_index('ix_registrations_date', 'registrations', ['date'])


def downgrade() -> None:
    """Drop the ledger and the schedule."""
    op.drop_table('registrations')
    op.drop_table('classes')
    op.drop_table('sessions')
