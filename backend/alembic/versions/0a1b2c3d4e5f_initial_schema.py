"""initial schema

Revision ID: 0a1b2c3d4e5f
Revises:
Create Date: 2026-10-19

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = '0a1b2c3d4e5f'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'settings',
        sa.Column('key', sa.String(length=100), nullable=False),
        sa.Column('value', sa.Text(), nullable=False, server_default=''),
        sa.PrimaryKeyConstraint('key'),
    )

    op.create_table(
        'mentors',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_mentors_email'), 'mentors', ['email'], unique=True)

    op.create_table(
        'students',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'seasons',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'shift_templates',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('day_of_week', sa.Integer(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('label', sa.String(length=100), nullable=False, server_default=''),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_shift_templates_day_of_week'), 'shift_templates', ['day_of_week'], unique=False)

    op.create_table(
        'shifts',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('label', sa.String(length=100), nullable=False, server_default=''),
        sa.Column('cancelled', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('template_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.ForeignKeyConstraint(['template_id'], ['shift_templates.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_shifts_date'), 'shifts', ['date'], unique=False)
    op.create_index(op.f('ix_shifts_template_id'), 'shifts', ['template_id'], unique=False)

    op.create_table(
        'signups',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('shift_id', sa.Integer(), nullable=False),
        sa.Column('mentor_id', sa.Integer(), nullable=False),
        sa.Column('custom_start_time', sa.Time(), nullable=True),
        sa.Column('custom_end_time', sa.Time(), nullable=True),
        sa.Column('note', sa.String(length=500), nullable=False, server_default=''),
        sa.Column('signed_up_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('checked_in_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('checked_out_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['mentor_id'], ['mentors.id']),
        sa.ForeignKeyConstraint(['shift_id'], ['shifts.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('shift_id', 'mentor_id', name='uq_signups_shift_mentor'),
    )
    op.create_index(op.f('ix_signups_shift_id'), 'signups', ['shift_id'], unique=False)
    op.create_index(op.f('ix_signups_mentor_id'), 'signups', ['mentor_id'], unique=False)

    op.create_table(
        'hour_adjustments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('mentor_id', sa.Integer(), nullable=False),
        sa.Column('hours', sa.Float(), nullable=False),
        sa.Column('reason', sa.String(length=500), nullable=False, server_default=''),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.ForeignKeyConstraint(['mentor_id'], ['mentors.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_hour_adjustments_mentor_id'), 'hour_adjustments', ['mentor_id'], unique=False)
    op.create_index(op.f('ix_hour_adjustments_date'), 'hour_adjustments', ['date'], unique=False)

    op.create_table(
        'student_attendance',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('student_id', sa.Integer(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('checked_in_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('checked_out_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['student_id'], ['students.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('student_id', 'date', name='uq_student_attendance_student_date'),
    )
    op.create_index(op.f('ix_student_attendance_student_id'), 'student_attendance', ['student_id'], unique=False)
    op.create_index(op.f('ix_student_attendance_date'), 'student_attendance', ['date'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_student_attendance_date'), table_name='student_attendance')
    op.drop_index(op.f('ix_student_attendance_student_id'), table_name='student_attendance')
    op.drop_table('student_attendance')

    op.drop_index(op.f('ix_hour_adjustments_date'), table_name='hour_adjustments')
    op.drop_index(op.f('ix_hour_adjustments_mentor_id'), table_name='hour_adjustments')
    op.drop_table('hour_adjustments')

    op.drop_index(op.f('ix_signups_mentor_id'), table_name='signups')
    op.drop_index(op.f('ix_signups_shift_id'), table_name='signups')
    op.drop_table('signups')

    op.drop_index(op.f('ix_shifts_template_id'), table_name='shifts')
    op.drop_index(op.f('ix_shifts_date'), table_name='shifts')
    op.drop_table('shifts')

    op.drop_index(op.f('ix_shift_templates_day_of_week'), table_name='shift_templates')
    op.drop_table('shift_templates')

    op.drop_table('seasons')
    op.drop_table('students')

    op.drop_index(op.f('ix_mentors_email'), table_name='mentors')
    op.drop_table('mentors')

    op.drop_table('settings')
