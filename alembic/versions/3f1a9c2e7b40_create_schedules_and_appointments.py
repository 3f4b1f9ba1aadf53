"""create doctor_schedules and appointments

Revision ID: 3f1a9c2e7b40
Revises:
Create Date: 2026-10-19

Horarios con política de duración (DIRECT / TOKEN_BASED) y citas con
turno asignado y auditoría del cambio de duración.
"""
from typing import Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1a9c2e7b40'
down_revision: Union[str, None] = None
branch_labels: Union[str, None] = None
depends_on: Union[str, None] = None

DAY_OF_WEEK = sa.Enum(
    'SUNDAY', 'MONDAY', 'TUESDAY', 'WEDNESDAY', 'THURSDAY', 'FRIDAY', 'SATURDAY',
    name='dayofweek',
)
DURATION_CONFIG_TYPE = sa.Enum('DIRECT', 'TOKEN_BASED', name='durationconfigtype')
APPOINTMENT_STATUS = sa.Enum(
    'SCHEDULED', 'CONFIRMED', 'IN_PROGRESS', 'COMPLETED', 'NO_SHOW', 'CANCELLED',
    name='appointmentstatus',
)


def upgrade() -> None:
    # 1. doctor_schedules
    op.create_table(
        'doctor_schedules',
        sa.Column('id', sa.Uuid, primary_key=True),
        sa.Column('doctor_id', sa.Uuid, nullable=False),
        sa.Column('day_of_week', DAY_OF_WEEK, nullable=False),
        sa.Column('start_time', sa.Time, nullable=False),
        sa.Column('end_time', sa.Time, nullable=False),
        sa.Column('break_start_time', sa.Time, nullable=True),
        sa.Column('break_end_time', sa.Time, nullable=True),
        sa.Column('duration_config_type', DURATION_CONFIG_TYPE, nullable=False),
        sa.Column('duration_minutes', sa.Integer, nullable=True,
                  comment='Solo DIRECT: duración de cada slot en minutos'),
        sa.Column('target_tokens_per_day', sa.Integer, nullable=True,
                  comment='Solo TOKEN_BASED: meta de turnos por día'),
        sa.Column('effective_date', sa.Date, nullable=True),
        sa.Column('end_date', sa.Date, nullable=True),
        sa.Column('notes', sa.String(500), nullable=True),
        sa.Column('is_active', sa.Boolean, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('idx_schedule_doctor_day', 'doctor_schedules', ['doctor_id', 'day_of_week'])

    # 2. appointments
    op.create_table(
        'appointments',
        sa.Column('id', sa.Uuid, primary_key=True),
        sa.Column('doctor_id', sa.Uuid, nullable=False),
        sa.Column('patient_id', sa.Uuid, nullable=True),
        sa.Column('appointment_date', sa.Date, nullable=False),
        sa.Column('appointment_time', sa.Time, nullable=False),
        sa.Column('duration_minutes', sa.Integer, nullable=False),
        sa.Column('token_number', sa.Integer, nullable=False),
        sa.Column('status', APPOINTMENT_STATUS, nullable=True),
        sa.Column('notes', sa.Text, nullable=True),
        sa.Column('is_duration_overridden', sa.Boolean, server_default=sa.false()),
        sa.Column('override_reason', sa.String(500), nullable=True),
        sa.Column('original_duration_minutes', sa.Integer, nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('idx_appointment_doctor_date', 'appointments', ['doctor_id', 'appointment_date'])


def downgrade() -> None:
    op.drop_index('idx_appointment_doctor_date', table_name='appointments')
    op.drop_table('appointments')
    op.drop_index('idx_schedule_doctor_day', table_name='doctor_schedules')
    op.drop_table('doctor_schedules')

    bind = op.get_bind()
    APPOINTMENT_STATUS.drop(bind, checkfirst=True)
    DURATION_CONFIG_TYPE.drop(bind, checkfirst=True)
    DAY_OF_WEEK.drop(bind, checkfirst=True)
