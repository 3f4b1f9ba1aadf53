"""create doctor_unavailabilities

Revision ID: 8d2e4b6c1a57
Revises: 3f1a9c2e7b40
Create Date: 2026-10-19

Períodos de no disponibilidad del doctor (día completo o franja horaria).
"""
from typing import Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8d2e4b6c1a57'
down_revision: Union[str, None] = '3f1a9c2e7b40'
branch_labels: Union[str, None] = None
depends_on: Union[str, None] = None

UNAVAILABILITY_TYPE = sa.Enum(
    'VACATION', 'SICK_LEAVE', 'EMERGENCY', 'PERSONAL', 'CONFERENCE', 'TRAINING', 'OTHER',
    name='unavailabilitytype',
)


def upgrade() -> None:
    op.create_table(
        'doctor_unavailabilities',
        sa.Column('id', sa.Uuid, primary_key=True),
        sa.Column('doctor_id', sa.Uuid, nullable=False),
        sa.Column('start_date', sa.Date, nullable=False),
        sa.Column('end_date', sa.Date, nullable=False),
        sa.Column('is_all_day', sa.Boolean, server_default=sa.true()),
        sa.Column('start_time', sa.Time, nullable=True, comment='Solo si no es de día completo'),
        sa.Column('end_time', sa.Time, nullable=True),
        sa.Column('unavailability_type', UNAVAILABILITY_TYPE, nullable=False),
        sa.Column('reason', sa.String(500), nullable=False),
        sa.Column('notes', sa.Text, nullable=True),
        sa.Column('is_active', sa.Boolean, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index(
        'idx_unavailability_doctor_dates',
        'doctor_unavailabilities',
        ['doctor_id', 'start_date', 'end_date'],
    )


def downgrade() -> None:
    op.drop_index('idx_unavailability_doctor_dates', table_name='doctor_unavailabilities')
    op.drop_table('doctor_unavailabilities')
    UNAVAILABILITY_TYPE.drop(op.get_bind(), checkfirst=True)
