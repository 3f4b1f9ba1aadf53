"""
Servicio de no disponibilidad del doctor: alta, consulta y baja de
períodos de licencia, y su lectura por fecha para la agenda del día.
"""

import logging
from datetime import date
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from agenda.core.exceptions import NotFoundException
from agenda.engine import Unavailability, build_unavailability
from agenda.models.doctor_unavailability import DoctorUnavailability
from agenda.schemas.unavailability import UnavailabilityCreate

logger = logging.getLogger(__name__)


def to_unavailability(row: DoctorUnavailability) -> Unavailability:
    return build_unavailability(
        start_date=row.start_date,
        end_date=row.end_date,
        is_all_day=row.is_all_day,
        start_time=row.start_time,
        end_time=row.end_time,
    )


async def add_unavailability(
    db: AsyncSession,
    data: UnavailabilityCreate,
) -> DoctorUnavailability:
    """Registra un período de no disponibilidad validado por el motor."""
    period = build_unavailability(
        start_date=data.start_date,
        end_date=data.end_date,
        is_all_day=data.is_all_day,
        start_time=data.start_time,
        end_time=data.end_time,
    )

    row = DoctorUnavailability(
        doctor_id=data.doctor_id,
        start_date=period.start_date,
        end_date=period.end_date,
        is_all_day=period.is_all_day,
        start_time=period.start_time,
        end_time=period.end_time,
        unavailability_type=data.unavailability_type,
        reason=data.reason.strip(),
        notes=data.notes,
        is_active=True,
    )
    db.add(row)
    await db.flush()

    logger.info(
        "No disponibilidad registrada: doctor=%s %s..%s tipo=%s día_completo=%s",
        data.doctor_id, period.start_date, period.end_date,
        data.unavailability_type.value, period.is_all_day,
    )
    return row


async def get_unavailability(db: AsyncSession, unavailability_id: UUID) -> DoctorUnavailability:
    result = await db.execute(
        select(DoctorUnavailability).where(DoctorUnavailability.id == unavailability_id)
    )
    row = result.scalar_one_or_none()
    if not row:
        raise NotFoundException("No disponibilidad", "No disponibilidad no encontrada")
    return row


async def get_doctor_unavailability(
    db: AsyncSession,
    doctor_id: UUID,
    start_date: date | None = None,
    end_date: date | None = None,
) -> list[DoctorUnavailability]:
    """Períodos activos del doctor que se cruzan con el rango pedido."""
    query = select(DoctorUnavailability).where(
        DoctorUnavailability.doctor_id == doctor_id,
        DoctorUnavailability.is_active.is_(True),
    )
    if start_date:
        query = query.where(DoctorUnavailability.end_date >= start_date)
    if end_date:
        query = query.where(DoctorUnavailability.start_date <= end_date)

    result = await db.execute(
        query.order_by(DoctorUnavailability.start_date, DoctorUnavailability.start_time)
    )
    return list(result.scalars().all())


async def get_unavailability_for_date(
    db: AsyncSession,
    doctor_id: UUID,
    target_date: date,
) -> list[Unavailability]:
    rows = await get_doctor_unavailability(db, doctor_id, target_date, target_date)
    return [to_unavailability(row) for row in rows]


async def delete_unavailability(db: AsyncSession, unavailability_id: UUID) -> None:
    """Da de baja un período (soft delete); sus slots vuelven a la grilla."""
    row = await get_unavailability(db, unavailability_id)
    row.is_active = False
    await db.flush()
    logger.info("No disponibilidad dada de baja: %s", unavailability_id)
