"""
Servicio de citas: reserva sobre la grilla de turnos, cambio de duración
auditado y cancelación.
"""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from agenda.config import get_settings
from agenda.core.exceptions import (
    NotFoundException,
    SlotUnavailable,
    ValidationException,
)
from agenda.engine import OverrideRequest, ensure_bookable, validate_override
from agenda.engine.time_arithmetic import format_time, parse_time
from agenda.models.appointment import RELEASED_STATUSES, Appointment, AppointmentStatus
from agenda.schemas.appointment import AppointmentCreate, OverrideDurationRequest
from agenda.services.token_service import appointment_to_booking, load_day_agenda

logger = logging.getLogger(__name__)
settings = get_settings()


async def get_appointment(db: AsyncSession, appointment_id: UUID) -> Appointment:
    result = await db.execute(
        select(Appointment).where(Appointment.id == appointment_id)
    )
    appt = result.scalar_one_or_none()
    if not appt:
        raise NotFoundException("Cita")
    return appt


async def book_appointment(
    db: AsyncSession,
    data: AppointmentCreate,
) -> Appointment:
    """
    Reserva una cita en un slot del día.

    El turno se toma de la grilla y la duración es la efectiva del horario.
    Se rechaza si el slot no existe, es de descanso, ya está tomado o queda
    dentro de la ocupación real de otra cita.
    """
    requested = parse_time(data.appointment_time)
    agenda = await load_day_agenda(db, data.doctor_id, data.appointment_date)
    if agenda.on_leave:
        raise SlotUnavailable(
            f"El doctor tiene licencia el {data.appointment_date.isoformat()}"
        )
    if not agenda.is_working_day:
        raise SlotUnavailable(
            f"El doctor no tiene horario vigente el {data.appointment_date.isoformat()}"
        )

    try:
        slot = ensure_bookable(agenda.result.slots, agenda.bookings, requested)
    except SlotUnavailable as exc:
        logger.warning(
            "Reserva rechazada: doctor=%s fecha=%s hora=%s motivo=%s",
            data.doctor_id, data.appointment_date, format_time(requested), exc.detail,
        )
        raise

    appt = Appointment(
        doctor_id=data.doctor_id,
        patient_id=data.patient_id,
        appointment_date=data.appointment_date,
        appointment_time=slot.time,
        duration_minutes=agenda.effective_duration,
        token_number=slot.token_number,
        status=AppointmentStatus.SCHEDULED,
        notes=data.notes,
        is_duration_overridden=False,
    )
    db.add(appt)
    await db.flush()

    logger.info(
        "Cita reservada: doctor=%s fecha=%s hora=%s turno=%s",
        data.doctor_id, data.appointment_date, slot.label, slot.token_number,
    )
    return appt


async def override_duration(
    db: AsyncSession,
    appointment_id: UUID,
    data: OverrideDurationRequest,
) -> Appointment:
    """
    Cambia la duración de una cita puntual y guarda la auditoría.

    La duración original se conserva a través de cambios sucesivos. No se
    re-numeran los turnos siguientes; si la nueva ocupación pisa otra cita
    solo se registra una advertencia.
    """
    appt = await get_appointment(db, appointment_id)
    if appt.status in RELEASED_STATUSES:
        raise ValidationException("No se puede cambiar la duración de una cita liberada")

    if appt.is_duration_overridden and appt.original_duration_minutes is not None:
        original = appt.original_duration_minutes
    else:
        agenda = await load_day_agenda(db, appt.doctor_id, appt.appointment_date)
        original = agenda.effective_duration or appt.duration_minutes

    record = validate_override(
        OverrideRequest(
            appointment_id=appt.id,
            new_duration_minutes=data.new_duration_minutes,
            reason=data.reason,
        ),
        original,
        min_minutes=settings.OVERRIDE_MIN_DURATION_MINUTES,
        max_minutes=settings.OVERRIDE_MAX_DURATION_MINUTES,
    )

    appt.duration_minutes = record.new_duration_minutes
    appt.is_duration_overridden = True
    appt.override_reason = record.reason
    appt.original_duration_minutes = record.original_duration_minutes
    await db.flush()

    logger.info(
        "Duración modificada: cita=%s %s→%s min motivo=%s",
        appt.id, record.original_duration_minutes, record.new_duration_minutes, record.reason,
    )

    # Reportar solapamientos con citas posteriores del mismo día
    agenda = await load_day_agenda(db, appt.doctor_id, appt.appointment_date)
    booking = appointment_to_booking(appt)
    for other in agenda.bookings:
        if other.appointment_id != appt.id and booking.start_minutes < other.start_minutes < booking.end_minutes:
            logger.warning(
                "La cita %s ahora se superpone con la cita de las %s",
                appt.id, format_time(other.start_time),
            )

    return appt


async def cancel_appointment(db: AsyncSession, appointment_id: UUID) -> Appointment:
    """Cancela una cita; su slot vuelve a quedar disponible."""
    appt = await get_appointment(db, appointment_id)
    if appt.status in RELEASED_STATUSES:
        raise ValidationException("La cita ya fue liberada")
    appt.status = AppointmentStatus.CANCELLED
    await db.flush()
    logger.info("Cita cancelada: %s", appt.id)
    return appt
