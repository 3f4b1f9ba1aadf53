"""
Servicio de turnos: arma la grilla de slots de un (doctor, fecha),
la concilia con las citas reservadas y expone los mapas hora → turno
que consumen las pantallas de reserva.
"""

import logging
from datetime import date, time
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from agenda.core.exceptions import SlotUnavailable
from agenda.engine import (
    BookedAppointment,
    ReconciliationResult,
    ScheduleDefinition,
    blocked_periods_for,
    ensure_bookable,
    generate_slots,
    is_day_blocked,
    reconcile_availability,
    resolve_effective_duration,
    select_active_schedule,
    token_for_time,
)
from agenda.engine.time_arithmetic import format_time, parse_time
from agenda.models.appointment import RELEASED_STATUSES, Appointment
from agenda.models.doctor_schedule import DoctorSchedule
from agenda.schemas.schedule import DaySlotsResponse, SlotResponse
from agenda.schemas.unavailability import AvailabilityCheckResponse
from agenda.services.schedule_service import get_definitions_for_date
from agenda.services.unavailability_service import get_unavailability_for_date

logger = logging.getLogger(__name__)


class DayAgenda:
    """Grilla conciliada de un doctor para una fecha."""

    def __init__(
        self,
        doctor_id: UUID,
        target_date: date,
        schedule: DoctorSchedule | None = None,
        definition: ScheduleDefinition | None = None,
        effective_duration: int | None = None,
        result: ReconciliationResult | None = None,
        bookings: list[BookedAppointment] | None = None,
        on_leave: bool = False,
    ):
        self.doctor_id = doctor_id
        self.target_date = target_date
        self.schedule = schedule
        self.definition = definition
        self.effective_duration = effective_duration
        self.result = result or ReconciliationResult(slots=[])
        self.bookings = bookings or []
        self.on_leave = on_leave

    @property
    def is_working_day(self) -> bool:
        return self.definition is not None


# ── Carga ────────────────────────────────────────────

def appointment_to_booking(appt: Appointment) -> BookedAppointment:
    return BookedAppointment(
        appointment_id=appt.id,
        start_time=appt.appointment_time,
        duration_minutes=appt.duration_minutes,
        is_duration_overridden=appt.is_duration_overridden,
        override_reason=appt.override_reason,
        original_duration_minutes=appt.original_duration_minutes,
        token_number=appt.token_number,
    )


async def get_booked_appointments(
    db: AsyncSession,
    doctor_id: UUID,
    target_date: date,
) -> list[Appointment]:
    """Citas del doctor en la fecha que ocupan su slot."""
    result = await db.execute(
        select(Appointment).where(
            Appointment.doctor_id == doctor_id,
            Appointment.appointment_date == target_date,
            Appointment.status.not_in(RELEASED_STATUSES),
        ).order_by(Appointment.appointment_time)
    )
    return list(result.scalars().all())


async def load_day_agenda(
    db: AsyncSession,
    doctor_id: UUID,
    target_date: date,
) -> DayAgenda:
    """
    1. Elige el horario vigente para la fecha
    2. Sin grilla si el doctor tiene licencia de día completo
    3. Resuelve la duración efectiva y genera la grilla
    4. Concilia la grilla con las citas reservadas y las franjas bloqueadas
    """
    candidates = await get_definitions_for_date(db, doctor_id, target_date)
    definition = select_active_schedule([d for _, d in candidates], target_date)
    if definition is None:
        return DayAgenda(doctor_id, target_date)

    unavailability = await get_unavailability_for_date(db, doctor_id, target_date)
    if is_day_blocked(unavailability, target_date):
        logger.info("Doctor %s con licencia el %s: sin turnos", doctor_id, target_date)
        return DayAgenda(doctor_id, target_date, on_leave=True)

    schedule = next(row for row, d in candidates if d is definition)
    duration = resolve_effective_duration(definition)
    slots = generate_slots(definition, target_date, duration)

    appointments = await get_booked_appointments(db, doctor_id, target_date)
    bookings = [appointment_to_booking(a) for a in appointments]
    result = reconcile_availability(
        slots, bookings, blocked_periods_for(unavailability, target_date)
    )

    for booking in result.misaligned_bookings:
        logger.warning(
            "Cita fuera de la grilla: doctor=%s fecha=%s hora=%s",
            doctor_id, target_date, format_time(booking.start_time),
        )

    return DayAgenda(doctor_id, target_date, schedule, definition, duration, result, bookings)


# ── Consultas ────────────────────────────────────────

async def get_all_time_slots_with_tokens(
    db: AsyncSession,
    doctor_id: UUID,
    target_date: date,
) -> dict[str, int]:
    """Todos los slots del día con su turno (sin los de descanso)."""
    agenda = await load_day_agenda(db, doctor_id, target_date)
    return agenda.result.all_time_slots_with_tokens()


async def get_available_time_slots_with_tokens(
    db: AsyncSession,
    doctor_id: UUID,
    target_date: date,
) -> dict[str, int]:
    """Slots todavía reservables con su turno."""
    agenda = await load_day_agenda(db, doctor_id, target_date)
    return agenda.result.available_time_slots_with_tokens()


async def get_token_for_time_slot(
    db: AsyncSession,
    doctor_id: UUID,
    target_date: date,
    slot_time: str | time,
) -> int:
    agenda = await load_day_agenda(db, doctor_id, target_date)
    return token_for_time(agenda.result.slots, slot_time)


async def get_day_view(
    db: AsyncSession,
    doctor_id: UUID,
    target_date: date,
) -> DaySlotsResponse:
    """Grilla completa del día, con citas desalineadas y bordes solapados."""
    agenda = await load_day_agenda(db, doctor_id, target_date)
    return DaySlotsResponse(
        doctor_id=doctor_id,
        date=target_date,
        schedule_id=agenda.schedule.id if agenda.schedule else None,
        effective_duration=agenda.effective_duration,
        slots=[
            SlotResponse(
                time=s.label,
                token_number=s.token_number,
                is_break_time=s.is_break_time,
                is_available=s.is_available,
            )
            for s in agenda.result.slots
        ],
        misaligned_bookings=[format_time(b.start_time) for b in agenda.result.misaligned_bookings],
        overlapped_times=[format_time(t) for t in agenda.result.overlapped_times],
    )


async def check_doctor_availability(
    db: AsyncSession,
    doctor_id: UUID,
    target_date: date,
    slot_time: str | time,
) -> AvailabilityCheckResponse:
    """
    Indica si se puede reservar en `slot_time`. Si no, devuelve el motivo
    y el próximo turno libre del mismo día.
    """
    requested = parse_time(slot_time)
    agenda = await load_day_agenda(db, doctor_id, target_date)
    response = AvailabilityCheckResponse(
        doctor_id=doctor_id,
        date=target_date,
        time=format_time(requested),
        is_available=True,
    )

    if agenda.on_leave:
        response.is_available = False
        response.conflict_reason = "El doctor tiene licencia ese día"
        return response
    if not agenda.is_working_day:
        response.is_available = False
        response.conflict_reason = "El doctor no tiene horario vigente ese día"
        return response

    try:
        ensure_bookable(agenda.result.slots, agenda.bookings, requested)
    except SlotUnavailable as exc:
        response.is_available = False
        response.conflict_reason = exc.detail
        response.next_available_time = next(
            (
                label
                for label in agenda.result.available_time_slots_with_tokens()
                if label > response.time
            ),
            None,
        )
    return response
