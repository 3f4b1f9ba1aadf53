"""
Servicio de horarios de doctores: alta, consulta, desglose de duración
y vista previa de slots. Las invariantes las valida el motor de turnos.
"""

import logging
from datetime import date
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from agenda.core.exceptions import ConflictException, InvalidSchedule, NotFoundException
from agenda.engine import (
    ScheduleDefinition,
    build_schedule,
    describe_duration,
    generate_slots,
)
from agenda.engine.definitions import DayOfWeek, DurationConfigType
from agenda.models.doctor_schedule import DoctorSchedule
from agenda.schemas.schedule import (
    DoctorScheduleCreate,
    DoctorScheduleResponse,
    DoctorScheduleUpdate,
    SlotResponse,
)

logger = logging.getLogger(__name__)


# ── Helpers ──────────────────────────────────────────

def to_definition(schedule: DoctorSchedule) -> ScheduleDefinition:
    """Convierte una fila DoctorSchedule al tipo del motor."""
    is_direct = schedule.duration_config_type == DurationConfigType.DIRECT
    return build_schedule(
        doctor_id=schedule.doctor_id,
        day_of_week=schedule.day_of_week,
        start_time=schedule.start_time,
        end_time=schedule.end_time,
        break_start_time=schedule.break_start_time,
        break_end_time=schedule.break_end_time,
        duration_config_type=schedule.duration_config_type,
        duration_minutes=schedule.duration_minutes if is_direct else None,
        target_tokens_per_day=None if is_direct else schedule.target_tokens_per_day,
        effective_date=schedule.effective_date,
        end_date=schedule.end_date,
        is_active=schedule.is_active,
    )


def schedule_to_response(schedule: DoctorSchedule) -> DoctorScheduleResponse:
    """Convierte un DoctorSchedule a su schema de respuesta con datos calculados."""
    info = describe_duration(to_definition(schedule))
    return DoctorScheduleResponse(
        id=schedule.id,
        doctor_id=schedule.doctor_id,
        day_of_week=schedule.day_of_week,
        start_time=schedule.start_time,
        end_time=schedule.end_time,
        break_start_time=schedule.break_start_time,
        break_end_time=schedule.break_end_time,
        duration_config_type=schedule.duration_config_type,
        duration_minutes=schedule.duration_minutes,
        target_tokens_per_day=schedule.target_tokens_per_day,
        effective_date=schedule.effective_date,
        end_date=schedule.end_date,
        notes=schedule.notes,
        is_active=schedule.is_active,
        effective_duration=info.effective_duration,
        available_working_minutes=info.available_working_minutes,
        expected_tokens=info.expected_tokens,
    )


def _validity_overlaps(
    a_start: date | None, a_end: date | None,
    b_start: date | None, b_end: date | None,
) -> bool:
    """Dos ventanas de vigencia (None = sin límite) se superponen."""
    return (a_start or date.min) <= (b_end or date.max) and (b_start or date.min) <= (a_end or date.max)


async def _ensure_no_overlap(
    db: AsyncSession,
    definition: ScheduleDefinition,
    exclude_id: UUID | None = None,
) -> None:
    """
    Un doctor tiene a lo sumo un horario activo por día de la semana en
    cada ventana de vigencia, aunque las franjas horarias no se crucen.
    """
    query = select(DoctorSchedule).where(
        DoctorSchedule.doctor_id == definition.doctor_id,
        DoctorSchedule.day_of_week == definition.day_of_week,
        DoctorSchedule.is_active.is_(True),
    )
    if exclude_id is not None:
        query = query.where(DoctorSchedule.id != exclude_id)

    result = await db.execute(query)
    for existing in result.scalars().all():
        if _validity_overlaps(
            existing.effective_date, existing.end_date,
            definition.effective_date, definition.end_date,
        ):
            raise ConflictException(
                f"Ya existe un horario activo para este doctor el "
                f"{definition.day_of_week.value} en ese período"
            )


# ── CRUD ─────────────────────────────────────────────

async def create_schedules(
    db: AsyncSession,
    data: DoctorScheduleCreate,
) -> list[DoctorSchedule]:
    """Crea un horario por cada día laborable indicado."""
    created: list[DoctorSchedule] = []

    for day in dict.fromkeys(data.working_days):
        definition = build_schedule(
            doctor_id=data.doctor_id,
            day_of_week=day,
            start_time=data.start_time,
            end_time=data.end_time,
            break_start_time=data.break_start_time,
            break_end_time=data.break_end_time,
            duration_config_type=data.duration_config_type,
            duration_minutes=data.duration_minutes,
            target_tokens_per_day=data.target_tokens_per_day,
            effective_date=data.effective_date,
            end_date=data.end_date,
        )
        # La duración efectiva tiene que ser calculable al momento del alta
        describe_duration(definition)

        await _ensure_no_overlap(db, definition)

        schedule = DoctorSchedule(
            doctor_id=definition.doctor_id,
            day_of_week=definition.day_of_week,
            start_time=definition.start_time,
            end_time=definition.end_time,
            break_start_time=definition.break_window.start_time if definition.break_window else None,
            break_end_time=definition.break_window.end_time if definition.break_window else None,
            duration_config_type=definition.duration_config_type,
            duration_minutes=data.duration_minutes,
            target_tokens_per_day=data.target_tokens_per_day,
            effective_date=definition.effective_date,
            end_date=definition.end_date,
            notes=data.notes,
            is_active=True,
        )
        db.add(schedule)
        created.append(schedule)

    await db.flush()
    logger.info(
        "Horarios creados: doctor=%s días=%s tipo=%s",
        data.doctor_id,
        ",".join(d.value for d in data.working_days),
        data.duration_config_type.value,
    )
    return created


async def get_schedule(db: AsyncSession, schedule_id: UUID) -> DoctorSchedule:
    result = await db.execute(
        select(DoctorSchedule).where(DoctorSchedule.id == schedule_id)
    )
    schedule = result.scalar_one_or_none()
    if not schedule:
        raise NotFoundException("Horario")
    return schedule


async def get_doctor_schedules(
    db: AsyncSession,
    doctor_id: UUID,
    include_inactive: bool = False,
) -> list[DoctorSchedule]:
    """Obtiene los horarios de un doctor, ordenados por día y hora."""
    query = select(DoctorSchedule).where(DoctorSchedule.doctor_id == doctor_id)
    if not include_inactive:
        query = query.where(DoctorSchedule.is_active.is_(True))
    result = await db.execute(query)
    week = list(DayOfWeek)
    return sorted(
        result.scalars().all(),
        key=lambda s: (week.index(s.day_of_week), s.start_time),
    )


async def get_definitions_for_date(
    db: AsyncSession,
    doctor_id: UUID,
    target_date: date,
) -> list[tuple[DoctorSchedule, ScheduleDefinition]]:
    """Horarios activos del doctor vigentes en la fecha."""
    result = await db.execute(
        select(DoctorSchedule).where(
            DoctorSchedule.doctor_id == doctor_id,
            DoctorSchedule.day_of_week == DayOfWeek.from_date(target_date),
            DoctorSchedule.is_active.is_(True),
            or_(DoctorSchedule.effective_date.is_(None), DoctorSchedule.effective_date <= target_date),
            or_(DoctorSchedule.end_date.is_(None), DoctorSchedule.end_date >= target_date),
        ).order_by(DoctorSchedule.start_time)
    )
    return [(row, to_definition(row)) for row in result.scalars().all()]


async def preview_slots(
    db: AsyncSession,
    schedule_id: UUID,
    target_date: date,
) -> list[SlotResponse]:
    """Grilla del horario para una fecha, sin conciliar reservas."""
    schedule = await get_schedule(db, schedule_id)
    slots = generate_slots(to_definition(schedule), target_date)
    return [
        SlotResponse(
            time=s.label,
            token_number=s.token_number,
            is_break_time=s.is_break_time,
            is_available=s.is_available,
        )
        for s in slots
    ]


async def update_schedule(
    db: AsyncSession,
    schedule_id: UUID,
    data: DoctorScheduleUpdate,
) -> DoctorSchedule:
    """
    Actualiza un horario. El resultado se valida completo con el motor y
    vuelve a pasar el control de superposición.
    """
    schedule = await get_schedule(db, schedule_id)
    changes = data.model_dump(exclude_unset=True)
    if "is_active" in changes and changes["is_active"] is None:
        raise InvalidSchedule("is_active no puede ser nulo")

    merged = {
        field: changes.get(field, getattr(schedule, field))
        for field in DoctorScheduleUpdate.model_fields
    }
    for field in ("day_of_week", "start_time", "end_time", "duration_config_type"):
        if merged[field] is None:
            raise InvalidSchedule(f"{field} no puede ser nulo")

    # Al cambiar de política se descarta el valor de la otra que no se envió
    is_direct = DurationConfigType(merged["duration_config_type"]) == DurationConfigType.DIRECT
    if is_direct and "target_tokens_per_day" not in changes:
        merged["target_tokens_per_day"] = None
    if not is_direct and "duration_minutes" not in changes:
        merged["duration_minutes"] = None

    definition = build_schedule(
        doctor_id=schedule.doctor_id,
        day_of_week=merged["day_of_week"],
        start_time=merged["start_time"],
        end_time=merged["end_time"],
        break_start_time=merged["break_start_time"],
        break_end_time=merged["break_end_time"],
        duration_config_type=merged["duration_config_type"],
        duration_minutes=merged["duration_minutes"],
        target_tokens_per_day=merged["target_tokens_per_day"],
        effective_date=merged["effective_date"],
        end_date=merged["end_date"],
        is_active=merged["is_active"],
    )
    describe_duration(definition)
    if definition.is_active:
        await _ensure_no_overlap(db, definition, exclude_id=schedule.id)

    schedule.day_of_week = definition.day_of_week
    schedule.start_time = definition.start_time
    schedule.end_time = definition.end_time
    schedule.break_start_time = definition.break_window.start_time if definition.break_window else None
    schedule.break_end_time = definition.break_window.end_time if definition.break_window else None
    schedule.duration_config_type = definition.duration_config_type
    schedule.duration_minutes = merged["duration_minutes"]
    schedule.target_tokens_per_day = merged["target_tokens_per_day"]
    schedule.effective_date = definition.effective_date
    schedule.end_date = definition.end_date
    schedule.notes = merged["notes"]
    schedule.is_active = definition.is_active

    await db.flush()
    logger.info("Horario actualizado: %s campos=%s", schedule_id, ",".join(sorted(changes)))
    return schedule


async def deactivate_schedule(db: AsyncSession, schedule_id: UUID) -> None:
    """Desactiva un horario (soft delete)."""
    schedule = await get_schedule(db, schedule_id)
    schedule.is_active = False
    await db.flush()
    logger.info("Horario desactivado: %s", schedule_id)
