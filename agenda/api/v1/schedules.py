"""
Endpoints para gestión de horarios de doctores.
"""

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from agenda.database import get_db
from agenda.engine import DurationInfo, describe_duration
from agenda.schemas.schedule import (
    DoctorScheduleCreate,
    DoctorScheduleResponse,
    DoctorScheduleUpdate,
    SlotResponse,
)
from agenda.schemas.unavailability import (
    AvailabilityCheckResponse,
    UnavailabilityCreate,
    UnavailabilityResponse,
)
from agenda.services import schedule_service, token_service, unavailability_service

router = APIRouter()


@router.post("", response_model=list[DoctorScheduleResponse], status_code=201)
async def create_schedules(
    data: DoctorScheduleCreate,
    db: AsyncSession = Depends(get_db),
):
    """Crea un horario por cada día laborable indicado."""
    schedules = await schedule_service.create_schedules(db, data)
    return [schedule_service.schedule_to_response(s) for s in schedules]


@router.get("/doctor/{doctor_id}", response_model=list[DoctorScheduleResponse])
async def get_doctor_schedules(
    doctor_id: UUID,
    include_inactive: bool = Query(False),
    db: AsyncSession = Depends(get_db),
):
    """Obtiene los horarios de un doctor."""
    schedules = await schedule_service.get_doctor_schedules(
        db, doctor_id=doctor_id, include_inactive=include_inactive
    )
    return [schedule_service.schedule_to_response(s) for s in schedules]


# ── No disponibilidad ────────────────────────────────
@router.post("/unavailability", response_model=UnavailabilityResponse, status_code=201)
async def add_unavailability(
    data: UnavailabilityCreate,
    db: AsyncSession = Depends(get_db),
):
    """Registra vacaciones, licencia o una franja bloqueada del doctor."""
    return await unavailability_service.add_unavailability(db, data)


@router.get("/doctor/{doctor_id}/unavailability", response_model=list[UnavailabilityResponse])
async def get_doctor_unavailability(
    doctor_id: UUID,
    start_date: date | None = Query(None),
    end_date: date | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    return await unavailability_service.get_doctor_unavailability(
        db, doctor_id, start_date, end_date
    )


@router.delete("/unavailability/{unavailability_id}", status_code=204)
async def delete_unavailability(
    unavailability_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    await unavailability_service.delete_unavailability(db, unavailability_id)


@router.get("/doctor/{doctor_id}/availability", response_model=AvailabilityCheckResponse)
async def check_doctor_availability(
    doctor_id: UUID,
    target_date: date = Query(..., alias="date", description="YYYY-MM-DD"),
    slot_time: str = Query(..., alias="time", description="HH:mm o HH:mm:ss"),
    db: AsyncSession = Depends(get_db),
):
    """Indica si el doctor puede recibir una cita en esa fecha y hora."""
    return await token_service.check_doctor_availability(db, doctor_id, target_date, slot_time)


# ── Horario puntual ──────────────────────────────────
@router.get("/{schedule_id}", response_model=DoctorScheduleResponse)
async def get_schedule(
    schedule_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    schedule = await schedule_service.get_schedule(db, schedule_id)
    return schedule_service.schedule_to_response(schedule)


@router.put("/{schedule_id}", response_model=DoctorScheduleResponse)
async def update_schedule(
    schedule_id: UUID,
    data: DoctorScheduleUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Modifica un horario; el resultado se valida completo."""
    schedule = await schedule_service.update_schedule(db, schedule_id, data)
    return schedule_service.schedule_to_response(schedule)


@router.get("/{schedule_id}/duration-info", response_model=DurationInfo)
async def get_duration_info(
    schedule_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    """Desglose de minutos de trabajo, duración efectiva y turnos esperados."""
    schedule = await schedule_service.get_schedule(db, schedule_id)
    return describe_duration(schedule_service.to_definition(schedule))


@router.get("/{schedule_id}/slots", response_model=list[SlotResponse])
async def preview_slots(
    schedule_id: UUID,
    target_date: date = Query(..., alias="date", description="YYYY-MM-DD"),
    db: AsyncSession = Depends(get_db),
):
    """Grilla de slots y turnos del horario para una fecha, sin reservas."""
    return await schedule_service.preview_slots(db, schedule_id, target_date)


@router.delete("/{schedule_id}", status_code=204)
async def delete_schedule(
    schedule_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    """Desactiva un horario (soft delete)."""
    await schedule_service.deactivate_schedule(db, schedule_id)
