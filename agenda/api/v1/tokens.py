"""
Endpoints de turnos: mapas hora → turno para las pantallas de reserva.
"""

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from agenda.database import get_db
from agenda.engine.time_arithmetic import format_time, parse_time
from agenda.schemas.appointment import TokenResponse
from agenda.schemas.schedule import DaySlotsResponse
from agenda.services import token_service

router = APIRouter()


@router.get("/doctor/{doctor_id}/slots", response_model=dict[str, int])
async def get_all_time_slots_with_tokens(
    doctor_id: UUID,
    target_date: date = Query(..., alias="date", description="YYYY-MM-DD"),
    db: AsyncSession = Depends(get_db),
):
    """Todos los slots del día con su número de turno (sin descansos)."""
    return await token_service.get_all_time_slots_with_tokens(db, doctor_id, target_date)


@router.get("/doctor/{doctor_id}/available-slots", response_model=dict[str, int])
async def get_available_time_slots_with_tokens(
    doctor_id: UUID,
    target_date: date = Query(..., alias="date", description="YYYY-MM-DD"),
    db: AsyncSession = Depends(get_db),
):
    """Slots todavía reservables con su número de turno."""
    return await token_service.get_available_time_slots_with_tokens(db, doctor_id, target_date)


@router.get("/doctor/{doctor_id}/token", response_model=TokenResponse)
async def get_token_for_time_slot(
    doctor_id: UUID,
    target_date: date = Query(..., alias="date", description="YYYY-MM-DD"),
    slot_time: str = Query(..., alias="time", description="HH:mm o HH:mm:ss"),
    db: AsyncSession = Depends(get_db),
):
    """Número de turno de un horario puntual."""
    token = await token_service.get_token_for_time_slot(db, doctor_id, target_date, slot_time)
    return TokenResponse(
        doctor_id=doctor_id,
        date=target_date,
        time=format_time(parse_time(slot_time)),
        token_number=token,
    )


@router.get("/doctor/{doctor_id}/day", response_model=DaySlotsResponse)
async def get_day_view(
    doctor_id: UUID,
    target_date: date = Query(..., alias="date", description="YYYY-MM-DD"),
    db: AsyncSession = Depends(get_db),
):
    """Grilla completa del día con el reporte de conciliación."""
    return await token_service.get_day_view(db, doctor_id, target_date)
