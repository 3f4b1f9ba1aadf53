"""
Endpoints de citas: reserva, cambio de duración y cancelación.
"""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from agenda.database import get_db
from agenda.schemas.appointment import (
    AppointmentCreate,
    AppointmentResponse,
    OverrideDurationRequest,
)
from agenda.services import appointment_service

router = APIRouter()


@router.post("", response_model=AppointmentResponse, status_code=201)
async def book_appointment(
    data: AppointmentCreate,
    db: AsyncSession = Depends(get_db),
):
    """Reserva una cita en un turno libre del día."""
    return await appointment_service.book_appointment(db, data)


@router.get("/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(
    appointment_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    return await appointment_service.get_appointment(db, appointment_id)


@router.patch("/{appointment_id}/duration", response_model=AppointmentResponse)
async def override_duration(
    appointment_id: UUID,
    data: OverrideDurationRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    Cambia la duración de una cita puntual.
    Requiere motivo; los turnos siguientes no se re-numeran.
    """
    return await appointment_service.override_duration(db, appointment_id, data)


@router.post("/{appointment_id}/cancel", response_model=AppointmentResponse)
async def cancel_appointment(
    appointment_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    """Cancela una cita y libera su turno."""
    return await appointment_service.cancel_appointment(db, appointment_id)
