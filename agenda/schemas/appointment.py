"""
Schemas para Appointment — reserva de turnos y cambio de duración.
"""

from datetime import date, time
from uuid import UUID

from pydantic import BaseModel, Field

from agenda.models.appointment import AppointmentStatus


class AppointmentCreate(BaseModel):
    doctor_id: UUID
    patient_id: UUID | None = None
    appointment_date: date
    appointment_time: str = Field(..., description="HH:mm o HH:mm:ss")
    notes: str | None = Field(None, max_length=2000)


class OverrideDurationRequest(BaseModel):
    """Cambio de duración de una cita puntual."""
    new_duration_minutes: int
    reason: str | None = Field(None, max_length=500)


class AppointmentResponse(BaseModel):
    id: UUID
    doctor_id: UUID
    patient_id: UUID | None = None
    appointment_date: date
    appointment_time: time
    duration_minutes: int
    token_number: int
    status: AppointmentStatus
    notes: str | None = None
    is_duration_overridden: bool
    override_reason: str | None = None
    original_duration_minutes: int | None = None

    model_config = {"from_attributes": True}


class TokenResponse(BaseModel):
    doctor_id: UUID
    date: date
    time: str
    token_number: int
