"""
Schemas para no disponibilidad del doctor y chequeo de disponibilidad.
"""

from datetime import date, time
from uuid import UUID

from pydantic import BaseModel, Field

from agenda.models.doctor_unavailability import UnavailabilityType


class UnavailabilityCreate(BaseModel):
    """
    Si `is_all_day` es falso, `start_time` y `end_time` (HH:mm) delimitan
    la franja bloqueada en cada fecha del rango.
    """
    doctor_id: UUID
    start_date: date
    end_date: date
    is_all_day: bool = True
    start_time: str | None = None
    end_time: str | None = None
    unavailability_type: UnavailabilityType = UnavailabilityType.OTHER
    reason: str = Field(..., min_length=1, max_length=500)
    notes: str | None = Field(None, max_length=2000)


class UnavailabilityResponse(BaseModel):
    id: UUID
    doctor_id: UUID
    start_date: date
    end_date: date
    is_all_day: bool
    start_time: time | None = None
    end_time: time | None = None
    unavailability_type: UnavailabilityType
    reason: str
    notes: str | None = None
    is_active: bool

    model_config = {"from_attributes": True}


class AvailabilityCheckResponse(BaseModel):
    doctor_id: UUID
    date: date
    time: str
    is_available: bool
    conflict_reason: str | None = None
    next_available_time: str | None = None
