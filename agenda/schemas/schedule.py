"""
Schemas para horarios de doctores — creación, respuesta y vistas de slots.
"""

from datetime import date, time
from uuid import UUID

from pydantic import BaseModel, Field

from agenda.engine.definitions import DayOfWeek, DurationConfigType


# ── Horarios ─────────────────────────────────────────

class DoctorScheduleCreate(BaseModel):
    """
    Input para crear horarios. Se crea un registro por cada día de
    `working_days`. Las horas llegan como `HH:mm` o `HH:mm:ss` y las
    invariantes las valida el motor de turnos.
    """
    doctor_id: UUID
    working_days: list[DayOfWeek] = Field(..., min_length=1)
    start_time: str
    end_time: str
    break_start_time: str | None = None
    break_end_time: str | None = None
    duration_config_type: DurationConfigType = DurationConfigType.DIRECT
    duration_minutes: int | None = None
    target_tokens_per_day: int | None = None
    effective_date: date | None = None
    end_date: date | None = None
    notes: str | None = Field(None, max_length=500)


class DoctorScheduleUpdate(BaseModel):
    """
    Campos a modificar; los omitidos conservan su valor.
    Enviar `null` en el descanso lo elimina.
    """
    day_of_week: DayOfWeek | None = None
    start_time: str | None = None
    end_time: str | None = None
    break_start_time: str | None = None
    break_end_time: str | None = None
    duration_config_type: DurationConfigType | None = None
    duration_minutes: int | None = None
    target_tokens_per_day: int | None = None
    effective_date: date | None = None
    end_date: date | None = None
    notes: str | None = Field(None, max_length=500)
    is_active: bool | None = None


class DoctorScheduleResponse(BaseModel):
    id: UUID
    doctor_id: UUID
    day_of_week: DayOfWeek
    start_time: time
    end_time: time
    break_start_time: time | None = None
    break_end_time: time | None = None
    duration_config_type: DurationConfigType
    duration_minutes: int | None = None
    target_tokens_per_day: int | None = None
    effective_date: date | None = None
    end_date: date | None = None
    notes: str | None = None
    is_active: bool

    # Datos calculados
    effective_duration: int
    available_working_minutes: int
    expected_tokens: int

    model_config = {"from_attributes": True}


# ── Slots ────────────────────────────────────────────

class SlotResponse(BaseModel):
    """Un slot de la grilla del día."""
    time: str
    token_number: int | None = None
    is_break_time: bool
    is_available: bool


class DaySlotsResponse(BaseModel):
    """Grilla completa de un (doctor, fecha) con el reporte de conciliación."""
    doctor_id: UUID
    date: date
    schedule_id: UUID | None = None
    effective_duration: int | None = None
    slots: list[SlotResponse]
    misaligned_bookings: list[str] = []
    overlapped_times: list[str] = []
