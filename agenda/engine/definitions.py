"""
Tipos del motor de turnos.

ScheduleDefinition — patrón de trabajo de un doctor para un día de la semana.
Slot               — unidad reservable generada para una fecha concreta.
BookedAppointment  — cita existente que ocupa un slot (la provee la capa de datos).
"""

import enum
from datetime import date, time
from typing import Annotated, Literal, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from agenda.engine.time_arithmetic import format_time, minutes_between, to_minutes


class DayOfWeek(str, enum.Enum):
    SUNDAY = "SUNDAY"
    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"
    SATURDAY = "SATURDAY"

    @classmethod
    def from_date(cls, target_date: date) -> "DayOfWeek":
        # date.weekday(): 0=Lunes ... 6=Domingo
        return _WEEKDAYS[target_date.weekday()]


_WEEKDAYS = [
    DayOfWeek.MONDAY,
    DayOfWeek.TUESDAY,
    DayOfWeek.WEDNESDAY,
    DayOfWeek.THURSDAY,
    DayOfWeek.FRIDAY,
    DayOfWeek.SATURDAY,
    DayOfWeek.SUNDAY,
]


class DurationConfigType(str, enum.Enum):
    """Cómo se obtiene la duración de cada slot."""
    DIRECT = "DIRECT"
    TOKEN_BASED = "TOKEN_BASED"


# ── Política de duración (variante etiquetada) ───────

class DirectDuration(BaseModel):
    """La duración del slot se configura explícitamente."""
    model_config = ConfigDict(frozen=True)

    config_type: Literal["DIRECT"] = "DIRECT"
    duration_minutes: int


class TokenBasedDuration(BaseModel):
    """La duración se deriva de una meta de turnos por día."""
    model_config = ConfigDict(frozen=True)

    config_type: Literal["TOKEN_BASED"] = "TOKEN_BASED"
    target_tokens_per_day: int


DurationPolicy = Annotated[
    Union[DirectDuration, TokenBasedDuration],
    Field(discriminator="config_type"),
]


# ── Horario ──────────────────────────────────────────

class BreakWindow(BaseModel):
    model_config = ConfigDict(frozen=True)

    start_time: time
    end_time: time

    @property
    def minutes(self) -> int:
        return minutes_between(self.start_time, self.end_time)

    def contains(self, t: time) -> bool:
        """Semiabierto: incluye el inicio del descanso, excluye el fin."""
        return to_minutes(self.start_time) <= to_minutes(t) < to_minutes(self.end_time)


class BlockedPeriod(BaseModel):
    """Franja del día en la que el doctor no atiende (licencia parcial)."""
    model_config = ConfigDict(frozen=True)

    start_time: time
    end_time: time

    @property
    def start_minutes(self) -> int:
        return to_minutes(self.start_time)

    @property
    def end_minutes(self) -> int:
        return to_minutes(self.end_time)

    def overlaps(self, start_minutes: int, end_minutes: int) -> bool:
        return start_minutes < self.end_minutes and self.start_minutes < end_minutes


class ScheduleDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    doctor_id: UUID
    day_of_week: DayOfWeek
    start_time: time
    end_time: time
    break_window: BreakWindow | None = None
    duration: DurationPolicy
    effective_date: date | None = None
    end_date: date | None = None
    is_active: bool = True

    @property
    def duration_config_type(self) -> DurationConfigType:
        return DurationConfigType(self.duration.config_type)

    @property
    def total_minutes(self) -> int:
        return minutes_between(self.start_time, self.end_time)

    @property
    def break_minutes(self) -> int:
        return self.break_window.minutes if self.break_window else 0

    @property
    def available_minutes(self) -> int:
        """Minutos de trabajo: ventana total menos el descanso."""
        return self.total_minutes - self.break_minutes

    def applies_to(self, target_date: date) -> bool:
        """Indica si este horario rige para la fecha dada."""
        if not self.is_active or DayOfWeek.from_date(target_date) != self.day_of_week:
            return False
        if self.effective_date and target_date < self.effective_date:
            return False
        if self.end_date and target_date > self.end_date:
            return False
        return True


# ── Slots y citas ────────────────────────────────────

class Slot(BaseModel):
    model_config = ConfigDict(frozen=True)

    time: time
    duration_minutes: int
    token_number: int | None = None
    is_break_time: bool = False
    is_available: bool = True

    @property
    def label(self) -> str:
        return format_time(self.time)

    @property
    def start_minutes(self) -> int:
        return to_minutes(self.time)

    @property
    def end_minutes(self) -> int:
        return self.start_minutes + self.duration_minutes


class BookedAppointment(BaseModel):
    """Cita ya reservada para el mismo (doctor, fecha)."""
    model_config = ConfigDict(frozen=True)

    start_time: time
    duration_minutes: int
    is_duration_overridden: bool = False
    override_reason: str | None = None
    original_duration_minutes: int | None = None
    appointment_id: UUID | None = None
    token_number: int | None = None

    @property
    def start_minutes(self) -> int:
        return to_minutes(self.start_time)

    @property
    def end_minutes(self) -> int:
        """Fin real de la ocupación (respeta el cambio de duración)."""
        return self.start_minutes + self.duration_minutes
