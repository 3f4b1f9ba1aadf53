"""
Modelo DoctorSchedule — Horario recurrente de un doctor para un día de la semana.

Incluye la ventana de descanso opcional, la política de duración
(DIRECT o TOKEN_BASED) y una ventana de vigencia por fechas.
"""

import uuid
from datetime import date, datetime, time

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Enum,
    Index,
    Integer,
    String,
    Time,
    Uuid,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from agenda.database import Base
from agenda.engine.definitions import DayOfWeek, DurationConfigType


class DoctorSchedule(Base):
    __tablename__ = "doctor_schedules"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    doctor_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)

    # ── Día de la semana ─────────────────────────────
    day_of_week: Mapped[DayOfWeek] = mapped_column(
        Enum(DayOfWeek), nullable=False
    )

    # ── Bloque de horario ────────────────────────────
    start_time: Mapped[time] = mapped_column(Time, nullable=False)
    end_time: Mapped[time] = mapped_column(Time, nullable=False)
    break_start_time: Mapped[time | None] = mapped_column(Time)
    break_end_time: Mapped[time | None] = mapped_column(Time)

    # ── Política de duración ─────────────────────────
    duration_config_type: Mapped[DurationConfigType] = mapped_column(
        Enum(DurationConfigType), nullable=False, default=DurationConfigType.DIRECT
    )
    duration_minutes: Mapped[int | None] = mapped_column(
        Integer, comment="Solo DIRECT: duración de cada slot en minutos"
    )
    target_tokens_per_day: Mapped[int | None] = mapped_column(
        Integer, comment="Solo TOKEN_BASED: meta de turnos por día"
    )

    # ── Vigencia ─────────────────────────────────────
    effective_date: Mapped[date | None] = mapped_column(Date)
    end_date: Mapped[date | None] = mapped_column(Date)

    notes: Mapped[str | None] = mapped_column(String(500))

    # ── Estado ───────────────────────────────────────
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    # ── Índices ──────────────────────────────────────
    __table_args__ = (
        Index("idx_schedule_doctor_day", "doctor_id", "day_of_week"),
    )

    def __repr__(self) -> str:
        return (
            f"<Schedule {self.day_of_week.value} {self.start_time}-{self.end_time} "
            f"({self.duration_config_type.value})>"
        )
