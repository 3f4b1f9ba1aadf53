"""
Modelo DoctorUnavailability — Período en que un doctor no atiende.

De día completo (vacaciones, licencia) o limitado a una franja horaria
que se repite en cada fecha del rango.
"""

import enum
import uuid
from datetime import date, datetime, time

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Enum,
    Index,
    String,
    Text,
    Time,
    Uuid,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from agenda.database import Base


class UnavailabilityType(str, enum.Enum):
    VACATION = "VACATION"
    SICK_LEAVE = "SICK_LEAVE"
    EMERGENCY = "EMERGENCY"
    PERSONAL = "PERSONAL"
    CONFERENCE = "CONFERENCE"
    TRAINING = "TRAINING"
    OTHER = "OTHER"


class DoctorUnavailability(Base):
    __tablename__ = "doctor_unavailabilities"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    doctor_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)

    # ── Rango ────────────────────────────────────────
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    is_all_day: Mapped[bool] = mapped_column(Boolean, default=True)
    start_time: Mapped[time | None] = mapped_column(
        Time, comment="Solo si no es de día completo"
    )
    end_time: Mapped[time | None] = mapped_column(Time)

    # ── Motivo ───────────────────────────────────────
    unavailability_type: Mapped[UnavailabilityType] = mapped_column(
        Enum(UnavailabilityType), nullable=False, default=UnavailabilityType.OTHER
    )
    reason: Mapped[str] = mapped_column(String(500), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    __table_args__ = (
        Index("idx_unavailability_doctor_dates", "doctor_id", "start_date", "end_date"),
    )

    def __repr__(self) -> str:
        return (
            f"<Unavailability {self.start_date}..{self.end_date} "
            f"({self.unavailability_type.value})>"
        )
