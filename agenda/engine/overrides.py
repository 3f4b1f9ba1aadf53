"""
Validación de cambios de duración de una cita puntual.

El cambio no re-numera ni desplaza los slots siguientes; la ocupación real
de la cita pasa a ser [inicio, inicio + nueva_duración).
"""

from uuid import UUID

from pydantic import BaseModel

from agenda.core.exceptions import InvalidOverride

MIN_OVERRIDE_MINUTES = 5
MAX_OVERRIDE_MINUTES = 240


class OverrideRequest(BaseModel):
    appointment_id: UUID
    new_duration_minutes: int
    reason: str | None = None


class OverrideRecord(BaseModel):
    """Campos de auditoría a persistir junto con la cita."""
    appointment_id: UUID
    new_duration_minutes: int
    reason: str
    original_duration_minutes: int


def validate_override(
    request: OverrideRequest,
    effective_duration: int,
    *,
    min_minutes: int = MIN_OVERRIDE_MINUTES,
    max_minutes: int = MAX_OVERRIDE_MINUTES,
) -> OverrideRecord:
    if not min_minutes <= request.new_duration_minutes <= max_minutes:
        raise InvalidOverride(
            f"La nueva duración debe estar entre {min_minutes} y {max_minutes} minutos"
        )

    reason = (request.reason or "").strip()
    if not reason:
        raise InvalidOverride("El motivo del cambio de duración es obligatorio")

    return OverrideRecord(
        appointment_id=request.appointment_id,
        new_duration_minutes=request.new_duration_minutes,
        reason=reason,
        original_duration_minutes=effective_duration,
    )
