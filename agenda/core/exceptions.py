"""
Excepciones de la aplicación.

- Errores HTTP personalizados para la API.
- Taxonomía de errores del motor de turnos (puros, sin dependencia de FastAPI).
"""

from fastapi import HTTPException, status


# ── Errores HTTP ─────────────────────────────────────

class NotFoundException(HTTPException):
    """Recurso no encontrado (404)."""

    def __init__(self, resource: str = "Recurso", detail: str | None = None):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail or f"{resource} no encontrado",
        )


class ConflictException(HTTPException):
    """Conflicto de datos (409) — ej: horario superpuesto."""

    def __init__(self, detail: str = "El recurso ya existe"):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
        )


class ValidationException(HTTPException):
    """Error de validación de negocio (422)."""

    def __init__(self, detail: str = "Error de validación"):
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=detail,
        )


# ── Errores del motor de turnos ──────────────────────

class SchedulingError(Exception):
    """
    Base de los errores del motor de turnos.

    No hereda de ValueError: pydantic no debe envolverla en un
    ValidationError si se lanza dentro de un validador.
    """

    default_detail = "Error de agenda"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class InvalidFormat(SchedulingError):
    """Hora o fecha con formato inválido."""

    default_detail = "Formato de hora o fecha inválido"


class InvalidSchedule(SchedulingError):
    """Definición de horario inconsistente (inicio ≥ fin, descanso incompleto...)."""

    default_detail = "Horario inválido"


class InfeasibleTokenTarget(SchedulingError):
    """La política TOKEN_BASED no puede producir una duración positiva."""

    default_detail = "No es posible calcular la duración para la meta de turnos"


class InvalidOverride(SchedulingError):
    """Cambio de duración de una cita fuera de rango o sin motivo."""

    default_detail = "Cambio de duración inválido"


class ScheduleOverflow(SchedulingError):
    """La aritmética de horas cruzaría la medianoche."""

    default_detail = "La hora resultante sale del día"


class SlotUnavailable(SchedulingError):
    """El horario pedido no se puede reservar."""

    default_detail = "El horario no está disponible"
