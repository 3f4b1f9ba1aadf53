"""
Resolución de la duración efectiva de los slots.

DIRECT       → la duración configurada.
TOKEN_BASED  → minutos disponibles / meta de turnos, redondeado al múltiplo
               de 5 más cercano y con piso de 5 minutos.
"""

import math

from pydantic import BaseModel

from agenda.core.exceptions import InfeasibleTokenTarget, InvalidSchedule
from agenda.engine.definitions import (
    DirectDuration,
    DurationConfigType,
    ScheduleDefinition,
    TokenBasedDuration,
)

MIN_SLOT_MINUTES = 5
MAX_SLOT_MINUTES = 240
ROUNDING_STEP_MINUTES = 5


class DurationInfo(BaseModel):
    """Resumen de la configuración de duración de un horario."""
    duration_config_type: DurationConfigType
    duration_minutes: int | None = None
    target_tokens_per_day: int | None = None
    calculated_duration_minutes: int | None = None
    effective_duration: int
    total_minutes: int
    break_minutes: int
    available_working_minutes: int
    expected_tokens: int


def round_to_nearest_step(value: float, step: int = ROUNDING_STEP_MINUTES) -> int:
    """Redondea al múltiplo de `step` más cercano (mitades hacia arriba)."""
    return step * math.floor(value / step + 0.5)


def available_working_minutes(schedule: ScheduleDefinition) -> int:
    return schedule.available_minutes


def expected_token_count(available_minutes: int, effective_duration: int) -> int:
    """Cantidad de turnos completos que caben en los minutos disponibles."""
    if effective_duration <= 0:
        return 0
    return max(available_minutes, 0) // effective_duration


def _duration_from_token_target(available_minutes: int, target_tokens: int) -> int:
    if target_tokens <= 0:
        raise InfeasibleTokenTarget(
            f"La meta de turnos por día debe ser positiva (recibido {target_tokens})"
        )
    if available_minutes < MIN_SLOT_MINUTES:
        raise InfeasibleTokenTarget(
            f"Solo hay {available_minutes} minutos de trabajo; se necesitan al menos {MIN_SLOT_MINUTES}"
        )

    duration = max(
        round_to_nearest_step(available_minutes / target_tokens),
        MIN_SLOT_MINUTES,
    )
    # Redondear hacia arriba no debe dejar el día sin turnos
    if expected_token_count(available_minutes, duration) == 0:
        duration = max(
            ROUNDING_STEP_MINUTES * (available_minutes // ROUNDING_STEP_MINUTES),
            MIN_SLOT_MINUTES,
        )
    return duration


def resolve_effective_duration(
    schedule: ScheduleDefinition,
    available_minutes: int | None = None,
) -> int:
    """
    Calcula la duración efectiva (minutos) de cada slot del horario.

    `available_minutes` solo se usa en TOKEN_BASED; por defecto es la
    ventana de trabajo menos el descanso.
    """
    policy = schedule.duration

    if isinstance(policy, DirectDuration):
        minutes = policy.duration_minutes
        if not MIN_SLOT_MINUTES <= minutes <= MAX_SLOT_MINUTES:
            raise InvalidSchedule(
                f"La duración debe estar entre {MIN_SLOT_MINUTES} y {MAX_SLOT_MINUTES} minutos"
            )
        return minutes

    if isinstance(policy, TokenBasedDuration):
        if available_minutes is None:
            available_minutes = available_working_minutes(schedule)
        return _duration_from_token_target(available_minutes, policy.target_tokens_per_day)

    raise InvalidSchedule(f"Política de duración desconocida: {policy!r}")


def describe_duration(schedule: ScheduleDefinition) -> DurationInfo:
    """Arma el desglose de minutos y turnos esperados de un horario."""
    available = available_working_minutes(schedule)
    effective = resolve_effective_duration(schedule, available)
    policy = schedule.duration
    is_token_based = isinstance(policy, TokenBasedDuration)

    return DurationInfo(
        duration_config_type=schedule.duration_config_type,
        duration_minutes=None if is_token_based else policy.duration_minutes,
        target_tokens_per_day=policy.target_tokens_per_day if is_token_based else None,
        calculated_duration_minutes=effective if is_token_based else None,
        effective_duration=effective,
        total_minutes=schedule.total_minutes,
        break_minutes=schedule.break_minutes,
        available_working_minutes=available,
        expected_tokens=expected_token_count(available, effective),
    )
