"""
Generación de slots y turnos para un (doctor, fecha).

Recorre la ventana de trabajo desde `start_time` en pasos de la duración
efectiva. Los slots cuyo inicio cae en [inicio_descanso, fin_descanso) se
marcan como descanso y no reciben turno; el resto recibe turnos 1..N
consecutivos. Un slot que terminaría después de `end_time` no se emite.
"""

from collections.abc import Iterable
from datetime import date, time
from uuid import UUID

from agenda.core.exceptions import InfeasibleTokenTarget, InvalidSchedule
from agenda.engine.definitions import (
    BreakWindow,
    DayOfWeek,
    DirectDuration,
    DurationConfigType,
    ScheduleDefinition,
    Slot,
    TokenBasedDuration,
)
from agenda.engine.duration import (
    MAX_SLOT_MINUTES,
    MIN_SLOT_MINUTES,
    resolve_effective_duration,
)
from agenda.engine.time_arithmetic import from_minutes, parse_date, parse_time, to_minutes


# ── Construcción y validación del horario ────────────

def build_schedule(
    *,
    doctor_id: UUID,
    day_of_week: DayOfWeek | str,
    start_time: str | time,
    end_time: str | time,
    duration_config_type: DurationConfigType | str,
    duration_minutes: int | None = None,
    target_tokens_per_day: int | None = None,
    break_start_time: str | time | None = None,
    break_end_time: str | time | None = None,
    effective_date: str | date | None = None,
    end_date: str | date | None = None,
    is_active: bool = True,
) -> ScheduleDefinition:
    """
    Arma un ScheduleDefinition a partir de campos planos (como llegan de la
    API o de la base de datos) y valida sus invariantes.
    """
    try:
        config_type = DurationConfigType(duration_config_type)
    except ValueError:
        raise InvalidSchedule(f"Tipo de duración desconocido: {duration_config_type!r}")

    if duration_minutes is not None and target_tokens_per_day is not None:
        raise InvalidSchedule(
            "Indique duration_minutes o target_tokens_per_day, no ambos"
        )

    if config_type == DurationConfigType.DIRECT:
        if duration_minutes is None:
            raise InvalidSchedule("El tipo DIRECT requiere duration_minutes")
        duration = DirectDuration(duration_minutes=duration_minutes)
    else:
        if target_tokens_per_day is None:
            raise InvalidSchedule("El tipo TOKEN_BASED requiere target_tokens_per_day")
        duration = TokenBasedDuration(target_tokens_per_day=target_tokens_per_day)

    if (break_start_time is None) != (break_end_time is None):
        raise InvalidSchedule(
            "El descanso requiere hora de inicio y de fin (o ninguna de las dos)"
        )
    break_window = None
    if break_start_time is not None:
        break_window = BreakWindow(
            start_time=parse_time(break_start_time),
            end_time=parse_time(break_end_time),
        )

    try:
        day = DayOfWeek(day_of_week)
    except ValueError:
        raise InvalidSchedule(f"Día de la semana inválido: {day_of_week!r}")

    schedule = ScheduleDefinition(
        doctor_id=doctor_id,
        day_of_week=day,
        start_time=parse_time(start_time),
        end_time=parse_time(end_time),
        break_window=break_window,
        duration=duration,
        effective_date=parse_date(effective_date) if effective_date else None,
        end_date=parse_date(end_date) if end_date else None,
        is_active=is_active,
    )
    validate_schedule(schedule)
    return schedule


def validate_schedule(schedule: ScheduleDefinition) -> None:
    """Verifica las invariantes de un horario ya construido."""
    start = to_minutes(schedule.start_time)
    end = to_minutes(schedule.end_time)
    if start >= end:
        raise InvalidSchedule("end_time debe ser posterior a start_time")

    if schedule.break_window:
        break_start = to_minutes(schedule.break_window.start_time)
        break_end = to_minutes(schedule.break_window.end_time)
        if not start <= break_start < break_end <= end:
            raise InvalidSchedule(
                "El descanso debe estar dentro del horario y terminar después de empezar"
            )

    policy = schedule.duration
    if isinstance(policy, DirectDuration):
        if not MIN_SLOT_MINUTES <= policy.duration_minutes <= MAX_SLOT_MINUTES:
            raise InvalidSchedule(
                f"duration_minutes debe estar entre {MIN_SLOT_MINUTES} y {MAX_SLOT_MINUTES}"
            )
    elif policy.target_tokens_per_day <= 0:
        raise InfeasibleTokenTarget("target_tokens_per_day debe ser positivo")

    if schedule.effective_date and schedule.end_date:
        if schedule.end_date < schedule.effective_date:
            raise InvalidSchedule("end_date debe ser igual o posterior a effective_date")


# ── Generación ───────────────────────────────────────

def generate_slots(
    schedule: ScheduleDefinition,
    target_date: date | str,
    effective_duration: int | None = None,
) -> list[Slot]:
    """
    Genera la grilla de slots del día.

    La fecha no altera la grilla (los turnos se reinician en 1 para cada
    fecha); se valida para que la operación falle entera ante una fecha
    inválida. `effective_duration` permite reutilizar una duración ya
    resuelta; si no se pasa, se resuelve aquí.
    """
    parse_date(target_date)
    validate_schedule(schedule)
    if effective_duration is None:
        effective_duration = resolve_effective_duration(schedule)
    if effective_duration < MIN_SLOT_MINUTES:
        raise InvalidSchedule(
            f"La duración efectiva debe ser de al menos {MIN_SLOT_MINUTES} minutos"
        )

    end = to_minutes(schedule.end_time)
    cursor = to_minutes(schedule.start_time)
    token = 1
    slots: list[Slot] = []

    while cursor + effective_duration <= end:
        slot_time = from_minutes(cursor)
        is_break = bool(schedule.break_window and schedule.break_window.contains(slot_time))

        slots.append(Slot(
            time=slot_time,
            duration_minutes=effective_duration,
            token_number=None if is_break else token,
            is_break_time=is_break,
            is_available=not is_break,
        ))
        if not is_break:
            token += 1

        cursor += effective_duration

    return slots


def select_active_schedule(
    schedules: Iterable[ScheduleDefinition],
    target_date: date | str,
) -> ScheduleDefinition | None:
    """
    Elige el horario que rige para la fecha.

    Entre varias versiones vigentes gana la de `effective_date` más
    reciente; una versión sin fecha de vigencia pierde contra una fechada.
    Ante un empate gana la de inicio más temprano, así el resultado no
    depende del orden de entrada.
    """
    target = parse_date(target_date)
    candidates = [s for s in schedules if s.applies_to(target)]
    if not candidates:
        return None
    return min(
        candidates,
        key=lambda s: (-(s.effective_date or date.min).toordinal(), s.start_time, s.end_time),
    )
