"""
Aritmética de horas del día.

Todas las horas se manejan como `datetime.time` con resolución de minutos:
los segundos se aceptan al parsear pero se descartan.
"""

from datetime import date, datetime, time

from agenda.core.exceptions import InvalidFormat, ScheduleOverflow

MINUTES_PER_DAY = 24 * 60


def parse_time(value: str | time) -> time:
    """Parsea `HH:mm` o `HH:mm:ss` a un `time` sin segundos."""
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0)
    if not isinstance(value, str):
        raise InvalidFormat(f"Hora inválida: {value!r}")

    parts = value.strip().split(":")
    if len(parts) not in (2, 3) or not all(p.isascii() and p.isdigit() for p in parts):
        raise InvalidFormat(f"Hora inválida: '{value}' (se espera HH:mm o HH:mm:ss)")

    hours, minutes = int(parts[0]), int(parts[1])
    seconds = int(parts[2]) if len(parts) == 3 else 0
    if not (0 <= hours <= 23 and 0 <= minutes <= 59 and 0 <= seconds <= 59):
        raise InvalidFormat(f"Hora fuera de rango: '{value}'")

    return time(hours, minutes)


def parse_date(value: str | date) -> date:
    """Parsea una fecha `YYYY-MM-DD`."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except (AttributeError, ValueError):
        raise InvalidFormat(f"Fecha inválida: {value!r} (se espera YYYY-MM-DD)")


def to_minutes(t: time) -> int:
    return t.hour * 60 + t.minute


def from_minutes(total: int) -> time:
    if not 0 <= total < MINUTES_PER_DAY:
        raise ScheduleOverflow(f"{total} minutos no corresponde a una hora del día")
    return time(total // 60, total % 60)


def add_minutes(t: time, minutes: int) -> time:
    """Suma minutos a una hora. El resultado debe quedar dentro del mismo día."""
    return from_minutes(to_minutes(t) + minutes)


def compare(t1: time, t2: time) -> int:
    """-1, 0 o 1 según t1 sea anterior, igual o posterior a t2."""
    delta = to_minutes(t1) - to_minutes(t2)
    return (delta > 0) - (delta < 0)


def minutes_between(t1: time, t2: time) -> int:
    """Minutos de t1 a t2 (negativo si t2 es anterior)."""
    return to_minutes(t2) - to_minutes(t1)


def format_time(t: time) -> str:
    return f"{t.hour:02d}:{t.minute:02d}"
