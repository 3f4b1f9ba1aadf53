"""
Períodos de no disponibilidad del doctor (vacaciones, licencias, congresos).

Un período de día completo anula la grilla de cada fecha que cubre. Un
período con horario bloquea, en cada fecha del rango, los slots cuyo
intervalo se cruza con la franja indicada.
"""

from collections.abc import Iterable
from datetime import date, time

from pydantic import BaseModel, ConfigDict

from agenda.core.exceptions import InvalidSchedule
from agenda.engine.definitions import BlockedPeriod
from agenda.engine.time_arithmetic import parse_date, parse_time, to_minutes


class Unavailability(BaseModel):
    model_config = ConfigDict(frozen=True)

    start_date: date
    end_date: date
    is_all_day: bool = True
    start_time: time | None = None
    end_time: time | None = None

    def covers(self, target_date: date) -> bool:
        return self.start_date <= target_date <= self.end_date

    @property
    def blocked_period(self) -> BlockedPeriod | None:
        if self.is_all_day:
            return None
        return BlockedPeriod(start_time=self.start_time, end_time=self.end_time)


def build_unavailability(
    *,
    start_date: str | date,
    end_date: str | date,
    is_all_day: bool = True,
    start_time: str | time | None = None,
    end_time: str | time | None = None,
) -> Unavailability:
    """Valida y arma un período de no disponibilidad."""
    start = parse_date(start_date)
    end = parse_date(end_date)
    if end < start:
        raise InvalidSchedule("end_date debe ser igual o posterior a start_date")

    if is_all_day:
        return Unavailability(start_date=start, end_date=end, is_all_day=True)

    if start_time is None or end_time is None:
        raise InvalidSchedule(
            "Una no disponibilidad parcial requiere hora de inicio y de fin"
        )
    block_start = parse_time(start_time)
    block_end = parse_time(end_time)
    if to_minutes(block_start) >= to_minutes(block_end):
        raise InvalidSchedule("end_time debe ser posterior a start_time")

    return Unavailability(
        start_date=start,
        end_date=end,
        is_all_day=False,
        start_time=block_start,
        end_time=block_end,
    )


def is_day_blocked(periods: Iterable[Unavailability], target_date: date) -> bool:
    """Indica si algún período de día completo cubre la fecha."""
    return any(p.is_all_day and p.covers(target_date) for p in periods)


def blocked_periods_for(
    periods: Iterable[Unavailability],
    target_date: date,
) -> list[BlockedPeriod]:
    """Franjas parciales que rigen en la fecha, ordenadas por inicio."""
    blocks = [
        p.blocked_period
        for p in periods
        if not p.is_all_day and p.covers(target_date)
    ]
    return sorted(blocks, key=lambda b: b.start_minutes)
