"""
Conciliación de citas reservadas contra la grilla de slots.

Una cita bloquea el slot cuyo inicio coincide exactamente con el suyo.
Las citas que no caen en un borde de slot se reportan pero no bloquean
nada, y los bordes que quedan dentro de la ocupación real de una cita
(p. ej. por un cambio de duración) se reportan como solapados. Los slots
que se cruzan con una franja de no disponibilidad quedan bloqueados.
"""

from collections.abc import Iterable
from datetime import time

from pydantic import BaseModel

from agenda.core.exceptions import InvalidSchedule, SlotUnavailable
from agenda.engine.definitions import BlockedPeriod, BookedAppointment, Slot
from agenda.engine.time_arithmetic import format_time, parse_time, to_minutes


class ReconciliationResult(BaseModel):
    slots: list[Slot]
    misaligned_bookings: list[BookedAppointment] = []
    overlapped_times: list[time] = []

    def all_time_slots_with_tokens(self) -> dict[str, int]:
        return all_time_slots_with_tokens(self.slots)

    def available_time_slots_with_tokens(self) -> dict[str, int]:
        return available_time_slots_with_tokens(self.slots)


def reconcile_availability(
    slots: list[Slot],
    bookings: Iterable[BookedAppointment],
    blocked: Iterable[BlockedPeriod] = (),
) -> ReconciliationResult:
    bookings = list(bookings)
    blocked = list(blocked)
    booked_starts = {b.start_minutes for b in bookings}
    slot_starts = {s.start_minutes for s in slots}

    reconciled = [
        slot.model_copy(update={
            "is_available": (
                not slot.is_break_time
                and slot.start_minutes not in booked_starts
                and not any(b.overlaps(slot.start_minutes, slot.end_minutes) for b in blocked)
            ),
        })
        for slot in slots
    ]

    misaligned = [b for b in bookings if b.start_minutes not in slot_starts]

    overlapped = [
        slot.time
        for slot in slots
        if any(b.start_minutes < slot.start_minutes < b.end_minutes for b in bookings)
    ]

    return ReconciliationResult(
        slots=reconciled,
        misaligned_bookings=misaligned,
        overlapped_times=overlapped,
    )


# ── Mapas hora → turno ───────────────────────────────

def all_time_slots_with_tokens(slots: Iterable[Slot]) -> dict[str, int]:
    """Todos los slots con turno (se omiten los de descanso), en orden."""
    return {
        s.label: s.token_number
        for s in sorted(slots, key=lambda s: s.start_minutes)
        if not s.is_break_time
    }


def available_time_slots_with_tokens(slots: Iterable[Slot]) -> dict[str, int]:
    """Solo los slots disponibles para reservar, en orden."""
    return {
        s.label: s.token_number
        for s in sorted(slots, key=lambda s: s.start_minutes)
        if s.is_available and not s.is_break_time
    }


def find_slot(slots: Iterable[Slot], slot_time: str | time) -> Slot | None:
    target = to_minutes(parse_time(slot_time))
    return next((s for s in slots if s.start_minutes == target), None)


def token_for_time(slots: Iterable[Slot], slot_time: str | time) -> int:
    """Número de turno del slot que empieza en `slot_time`."""
    slot = find_slot(slots, slot_time)
    if slot is None or slot.is_break_time:
        raise InvalidSchedule(
            f"No hay un turno que empiece a las {format_time(parse_time(slot_time))}"
        )
    return slot.token_number


# ── Política de reserva ──────────────────────────────

def ensure_bookable(
    slots: list[Slot],
    bookings: Iterable[BookedAppointment],
    slot_time: str | time,
) -> Slot:
    """
    Verifica que se pueda reservar una nueva cita en `slot_time` y
    devuelve el slot correspondiente.

    Se rechaza si la hora no es inicio de slot, cae en el descanso, ya está
    reservada, se cruza con la ocupación real de otra cita (anterior o
    posterior) o está bloqueada por una no disponibilidad.
    """
    requested = parse_time(slot_time)
    label = format_time(requested)
    slot = find_slot(slots, requested)

    if slot is None:
        raise SlotUnavailable(f"{label} no es el inicio de un turno del día")
    if slot.is_break_time:
        raise SlotUnavailable(f"{label} cae en el horario de descanso")

    for booking in bookings:
        if booking.start_minutes == slot.start_minutes:
            raise SlotUnavailable(f"El turno de las {label} ya está reservado")
        if booking.start_minutes < slot.start_minutes < booking.end_minutes:
            raise SlotUnavailable(
                f"El turno de las {label} se superpone con la cita de las "
                f"{format_time(booking.start_time)} ({booking.duration_minutes} min)"
            )
        if slot.start_minutes < booking.start_minutes < slot.end_minutes:
            raise SlotUnavailable(
                f"El turno de las {label} se superpone con la cita de las "
                f"{format_time(booking.start_time)}"
            )

    if not slot.is_available:
        raise SlotUnavailable(f"El doctor no atiende a las {label}")

    return slot
