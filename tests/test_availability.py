"""
Tests de conciliación de citas contra la grilla de slots.
"""

from datetime import time

import pytest

from agenda.core.exceptions import InvalidSchedule, SlotUnavailable
from agenda.engine import (
    BlockedPeriod,
    BookedAppointment,
    all_time_slots_with_tokens,
    available_time_slots_with_tokens,
    ensure_bookable,
    generate_slots,
    reconcile_availability,
    token_for_time,
)


@pytest.fixture
def slots(morning_schedule, target_date):
    return generate_slots(morning_schedule, target_date)


def test_booked_slot_is_removed_from_available_map(slots):
    result = reconcile_availability(
        slots, [BookedAppointment(start_time=time(9, 30), duration_minutes=30)]
    )

    assert result.available_time_slots_with_tokens() == {
        "08:00": 1, "08:30": 2, "09:00": 3,
        "10:30": 5, "11:00": 6, "11:30": 7,
    }
    # El mapa completo conserva el turno reservado
    assert result.all_time_slots_with_tokens()["09:30"] == 4
    assert result.misaligned_bookings == []
    assert result.overlapped_times == []


def test_no_bookings_leaves_every_working_slot_available(slots):
    result = reconcile_availability(slots, [])
    assert available_time_slots_with_tokens(result.slots) == result.all_time_slots_with_tokens()
    assert len(result.available_time_slots_with_tokens()) == 7


def test_misaligned_booking_is_reported_and_blocks_nothing(slots):
    booking = BookedAppointment(start_time=time(9, 45), duration_minutes=30)
    result = reconcile_availability(slots, [booking])

    assert result.misaligned_bookings == [booking]
    assert len(result.available_time_slots_with_tokens()) == 7
    # 09:45 + 30 ocupa el inicio de las 10:00, que es descanso
    assert result.overlapped_times == [time(10, 0)]


def test_overridden_booking_reports_overlapped_slot(slots):
    booking = BookedAppointment(
        start_time=time(9, 0),
        duration_minutes=45,
        is_duration_overridden=True,
        override_reason="extended consultation",
        original_duration_minutes=30,
    )
    result = reconcile_availability(slots, [booking])

    assert "09:00" not in result.available_time_slots_with_tokens()
    assert result.overlapped_times == [time(9, 30)]


def test_break_slots_never_available(slots):
    result = reconcile_availability(slots, [])
    break_slot = next(s for s in result.slots if s.is_break_time)
    assert not break_slot.is_available
    assert "10:00" not in result.available_time_slots_with_tokens()


def test_reconciliation_does_not_mutate_input(slots):
    reconcile_availability(slots, [BookedAppointment(start_time=time(8, 0), duration_minutes=30)])
    assert slots[0].is_available


# ── Turno por hora ───────────────────────────────────

def test_token_for_time(slots):
    assert token_for_time(slots, "10:30") == 5
    assert token_for_time(slots, "10:30:00") == 5


@pytest.mark.parametrize("value", ["10:00", "10:15", "12:00"])
def test_token_for_time_without_working_slot(slots, value):
    with pytest.raises(InvalidSchedule):
        token_for_time(slots, value)


# ── Política de reserva ──────────────────────────────

def test_ensure_bookable_returns_slot(slots):
    slot = ensure_bookable(slots, [], "11:00")
    assert slot.token_number == 6


@pytest.mark.parametrize("requested", ["09:15", "10:00", "12:00"])
def test_ensure_bookable_rejects_non_slot_or_break(slots, requested):
    with pytest.raises(SlotUnavailable):
        ensure_bookable(slots, [], requested)


def test_ensure_bookable_rejects_taken_slot(slots):
    bookings = [BookedAppointment(start_time=time(8, 30), duration_minutes=30)]
    with pytest.raises(SlotUnavailable):
        ensure_bookable(slots, bookings, "08:30")


def test_ensure_bookable_rejects_slot_inside_extended_booking(slots):
    bookings = [BookedAppointment(start_time=time(9, 0), duration_minutes=45)]
    with pytest.raises(SlotUnavailable):
        ensure_bookable(slots, bookings, "09:30")
    # Una cita de 30 minutos termina justo en el siguiente borde
    assert ensure_bookable(
        slots, [BookedAppointment(start_time=time(9, 0), duration_minutes=30)], "09:30"
    ).token_number == 4


def test_ensure_bookable_rejects_slot_running_into_later_booking(slots):
    # Cita de una grilla anterior que quedó a mitad del slot de las 09:30
    later = BookedAppointment(start_time=time(9, 40), duration_minutes=30)
    with pytest.raises(SlotUnavailable):
        ensure_bookable(slots, [later], "09:30")
    assert ensure_bookable(slots, [later], "09:00").token_number == 3


# ── Franjas bloqueadas ───────────────────────────────

def test_blocked_period_marks_intersecting_slots_unavailable(slots):
    block = BlockedPeriod(start_time=time(8, 45), end_time=time(9, 30))
    result = reconcile_availability(slots, [], [block])

    available = result.available_time_slots_with_tokens()
    assert "08:30" not in available
    assert "09:00" not in available
    assert available["09:30"] == 4
    # Los turnos no se re-numeran
    assert result.all_time_slots_with_tokens()["09:00"] == 3


def test_ensure_bookable_rejects_blocked_slot(slots):
    block = BlockedPeriod(start_time=time(11, 0), end_time=time(12, 0))
    result = reconcile_availability(slots, [], [block])
    with pytest.raises(SlotUnavailable):
        ensure_bookable(result.slots, [], "11:30")
    assert ensure_bookable(result.slots, [], "10:30").token_number == 5


# ── Idempotencia del flujo completo ──────────────────

def _run_pipeline(schedule, target_date, bookings):
    slots = generate_slots(schedule, target_date)
    result = reconcile_availability(slots, bookings)
    return (
        result.model_dump_json(),
        all_time_slots_with_tokens(result.slots),
        available_time_slots_with_tokens(result.slots),
    )


def test_full_pipeline_is_idempotent(token_based_schedule, target_date):
    bookings = [
        BookedAppointment(start_time=time(8, 35), duration_minutes=35),
        BookedAppointment(
            start_time=time(9, 10),
            duration_minutes=50,
            is_duration_overridden=True,
            override_reason="extended consultation",
            original_duration_minutes=35,
        ),
        BookedAppointment(start_time=time(11, 0), duration_minutes=35),
    ]

    first = _run_pipeline(token_based_schedule, target_date, bookings)
    second = _run_pipeline(token_based_schedule, target_date, list(reversed(bookings)))

    assert first == second
    assert first[2] == {"08:00": 1, "09:45": 4, "10:55": 5}
