"""
Motor de turnos: funciones puras, sin estado ni E/S.
"""

from agenda.engine.availability import (
    ReconciliationResult,
    all_time_slots_with_tokens,
    available_time_slots_with_tokens,
    ensure_bookable,
    reconcile_availability,
    token_for_time,
)
from agenda.engine.definitions import (
    BlockedPeriod,
    BookedAppointment,
    BreakWindow,
    DayOfWeek,
    DirectDuration,
    DurationConfigType,
    ScheduleDefinition,
    Slot,
    TokenBasedDuration,
)
from agenda.engine.duration import (
    DurationInfo,
    describe_duration,
    expected_token_count,
    resolve_effective_duration,
)
from agenda.engine.overrides import OverrideRecord, OverrideRequest, validate_override
from agenda.engine.slots import (
    build_schedule,
    generate_slots,
    select_active_schedule,
    validate_schedule,
)
from agenda.engine.unavailability import (
    Unavailability,
    blocked_periods_for,
    build_unavailability,
    is_day_blocked,
)

__all__ = [
    "BlockedPeriod",
    "BookedAppointment",
    "BreakWindow",
    "DayOfWeek",
    "DirectDuration",
    "DurationConfigType",
    "DurationInfo",
    "OverrideRecord",
    "OverrideRequest",
    "ReconciliationResult",
    "ScheduleDefinition",
    "Slot",
    "TokenBasedDuration",
    "Unavailability",
    "all_time_slots_with_tokens",
    "available_time_slots_with_tokens",
    "blocked_periods_for",
    "build_schedule",
    "build_unavailability",
    "describe_duration",
    "ensure_bookable",
    "expected_token_count",
    "generate_slots",
    "is_day_blocked",
    "reconcile_availability",
    "resolve_effective_duration",
    "select_active_schedule",
    "token_for_time",
    "validate_override",
    "validate_schedule",
]
