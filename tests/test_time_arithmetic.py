"""
Tests de aritmética de horas.
"""

from datetime import date, time

import pytest

from agenda.core.exceptions import InvalidFormat, ScheduleOverflow
from agenda.engine.time_arithmetic import (
    add_minutes,
    compare,
    format_time,
    minutes_between,
    parse_date,
    parse_time,
)


@pytest.mark.parametrize("value, expected", [
    ("08:00", time(8, 0)),
    ("8:05", time(8, 5)),
    ("23:59", time(23, 59)),
    ("09:30:00", time(9, 30)),
    ("09:30:45", time(9, 30)),
    (time(14, 15, 30), time(14, 15)),
])
def test_parse_time_accepts_hh_mm_and_hh_mm_ss(value, expected):
    assert parse_time(value) == expected


@pytest.mark.parametrize("value", [
    "24:00", "12:60", "12:00:60", "12", "12:00:00:00", "ab:cd", "", "-1:30", "12:3x",
])
def test_parse_time_rejects_malformed(value):
    with pytest.raises(InvalidFormat):
        parse_time(value)


def test_parse_date():
    assert parse_date("2026-10-19") == date(2026, 10, 19)
    assert parse_date(date(2026, 1, 2)) == date(2026, 1, 2)


@pytest.mark.parametrize("value", ["19/10/2026", "2026-13-01", "hoy", None])
def test_parse_date_rejects_malformed(value):
    with pytest.raises(InvalidFormat):
        parse_date(value)


def test_add_minutes_within_day():
    assert add_minutes(time(8, 0), 35) == time(8, 35)
    assert add_minutes(time(9, 45), 30) == time(10, 15)
    assert add_minutes(time(10, 0), -30) == time(9, 30)


def test_add_minutes_crossing_midnight_is_an_error():
    with pytest.raises(ScheduleOverflow):
        add_minutes(time(23, 30), 45)
    with pytest.raises(ScheduleOverflow):
        add_minutes(time(0, 10), -20)


def test_compare_and_minutes_between():
    assert compare(time(8, 0), time(9, 0)) == -1
    assert compare(time(9, 0), time(9, 0)) == 0
    assert compare(time(9, 1), time(9, 0)) == 1
    assert minutes_between(time(8, 0), time(12, 0)) == 240
    assert minutes_between(time(12, 0), time(8, 0)) == -240


def test_format_time_pads():
    assert format_time(time(8, 5)) == "08:05"
