"""
Tests de los endpoints de horarios.
"""

import pytest
from httpx import AsyncClient

API = "/api/v1/schedules"


def _payload(doctor_id, **overrides) -> dict:
    payload = {
        "doctor_id": str(doctor_id),
        "working_days": ["MONDAY", "WEDNESDAY"],
        "start_time": "08:00",
        "end_time": "12:00",
        "break_start_time": "10:00",
        "break_end_time": "10:30",
        "duration_config_type": "DIRECT",
        "duration_minutes": 30,
    }
    payload.update(overrides)
    return payload


@pytest.mark.asyncio
async def test_create_schedule_one_per_working_day(client: AsyncClient, doctor_id):
    response = await client.post(API, json=_payload(doctor_id))
    assert response.status_code == 201
    data = response.json()
    assert [s["day_of_week"] for s in data] == ["MONDAY", "WEDNESDAY"]
    assert data[0]["effective_duration"] == 30
    assert data[0]["available_working_minutes"] == 210
    assert data[0]["expected_tokens"] == 7

    listed = await client.get(f"{API}/doctor/{doctor_id}")
    assert listed.status_code == 200
    assert len(listed.json()) == 2


@pytest.mark.asyncio
async def test_create_token_based_schedule(client: AsyncClient, doctor_id):
    payload = _payload(
        doctor_id,
        working_days=["MONDAY"],
        duration_config_type="TOKEN_BASED",
        duration_minutes=None,
        target_tokens_per_day=6,
    )
    response = await client.post(API, json=payload)
    assert response.status_code == 201
    schedule = response.json()[0]
    assert schedule["effective_duration"] == 35
    assert schedule["expected_tokens"] == 6

    info = await client.get(f"{API}/{schedule['id']}/duration-info")
    assert info.status_code == 200
    assert info.json()["calculated_duration_minutes"] == 35
    assert info.json()["break_minutes"] == 30


@pytest.mark.asyncio
@pytest.mark.parametrize("overrides", [
    {"start_time": "12:00", "end_time": "08:00"},
    {"break_end_time": None},
    {"duration_minutes": 300},
    {"target_tokens_per_day": 6},
])
async def test_create_invalid_schedule_is_422(client: AsyncClient, doctor_id, overrides):
    response = await client.post(API, json=_payload(doctor_id, **overrides))
    assert response.status_code == 422
    assert response.json()["type"] == "InvalidSchedule"


@pytest.mark.asyncio
async def test_malformed_time_is_422(client: AsyncClient, doctor_id):
    response = await client.post(API, json=_payload(doctor_id, start_time="8am"))
    assert response.status_code == 422
    assert response.json()["type"] == "InvalidFormat"


@pytest.mark.asyncio
async def test_overlapping_schedule_is_409(client: AsyncClient, doctor_id):
    await client.post(API, json=_payload(doctor_id))
    response = await client.post(
        API, json=_payload(doctor_id, working_days=["MONDAY"], start_time="11:00", end_time="14:00",
                           break_start_time=None, break_end_time=None),
    )
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_new_version_with_later_effective_date_is_allowed(client: AsyncClient, doctor_id):
    first = _payload(doctor_id, working_days=["MONDAY"], end_date="2026-10-31")
    second = _payload(doctor_id, working_days=["MONDAY"], effective_date="2026-11-01", duration_minutes=20)
    assert (await client.post(API, json=first)).status_code == 201
    assert (await client.post(API, json=second)).status_code == 201


@pytest.mark.asyncio
async def test_preview_slots(client: AsyncClient, stored_schedule, target_date):
    response = await client.get(
        f"{API}/{stored_schedule.id}/slots", params={"date": target_date.isoformat()}
    )
    assert response.status_code == 200
    slots = response.json()
    assert len(slots) == 8
    assert slots[4] == {
        "time": "10:00", "token_number": None, "is_break_time": True, "is_available": False,
    }
    assert slots[5]["token_number"] == 5


@pytest.mark.asyncio
async def test_get_unknown_schedule_is_404(client: AsyncClient, doctor_id):
    response = await client.get(f"{API}/{doctor_id}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_deactivates_schedule(client: AsyncClient, stored_schedule, doctor_id):
    response = await client.delete(f"{API}/{stored_schedule.id}")
    assert response.status_code == 204

    active = await client.get(f"{API}/doctor/{doctor_id}")
    assert active.json() == []

    everything = await client.get(f"{API}/doctor/{doctor_id}", params={"include_inactive": True})
    assert len(everything.json()) == 1
    assert everything.json()[0]["is_active"] is False


@pytest.mark.asyncio
async def test_second_shift_on_same_weekday_is_409(client: AsyncClient, doctor_id, target_date):
    morning = _payload(
        doctor_id, working_days=["MONDAY"], start_time="08:00", end_time="10:00",
        break_start_time=None, break_end_time=None, duration_minutes=60,
    )
    afternoon = dict(morning, start_time="14:00", end_time="16:00")

    assert (await client.post(API, json=morning)).status_code == 201
    response = await client.post(API, json=afternoon)
    assert response.status_code == 409

    slots = await client.get(
        f"/api/v1/appointments/tokens/doctor/{doctor_id}/slots",
        params={"date": target_date.isoformat()},
    )
    assert slots.json() == {"08:00": 1, "09:00": 2}


# ── Actualización ────────────────────────────────────

@pytest.mark.asyncio
async def test_update_duration(client: AsyncClient, stored_schedule, target_date):
    response = await client.put(f"{API}/{stored_schedule.id}", json={"duration_minutes": 20})
    assert response.status_code == 200
    assert response.json()["effective_duration"] == 20
    assert response.json()["expected_tokens"] == 10

    slots = await client.get(
        f"{API}/{stored_schedule.id}/slots", params={"date": target_date.isoformat()}
    )
    assert [s["time"] for s in slots.json()][:3] == ["08:00", "08:20", "08:40"]


@pytest.mark.asyncio
async def test_update_switches_to_token_based(client: AsyncClient, stored_schedule):
    response = await client.put(f"{API}/{stored_schedule.id}", json={
        "duration_config_type": "TOKEN_BASED",
        "target_tokens_per_day": 6,
    })
    assert response.status_code == 200
    data = response.json()
    assert data["duration_config_type"] == "TOKEN_BASED"
    assert data["duration_minutes"] is None
    assert data["effective_duration"] == 35


@pytest.mark.asyncio
async def test_update_removes_break(client: AsyncClient, stored_schedule):
    response = await client.put(
        f"{API}/{stored_schedule.id}", json={"break_start_time": None, "break_end_time": None}
    )
    assert response.status_code == 200
    assert response.json()["break_start_time"] is None
    assert response.json()["available_working_minutes"] == 240


@pytest.mark.asyncio
@pytest.mark.parametrize("body, error_type", [
    ({"end_time": "07:00"}, "InvalidSchedule"),
    ({"break_start_time": "11:45", "break_end_time": "12:30"}, "InvalidSchedule"),
    ({"target_tokens_per_day": 6}, "InvalidSchedule"),
    ({"start_time": "7h"}, "InvalidFormat"),
])
async def test_invalid_update_is_422(client: AsyncClient, stored_schedule, body, error_type):
    response = await client.put(f"{API}/{stored_schedule.id}", json=body)
    assert response.status_code == 422
    assert response.json()["type"] == error_type


@pytest.mark.asyncio
async def test_update_into_taken_weekday_is_409(client: AsyncClient, stored_schedule, doctor_id):
    created = await client.post(API, json=_payload(doctor_id, working_days=["TUESDAY"]))
    tuesday_id = created.json()[0]["id"]

    response = await client.put(f"{API}/{tuesday_id}", json={"day_of_week": "MONDAY"})
    assert response.status_code == 409

    # Desactivado no choca con nadie
    response = await client.put(
        f"{API}/{tuesday_id}", json={"day_of_week": "MONDAY", "is_active": False}
    )
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_update_unknown_schedule_is_404(client: AsyncClient, doctor_id):
    response = await client.put(f"{API}/{doctor_id}", json={"duration_minutes": 20})
    assert response.status_code == 404
