"""
Tests de la app: health check y handler global de errores.
"""

import json

import pytest
from httpx import AsyncClient
from starlette.requests import Request

from agenda import main
from agenda.config import Settings


def _request() -> Request:
    return Request({
        "type": "http",
        "method": "GET",
        "path": "/api/v1/schedules",
        "headers": [],
        "query_string": b"",
    })


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_error_details_shown_in_development(monkeypatch):
    monkeypatch.setattr(main, "settings", Settings(APP_ENV="development", DEBUG=True))
    response = await main.global_exception_handler(_request(), RuntimeError("boom"))
    assert response.status_code == 500
    assert json.loads(response.body) == {"detail": "boom", "type": "RuntimeError"}


@pytest.mark.asyncio
async def test_error_details_hidden_in_production(monkeypatch):
    monkeypatch.setattr(main, "settings", Settings(APP_ENV="production", DEBUG=True))
    response = await main.global_exception_handler(_request(), RuntimeError("boom"))
    assert response.status_code == 500
    assert json.loads(response.body) == {"detail": "Error interno del servidor"}
