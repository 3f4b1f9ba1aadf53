"""
Router principal de la API v1.
Agrupa todos los sub-routers de la versión 1.
"""

from fastapi import APIRouter

from agenda.api.v1.appointments import router as appointments_router
from agenda.api.v1.schedules import router as schedules_router
from agenda.api.v1.tokens import router as tokens_router

api_v1_router = APIRouter()

api_v1_router.include_router(
    schedules_router,
    prefix="/schedules",
    tags=["Horarios de Doctores"],
)

api_v1_router.include_router(
    tokens_router,
    prefix="/appointments/tokens",
    tags=["Turnos"],
)

api_v1_router.include_router(
    appointments_router,
    prefix="/appointments",
    tags=["Citas"],
)
