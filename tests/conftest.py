"""
Fixtures compartidas para Pytest.
Configura base de datos de test, cliente HTTP y horarios de ejemplo.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")
os.environ.setdefault("DEBUG", "false")

from collections.abc import AsyncGenerator  # noqa: E402
from datetime import date, time  # noqa: E402
from uuid import UUID, uuid4  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402

from agenda.database import Base, get_db  # noqa: E402
from agenda.engine import DayOfWeek, ScheduleDefinition, build_schedule  # noqa: E402
from agenda.engine.definitions import DurationConfigType  # noqa: E402
from agenda.main import app  # noqa: E402
from agenda.models.doctor_schedule import DoctorSchedule  # noqa: E402

# ── Engine de test (SQLite async) ────────────────────
TEST_DATABASE_URL = "sqlite+aiosqlite:///./test.db"

test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)
test_session_factory = async_sessionmaker(
    test_engine, class_=AsyncSession, expire_on_commit=False
)

# Lunes 19/10/2026; el horario de ejemplo se define para su día de la semana
TARGET_DATE = date(2026, 10, 19)


@pytest_asyncio.fixture
async def setup_database():
    """Crea y destruye las tablas para cada test que use la DB."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def db_session(setup_database) -> AsyncGenerator[AsyncSession, None]:
    """Provee una sesión de DB de test."""
    async with test_session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Cliente HTTP de test que usa la DB de test."""

    async def _get_test_db():
        yield db_session

    app.dependency_overrides[get_db] = _get_test_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ── Horarios de ejemplo ──────────────────────────────

@pytest.fixture
def target_date() -> date:
    return TARGET_DATE


@pytest.fixture
def doctor_id() -> UUID:
    return uuid4()


@pytest.fixture
def morning_schedule(doctor_id: UUID) -> ScheduleDefinition:
    """08:00–12:00, descanso 10:00–10:30, slots DIRECT de 30 minutos."""
    return build_schedule(
        doctor_id=doctor_id,
        day_of_week=DayOfWeek.from_date(TARGET_DATE),
        start_time="08:00",
        end_time="12:00",
        break_start_time="10:00",
        break_end_time="10:30",
        duration_config_type=DurationConfigType.DIRECT,
        duration_minutes=30,
    )


@pytest.fixture
def token_based_schedule(doctor_id: UUID) -> ScheduleDefinition:
    """Misma ventana, 6 turnos por día."""
    return build_schedule(
        doctor_id=doctor_id,
        day_of_week=DayOfWeek.from_date(TARGET_DATE),
        start_time="08:00",
        end_time="12:00",
        break_start_time="10:00",
        break_end_time="10:30",
        duration_config_type=DurationConfigType.TOKEN_BASED,
        target_tokens_per_day=6,
    )


@pytest_asyncio.fixture
async def stored_schedule(db_session: AsyncSession, doctor_id: UUID) -> DoctorSchedule:
    """Horario DIRECT de 30 minutos guardado en la DB para TARGET_DATE."""
    schedule = DoctorSchedule(
        doctor_id=doctor_id,
        day_of_week=DayOfWeek.from_date(TARGET_DATE),
        start_time=time(8, 0),
        end_time=time(12, 0),
        break_start_time=time(10, 0),
        break_end_time=time(10, 30),
        duration_config_type=DurationConfigType.DIRECT,
        duration_minutes=30,
        is_active=True,
    )
    db_session.add(schedule)
    await db_session.commit()
    await db_session.refresh(schedule)
    return schedule
