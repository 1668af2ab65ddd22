"""
Pytest fixtures for scheduler tests.

Each test gets its own file-backed SQLite database so that concurrent sessions
use separate connections, as they would against a real server.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("PASSWORD_HASH_ITERATIONS", "1000")

import pytest
from datetime import date
from sqlalchemy import select

from scheduler.database import build_engine, build_session_factory, create_tables
from scheduler.models.availability import Availability
from scheduler.models.vaccine import Vaccine
from scheduler.services.account_service import account_service
from scheduler.services.availability_service import availability_service
from scheduler.services.inventory_service import inventory_service
from scheduler.session import Identity, Role, Session

STRONG_PASSWORD = "Abcd123!"
DAY = date(2024, 6, 1)


@pytest.fixture
async def engine(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'scheduler.db'}")
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def make_account(session_factory):
    """Create an account and return a Session logged in as it."""
    async def _make(role: Role, username: str, password: str = STRONG_PASSWORD) -> Session:
        async with session_factory() as db:
            await account_service.create_account(db, role, username, password)
            await db.commit()
        return Session(Identity(role=role, username=username))
    return _make


@pytest.fixture
def upload(session_factory):
    """Publish availability for a caregiver session on one or more dates."""
    async def _upload(caregiver: Session, *days: date) -> None:
        async with session_factory() as db:
            for day in days or (DAY,):
                await availability_service.upload_availability(db, caregiver, day)
            await db.commit()
    return _upload


@pytest.fixture
def stock(session_factory):
    """Add doses of a vaccine as the given caregiver session."""
    async def _stock(caregiver: Session, name: str, count: int) -> None:
        async with session_factory() as db:
            await inventory_service.add_doses(db, caregiver, name, count)
            await db.commit()
    return _stock


@pytest.fixture
def doses_of(session_factory):
    async def _doses_of(name: str):
        async with session_factory() as db:
            return await db.scalar(select(Vaccine.doses).where(Vaccine.name == name))
    return _doses_of


@pytest.fixture
def slots_on(session_factory):
    async def _slots_on(day: date = DAY) -> list[str]:
        async with session_factory() as db:
            result = await db.execute(
                select(Availability.username).where(Availability.time == day).order_by(Availability.username)
            )
            return list(result.scalars().all())
    return _slots_on
