"""Shared test fixtures for SlotBook API tests.

Uses an in-memory SQLite async engine so tests run without PostgreSQL.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

from datetime import date, timedelta
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from app.core.database import Base, get_db
from app.main import app

# Import all models to ensure they're registered with Base.metadata
from app.models.user import User
from app.models.service import Service
from app.models.availability import WeeklyRule
from app.models.appointment import Appointment  # noqa: F401
from app.services.auth import hash_password, issue_token


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Bound to a fresh engine per test by setup_db
TestSession = async_sessionmaker(class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture(autouse=True)
async def setup_db():
    """Fresh in-memory database for every test."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    TestSession.configure(bind=engine)
    yield
    await engine.dispose()


async def override_get_db():
    async with TestSession() as session:
        yield session


app.dependency_overrides[get_db] = override_get_db


@pytest_asyncio.fixture
async def client():
    """Async HTTP test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def db():
    """Direct DB session for test setup/assertions."""
    async with TestSession() as session:
        yield session


def auth_headers(user: User) -> dict:
    token = issue_token(user)
    return {"Authorization": f"Bearer {token}"}


def next_weekday(weekday: int, weeks_ahead: int = 1) -> date:
    """A date at least ``weeks_ahead`` weeks out that falls on ``weekday`` (0 = Sunday)."""
    start = date.today() + timedelta(weeks=weeks_ahead)
    return start + timedelta(days=(weekday - start.isoweekday() % 7) % 7)


async def create_user(db, email: str, role: str = "user", name: str = "Test User") -> User:
    user = User(
        name=name,
        email=email,
        hashed_password=hash_password("testpass123"),
        role=role,
        is_active=True,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest_asyncio.fixture
async def provider(db):
    return await create_user(db, "provider@example.com", role="provider", name="Dana Provider")


@pytest_asyncio.fixture
async def customer(db):
    return await create_user(db, "customer@example.com", name="Casey Customer")


@pytest_asyncio.fixture
async def service(db, provider):
    """One-hour service priced at 50.00."""
    svc = Service(
        provider_id=provider.id,
        name="Consultation",
        description="One hour consultation",
        duration_minutes=60,
        price=Decimal("50.00"),
        is_active=True,
    )
    db.add(svc)
    await db.commit()
    await db.refresh(svc)
    return svc


@pytest_asyncio.fixture
async def open_all_week(db, provider):
    """Provider works 09:00-17:00 every day."""
    for day in range(7):
        db.add(WeeklyRule(provider_id=provider.id, day_of_week=day, start_time="09:00", end_time="17:00"))
    await db.commit()


@pytest.fixture
def booking_date() -> date:
    """A Monday safely in the future."""
    return next_weekday(1)
