"""Pytest configuration and fixtures."""

import os
from contextlib import asynccontextmanager

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import traintrack.models  # noqa: F401  (registers every table on Base.metadata)
from traintrack.api.auth import get_current_user
from traintrack.core.db import Base, get_db
from traintrack.main import create_app
from traintrack.models.enums import UserRole
from tests.factories import UserFactory

# Point at Postgres (postgresql+asyncpg://...) to run against the production dialect
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite://")


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        # One shared connection so the in-memory database survives across sessions
        return {"connect_args": {"check_same_thread": False}, "poolclass": StaticPool}
    return {}


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, **_engine_kwargs(TEST_DATABASE_URL))

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine):
    """Create fresh DB session for each test."""
    async_session_maker = async_sessionmaker(
        db_engine, class_=AsyncSession, expire_on_commit=False
    )

    async with async_session_maker() as session:
        yield session
        await session.rollback()


@asynccontextmanager
async def client_as(db_session: AsyncSession, user=None):
    """AsyncClient whose requests run as `user` (unauthenticated when None)."""
    app = create_app()

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    if user is not None:

        async def override_get_current_user():
            return user

        app.dependency_overrides[get_current_user] = override_get_current_user

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        ac.test_user = user
        ac.db_session = db_session
        yield ac


@pytest_asyncio.fixture
async def hr_admin(db_session):
    return await UserFactory.create(
        db_session,
        email="hr@example.com",
        first_name="Helen",
        last_name="Ross",
        role=UserRole.HR_ADMIN.value,
    )


@pytest_asyncio.fixture
async def manager(db_session):
    return await UserFactory.create(
        db_session,
        email="manager@example.com",
        first_name="Marco",
        last_name="Diaz",
        role=UserRole.MANAGER.value,
    )


@pytest_asyncio.fixture
async def employee(db_session, manager):
    """Employee reporting to the `manager` fixture."""
    return await UserFactory.create(
        db_session,
        email="employee@example.com",
        first_name="Erin",
        last_name="Lee",
        role=UserRole.EMPLOYEE.value,
        manager_id=manager.id,
    )


@pytest_asyncio.fixture
async def client(db_session, employee):
    """Client authenticated as a plain employee."""
    async with client_as(db_session, employee) as ac:
        yield ac


@pytest_asyncio.fixture
async def manager_client(db_session, manager):
    async with client_as(db_session, manager) as ac:
        yield ac


@pytest_asyncio.fixture
async def hr_client(db_session, hr_admin):
    async with client_as(db_session, hr_admin) as ac:
        yield ac


@pytest_asyncio.fixture
async def unauthenticated_client(db_session):
    """AsyncClient without authentication overrides (for testing auth failures)."""
    async with client_as(db_session) as ac:
        yield ac
