"""
Pytest configuration and shared fixtures for the Bus Fleet test suite.

This module provides:
- Database fixtures (in-memory SQLite for fast tests)
- Mock collaborators for service unit tests
- Data factories for drivers, routes and buses
"""

import os

# Must be set before core.db builds the engine
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from core.db import Base
import models  # noqa: F401  registers every table on Base.metadata
from models.user import User, DriverStatus, UserRole
from models.route import Route, Stop, RouteStop
from services.bus_service import BusService
from services.route_service import RouteService


# Test Database Configuration
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def async_engine():
    """Create async engine for testing with in-memory SQLite."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def async_db_session(async_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create async database session for testing."""
    async_session = async_sessionmaker(
        async_engine, class_=AsyncSession, expire_on_commit=False
    )

    async with async_session() as session:
        yield session


@pytest.fixture
def bus_service(async_db_session) -> BusService:
    return BusService(async_db_session, route_service=RouteService(async_db_session), id_prefix="BUS")


# Test Data Factories
@pytest.fixture
def make_driver(async_db_session):
    """Factory creating a driver with a given operational status."""
    counter = {"n": 0}

    async def _make(status: DriverStatus = DriverStatus.AVAILABLE, name: str = None) -> User:
        counter["n"] += 1
        n = counter["n"]
        driver = User(
            name=name or f"Driver {n}",
            email=f"driver{n}@example.com",
            number=f"+2449000000{n:02d}",
            password="not-a-real-hash",
            role=UserRole.DRIVER,
            status=status,
        )
        async_db_session.add(driver)
        await async_db_session.commit()
        await async_db_session.refresh(driver)
        return driver

    return _make


@pytest_asyncio.fixture
async def test_route(async_db_session) -> Route:
    """Route with three stops, inserted out of order."""
    route = Route(name="Linha 1 - Centro")
    stops = [Stop(name="Largo"), Stop(name="Mercado"), Stop(name="Terminal")]
    async_db_session.add(route)
    async_db_session.add_all(stops)
    await async_db_session.flush()

    for stop, order in ((stops[2], 3), (stops[0], 1), (stops[1], 2)):
        async_db_session.add(RouteStop(route_id=route.id, stop_id=stop.id, order=order))

    await async_db_session.commit()
    return route


# Common Test Doubles
@pytest.fixture
def mock_bus_repository():
    """BusRepository double: every data-access call is an AsyncMock."""
    repo = AsyncMock()
    repo.find_latest.return_value = None
    repo.find_by_driver_id.return_value = None
    repo.find_first.return_value = None
    repo.find_identifiers.return_value = []
    return repo


@pytest.fixture
def mock_route_service():
    route_service = AsyncMock()
    route_service.find_one.return_value = None
    return route_service


@pytest.fixture
def mock_async_session():
    """Provide a reusable AsyncSession-like test double.

    - `add` is a `MagicMock` (synchronous)
    - `flush`, `commit`, `rollback`, `refresh`, `execute` are `AsyncMock`
    """
    session = AsyncMock()
    session.add = MagicMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.refresh = AsyncMock()
    session.execute = AsyncMock()
    return session
