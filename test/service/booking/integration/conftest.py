"""
Integration Test Fixtures

Runs the booking repositories and the Unit of Work against the test PostgreSQL
database (POSTGRES_DB is pointed at flight_booking_test_db by test/conftest.py).

- The test database is created on first use
- Tables come from the ORM metadata
- Every test starts from empty tables
"""

from collections.abc import AsyncIterator

import pytest
from sqlalchemy import make_url, text
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from src.platform.config.core_setting import settings
from src.platform.database.db_setting import Base
from src.platform.resilience.circuit_breaker import CircuitBreaker, CircuitBreakerConfig
from src.service.booking.app.interface.i_flight_client import FlightServiceError
import src.service.booking.driven_adapter.model  # noqa: F401


_database_ready = False


# =============================================================================
# Database Setup and Cleanup
# =============================================================================
async def _ensure_test_database() -> None:
    db_url = make_url(settings.DATABASE_URL_ASYNC)
    engine = create_async_engine(db_url.set(database='postgres'), isolation_level='AUTOCOMMIT')
    try:
        async with engine.connect() as conn:
            result = await conn.execute(
                text('SELECT 1 FROM pg_database WHERE datname = :name'),
                {'name': db_url.database},
            )
            if not result.fetchone():
                await conn.execute(text(f'CREATE DATABASE {db_url.database}'))
    finally:
        await engine.dispose()


@pytest.fixture
async def session_maker() -> AsyncIterator[async_sessionmaker[AsyncSession]]:
    global _database_ready
    if not _database_ready:
        try:
            await _ensure_test_database()
        except (OSError, DBAPIError) as e:
            pytest.skip(f'PostgreSQL is not reachable: {e}')
        _database_ready = True

    engine = create_async_engine(settings.DATABASE_URL_ASYNC)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all, checkfirst=True)
        await conn.execute(text('TRUNCATE TABLE passenger, booking RESTART IDENTITY CASCADE'))

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
def flight_circuit_breaker() -> CircuitBreaker:
    return CircuitBreaker(
        name='flight_client',
        config=CircuitBreakerConfig(record_exceptions=(FlightServiceError,)),
    )
