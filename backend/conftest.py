"""
Pytest configuration and fixtures for backend tests.

This module provides the core testing infrastructure including:
- Test database setup and teardown
- Session fixtures for database access

Tests run against an in-memory SQLite database unless TEST_DATABASE_URL
points somewhere else (for example a disposable PostgreSQL database).
"""

import os
from collections.abc import AsyncGenerator

import pytest
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from conduit.db.session import create_engine, create_sessionmaker, init_models

TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")


@pytest.fixture(scope="function")
async def engine():
    """Create a test database engine with a freshly created schema."""
    test_engine = create_engine(TEST_DATABASE_URL)
    await init_models(test_engine)
    yield test_engine
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await test_engine.dispose()


@pytest.fixture(scope="function")
async def session(engine) -> AsyncGenerator[AsyncSession, None]:
    """
    Create a fresh database session for each test.

    The schema is dropped by the ``engine`` fixture afterwards, so every
    test starts from empty tables.
    """
    async with create_sessionmaker(engine)() as test_session:
        yield test_session

        # Expire all objects to detach them from the session
        test_session.expire_all()
