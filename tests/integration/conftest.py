"""Integration test fixtures for database and HTTP client operations.

Each test gets its own SQLite file, migrated with Alembic, so tests are
isolated without any cleanup step.
"""

import asyncio
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import NullPool

from src.registry.api.dependencies import get_db_session
from src.registry.core.db import get_session, run_migrations_sync
from src.registry.main import create_app
from tests.helpers import Registry, build_registry


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'registry.db'}"


@pytest.fixture(scope="function")
async def engine(database_url: str) -> AsyncGenerator[AsyncEngine, None]:
    """Create test database engine with migrations applied."""
    await asyncio.to_thread(run_migrations_sync, database_url)

    test_engine = create_async_engine(database_url, poolclass=NullPool)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Provide a session configured like the application's.

    Services commit on their own; tests that insert rows directly must
    commit explicitly.
    """
    async with get_session(engine) as session:
        yield session


@pytest.fixture
def registry(db_session: AsyncSession) -> Registry:
    return build_registry(db_session)


@pytest.fixture
async def client(engine: AsyncEngine) -> AsyncGenerator[AsyncClient, None]:
    """Create test client whose requests use the test database."""
    app = create_app()

    async def _test_session() -> AsyncGenerator[AsyncSession, None]:
        async with get_session(engine) as session:
            yield session

    app.dependency_overrides[get_db_session] = _test_session
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()
