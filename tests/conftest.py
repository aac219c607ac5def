"""Shared pytest fixtures for API, registry and unit tests.

The suite runs against a throwaway SQLite database (aiosqlite) so the real
engine, session factory and get_db dependency are exercised unchanged.
"""

import os
import tempfile
from collections.abc import AsyncGenerator
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

_TEST_DB_PATH = Path(tempfile.mkdtemp(prefix="tinylink-tests-")) / "tinylink.db"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DB_PATH}"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from tinylink.config import Settings  # noqa: E402
from tinylink.database import Base, async_session, engine  # noqa: E402
from tinylink.main import app  # noqa: E402
from tinylink.registry import LinkRegistry  # noqa: E402


@pytest_asyncio.fixture(scope="function")
async def database() -> AsyncGenerator[None, None]:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    # Pooled connections are bound to this test's event loop.
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(database: None) -> AsyncGenerator[AsyncSession, None]:
    async with async_session() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def client(database: None) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def settings() -> Settings:
    return Settings(SHORT_CODE_LENGTH=6, CODE_ALLOCATION_MAX_ATTEMPTS=10)


@pytest.fixture
def mock_registry() -> AsyncMock:
    registry = AsyncMock(spec=LinkRegistry)
    registry.insert_unique = AsyncMock()
    registry.increment_clicks = AsyncMock()
    return registry


@pytest.fixture
def mock_logger() -> MagicMock:
    logger = MagicMock()
    logger.info = MagicMock()
    logger.debug = MagicMock()
    logger.warning = MagicMock()
    logger.error = MagicMock()
    return logger
