"""Root conftest — shared test configuration and database fixtures.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - Settings built in tests never read a developer's .env file

Design Decisions:
    - SQLite in-memory via aiosqlite: fast, no external dependency; ON CONFLICT
      upserts behave the same as on PostgreSQL
"""

import os

# Ensure importing tms_core.main never points at a real database or service
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENHANCED_SERVICE_URL", "")
os.environ.setdefault("CRON_SECRET", "")

import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession, create_async_engine, async_sessionmaker,
)

from tms_core.db.base import Base  # noqa: E402
import tms_core.models  # noqa: E402,F401
from tms_core.infrastructure.kv_store import SqlAlchemyKeyValueStore  # noqa: E402


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def kv_store(test_db):
    """KeyValueStore over the real system_meta table."""
    return SqlAlchemyKeyValueStore(test_db)
