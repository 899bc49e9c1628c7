"""API test fixtures — FastAPI app over an in-memory DB and a scripted remote.

Invariants:
    - get_db, get_settings, and get_transport overridden per test
    - db_manager patched so readiness checks hit the test engine
    - app.state.session_verifier reset after every test

Design Decisions:
    - httpx AsyncClient over ASGITransport: exercises routing, dependencies,
      and global error handlers together
"""

import pytest
from httpx import ASGITransport, AsyncClient

from tms_core.api.dependencies import get_transport
from tms_core.config import Settings, get_settings
from tms_core.infrastructure.database import get_db, DatabaseSessionManager
import tms_core.infrastructure.database as db_module
from tms_core.main import app
from tests.fakes import (
    CORE_SECRET, CRON_SECRET, SERVICE_URL, FakeEnhancedService, FakeSessionVerifier,
)


@pytest.fixture
def remote():
    return FakeEnhancedService()


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        database_url="sqlite+aiosqlite:///:memory:",
        enhanced_service_url=SERVICE_URL,
        enhanced_core_secret=CORE_SECRET,
        cron_secret=CRON_SECRET,
    )


@pytest.fixture
async def client(test_engine, test_session_factory, settings, remote):
    """FastAPI test client with DB, settings, and transport overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_transport] = lambda: remote.transport

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    app.state.session_verifier = None
    db_module.db_manager = original_manager


@pytest.fixture
def login():
    """login(principal) installs a verifier that returns it."""
    def _login(principal):
        verifier = FakeSessionVerifier(principal)
        app.state.session_verifier = verifier
        return verifier
    return _login
