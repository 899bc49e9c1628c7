"""Service test fixtures — in-memory store, scripted remote, and a wired gateway.

Invariants:
    - Services run against InMemoryKeyValueStore unless a test needs SQL semantics
    - The gateway talks to FakeEnhancedService through httpx.MockTransport
    - The gateway clock is pinned and advanced explicitly by tests
"""

from datetime import datetime, timedelta, timezone

import pytest

from tms_core.infrastructure.enhanced_client import EnhancedServiceClient
from tms_core.services.enhanced_gateway import EnhancedGateway
from tms_core.services.heartbeat_ledger import HeartbeatLedger
from tms_core.services.instance_identity import InstanceIdentity
from tms_core.services.session_tokens import SessionTokenStore
from tests.fakes import (
    CORE_SECRET, SERVICE_URL, FakeEnhancedService, InMemoryKeyValueStore,
)


class Clock:
    def __init__(self):
        self.now = datetime(2026, 10, 17, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def memory_store():
    return InMemoryKeyValueStore()


@pytest.fixture
def remote():
    return FakeEnhancedService()


@pytest.fixture
def clock():
    return Clock()


@pytest.fixture
def make_gateway(memory_store, remote, clock):
    """Factory: make_gateway(configured, core_secret, instance_id, timeout_seconds)."""
    def _make(
        configured=True, core_secret=CORE_SECRET, instance_id=None, timeout_seconds=2,
    ):
        client = None
        if configured:
            client = EnhancedServiceClient(
                SERVICE_URL, timeout_seconds=timeout_seconds,
                transport=remote.transport,
            )
        return EnhancedGateway(
            client=client,
            identity=InstanceIdentity(memory_store, instance_id),
            tokens=SessionTokenStore(memory_store),
            ledger=HeartbeatLedger(memory_store),
            core_secret=core_secret,
            clock=clock,
        )
    return _make
