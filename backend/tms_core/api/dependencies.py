"""Request-Scoped Wiring — builds the connectivity services for one request.

Invariants:
    - Every request gets fresh service objects over its own DB session; nothing
      is cached across requests
    - FastAPI's per-request dependency cache is the only memoization scope: the
      store, identity, and principal are resolved at most once per request
    - Principal comes from app.state.session_verifier (installed by the host);
      missing verifier → 503, no principal → 401, wrong role → 403

Design Decisions:
    - get_transport returns None in production (httpx default pool); tests
      override it with httpx.MockTransport
"""

import httpx
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from tms_core.config import Settings, get_settings
from tms_core.core.domain_types import Principal
from tms_core.core.errors import (
    ForbiddenError, SessionVerifierUnavailableError, UnauthorizedError,
)
from tms_core.infrastructure.database import get_db
from tms_core.infrastructure.enhanced_client import EnhancedServiceClient
from tms_core.infrastructure.kv_store import SqlAlchemyKeyValueStore
from tms_core.services.enhanced_gateway import EnhancedGateway
from tms_core.services.heartbeat_ledger import HeartbeatLedger
from tms_core.services.heartbeat_trigger import HeartbeatTrigger
from tms_core.services.instance_identity import InstanceIdentity
from tms_core.services.session_tokens import SessionTokenStore


def get_transport() -> httpx.AsyncBaseTransport | None:
    return None


def get_kv_store(db: AsyncSession = Depends(get_db)) -> SqlAlchemyKeyValueStore:
    return SqlAlchemyKeyValueStore(db)


def get_heartbeat_ledger(
    store: SqlAlchemyKeyValueStore = Depends(get_kv_store),
) -> HeartbeatLedger:
    return HeartbeatLedger(store)


def get_enhanced_gateway(
    store: SqlAlchemyKeyValueStore = Depends(get_kv_store),
    ledger: HeartbeatLedger = Depends(get_heartbeat_ledger),
    settings: Settings = Depends(get_settings),
    transport: httpx.AsyncBaseTransport | None = Depends(get_transport),
) -> EnhancedGateway:
    client = None
    if settings.enhanced_service_url:
        client = EnhancedServiceClient(
            settings.enhanced_service_url,
            timeout_seconds=settings.enhanced_timeout_seconds,
            transport=transport,
        )
    return EnhancedGateway(
        client=client,
        identity=InstanceIdentity(store, settings.core_instance_id),
        tokens=SessionTokenStore(store),
        ledger=ledger,
        core_secret=settings.enhanced_core_secret,
    )


def get_heartbeat_trigger(
    gateway: EnhancedGateway = Depends(get_enhanced_gateway),
    ledger: HeartbeatLedger = Depends(get_heartbeat_ledger),
    settings: Settings = Depends(get_settings),
) -> HeartbeatTrigger:
    return HeartbeatTrigger(gateway, ledger, settings.cron_secret)


async def get_principal(request: Request) -> Principal:
    verifier = getattr(request.app.state, "session_verifier", None)
    if verifier is None:
        raise SessionVerifierUnavailableError()
    principal = await verifier.verify(request)
    if principal is None:
        raise UnauthorizedError()
    return principal


def require_system_admin(
    principal: Principal = Depends(get_principal),
) -> Principal:
    if not principal.is_system_admin:
        raise ForbiddenError("System administrator role required")
    return principal


def require_platform_config_access(
    principal: Principal = Depends(get_principal),
) -> Principal:
    if not (principal.is_system_admin or principal.is_project_admin):
        raise ForbiddenError("System or project administrator role required")
    return principal
