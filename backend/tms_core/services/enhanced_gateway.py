"""Enhanced Gateway — the four trust-boundary calls (status, activate, save-config, heartbeat).

Invariants:
    - No client configured (no service URL) ⇒ NotConfigured, zero network calls
    - Any EnhancedServiceError ⇒ Unreachable; never raised to the caller
    - Connected only on HTTP 2xx + ok envelope (+ sessionToken for heartbeat)
    - heartbeat success: rotate tokens, then mark the ledger, then return Connected
    - heartbeat failure: no store writes at all
    - DatabaseError (identity/token reads and writes) propagates: without durable
      state the layer cannot vouch for identity or rotation

Design Decisions:
    - Identity and tokens re-read on every call: horizontally scaled instances stay
      consistent without caches (ADR: store is the only coordination point)
    - Clock injectable so tests can pin the ledger timestamp
"""

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from tms_core.core.domain_types import (
    ConnectionState, SystemStatus, PlatformApiConfig,
)
from tms_core.core.enhanced_protocol import (
    STATUS_PATH, ACTIVATE_PATH, PLATFORM_API_CONFIG_PATH, HEARTBEAT_PATH,
    build_headers, parse_license_status, extract_session_token,
)
from tms_core.core.errors import EnhancedServiceError
from tms_core.infrastructure.enhanced_client import EnhancedServiceClient
from tms_core.services.heartbeat_ledger import HeartbeatLedger
from tms_core.services.instance_identity import InstanceIdentity
from tms_core.services.session_tokens import SessionTokenStore

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EnhancedGateway:
    """Outbound calls to the enhanced service, normalized to ConnectionState."""

    def __init__(
        self,
        *,
        client: EnhancedServiceClient | None,
        identity: InstanceIdentity,
        tokens: SessionTokenStore,
        ledger: HeartbeatLedger,
        core_secret: str | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._client = client
        self._identity = identity
        self._tokens = tokens
        self._ledger = ledger
        self._core_secret = core_secret
        self._clock = clock

    async def status(self) -> SystemStatus:
        if self._client is None:
            return SystemStatus(ConnectionState.not_configured())
        headers = await self._headers()
        try:
            data = await self._client.request("GET", STATUS_PATH, headers=headers)
        except EnhancedServiceError as e:
            self._log_failure("status", e)
            return SystemStatus(ConnectionState.unreachable())
        license_status, expires_at = parse_license_status(data)
        return SystemStatus(ConnectionState.ok(), license_status, expires_at)

    async def activate(self, license_key: str) -> ConnectionState:
        return await self._post(
            "activate", ACTIVATE_PATH, {"licenseKey": license_key},
        )

    async def save_config(self, config: PlatformApiConfig) -> ConnectionState:
        return await self._post(
            "save_config", PLATFORM_API_CONFIG_PATH, config.to_payload(),
        )

    async def heartbeat(self) -> ConnectionState:
        if self._client is None:
            return ConnectionState.not_configured()
        current = (await self._tokens.read()).current
        headers = await self._headers(session_token=current)
        try:
            data = await self._client.request(
                "POST", HEARTBEAT_PATH, headers=headers, json_body={},
            )
        except EnhancedServiceError as e:
            self._log_failure("heartbeat", e)
            return ConnectionState.unreachable()

        new_token = extract_session_token(data)
        if new_token is None:
            logger.warning(
                "Heartbeat response carried no session token",
                extra={"operation": "heartbeat", "reason": "missing_token"},
            )
            return ConnectionState.unreachable()

        await self._tokens.rotate(new_token)
        await self._ledger.mark_success(self._clock())
        logger.info("Heartbeat succeeded", extra={"operation": "heartbeat"})
        return ConnectionState.ok()

    async def _post(self, operation: str, path: str, body: dict) -> ConnectionState:
        if self._client is None:
            return ConnectionState.not_configured()
        headers = await self._headers()
        try:
            await self._client.request("POST", path, headers=headers, json_body=body)
        except EnhancedServiceError as e:
            self._log_failure(operation, e)
            return ConnectionState.unreachable()
        return ConnectionState.ok()

    async def _headers(self, session_token: str | None = None) -> dict[str, str]:
        instance_id = await self._identity.resolve()
        return build_headers(instance_id, self._core_secret, session_token)

    def _log_failure(self, operation: str, e: EnhancedServiceError) -> None:
        logger.warning(
            f"Enhanced service {operation} failed: {e.message}",
            extra={
                "operation": operation,
                "reason": e.reason,
                "status_code": e.status_code,
            },
        )
