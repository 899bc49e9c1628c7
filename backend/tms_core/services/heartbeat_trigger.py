"""Heartbeat Trigger — scheduler entry point: authenticate, beat, report.

Invariants:
    - Cron secret configured + missing/wrong header ⇒ UnauthorizedError, gateway never called
    - The ledger is read after the heartbeat regardless of its outcome, so a
      disconnected report still says when the last beat succeeded

Design Decisions:
    - hmac.compare_digest: secret comparison time independent of the mismatch position
"""

import hmac
import logging

from tms_core.core.domain_types import HeartbeatReport
from tms_core.core.errors import UnauthorizedError
from tms_core.services.enhanced_gateway import EnhancedGateway
from tms_core.services.heartbeat_ledger import HeartbeatLedger

logger = logging.getLogger(__name__)


class HeartbeatTrigger:
    """Externally invoked heartbeat, guarded by an optional shared secret."""

    def __init__(
        self,
        gateway: EnhancedGateway,
        ledger: HeartbeatLedger,
        cron_secret: str | None = None,
    ):
        self._gateway = gateway
        self._ledger = ledger
        self._cron_secret = cron_secret

    def authorize(self, provided_secret: str | None) -> None:
        if not self._cron_secret:
            return
        if not provided_secret or not hmac.compare_digest(
            provided_secret.encode(), self._cron_secret.encode(),
        ):
            logger.warning("Heartbeat trigger rejected: bad cron secret")
            raise UnauthorizedError()

    async def invoke(self, provided_secret: str | None = None) -> HeartbeatReport:
        self.authorize(provided_secret)
        result = await self._gateway.heartbeat()
        last_success = await self._ledger.last_success()
        logger.info(
            "Heartbeat trigger completed",
            extra={
                "connected": result.connected,
                "reason": result.reason.value if result.reason else None,
            },
        )
        return HeartbeatReport(
            connected=result.connected,
            last_successful_heartbeat_at=last_success,
        )
