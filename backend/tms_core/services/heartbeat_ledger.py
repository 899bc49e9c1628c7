"""Heartbeat Ledger — timestamp of the last successful heartbeat."""

import logging
from datetime import datetime, timezone

from tms_core.core.repository_protocols import KeyValueStore
from tms_core.services import state_keys

logger = logging.getLogger(__name__)


class HeartbeatLedger:
    """Write-only-on-success timestamp, stored as ISO-8601 UTC."""

    def __init__(self, store: KeyValueStore):
        self._store = store

    async def mark_success(self, at: datetime) -> None:
        if at.tzinfo is None:
            at = at.replace(tzinfo=timezone.utc)
        await self._store.upsert(
            state_keys.HEARTBEAT_LAST_SUCCESS,
            at.astimezone(timezone.utc).isoformat(),
        )

    async def last_success(self) -> datetime | None:
        """None when never set or when the stored value is not a timestamp."""
        value = await self._store.get(state_keys.HEARTBEAT_LAST_SUCCESS)
        if not value:
            return None
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError:
            logger.warning("Ignoring malformed last heartbeat timestamp")
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed
