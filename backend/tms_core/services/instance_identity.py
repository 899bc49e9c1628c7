"""Instance Identity — stable identifier of this core deployment.

Invariants:
    - Explicit override (CORE_INSTANCE_ID) always wins and is never written to the store
    - Without override: exactly one persisted id per deployment; every later
      resolve() returns it
    - Two processes racing on first creation agree: the loser's generated id is
      discarded and the persisted one returned
    - Store failures propagate as DatabaseError; a non-persisted id is never returned

Design Decisions:
    - uuid4 string, matching what the enhanced service expects in x-core-instance-id
"""

import logging
import uuid

from tms_core.core.domain_types import InstanceId
from tms_core.core.repository_protocols import KeyValueStore
from tms_core.services import state_keys

logger = logging.getLogger(__name__)


class InstanceIdentity:
    """Resolves the instance id from configuration or the store."""

    def __init__(self, store: KeyValueStore, explicit_id: str | None = None):
        self._store = store
        self._explicit_id = explicit_id

    async def resolve(self) -> InstanceId:
        if self._explicit_id:
            return InstanceId(self._explicit_id)

        existing = await self._store.get(state_keys.INSTANCE_ID)
        if existing:
            return InstanceId(existing)

        generated = str(uuid.uuid4())
        persisted = await self._store.create_if_absent(
            state_keys.INSTANCE_ID, generated,
        )
        if persisted == generated:
            logger.info(
                "Created core instance id", extra={"instance_id": persisted},
            )
        return InstanceId(persisted)
