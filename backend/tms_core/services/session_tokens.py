"""Session Token Store — two-slot (current/previous) rotating enhanced-service credential.

Invariants:
    - rotate(T): previous := prior current (may be None), current := T
    - Both slots written in one store commit (write_many); a None previous deletes the key
    - Only a successful heartbeat rotates; failures never write
    - clear_previous() is a maintenance primitive, not used by any flow

Design Decisions:
    - Concurrent rotations from different processes are not serialized: each holds a
      token freshly issued by the remote, so last-writer-wins is acceptable
      (ADR: no distributed locks)
"""

from tms_core.core.domain_types import SessionTokenPair
from tms_core.core.repository_protocols import KeyValueStore
from tms_core.services import state_keys


class SessionTokenStore:
    """Current/previous session token pair on top of the KeyValueStore."""

    def __init__(self, store: KeyValueStore):
        self._store = store

    async def read(self) -> SessionTokenPair:
        current = await self._store.get(state_keys.SESSION_CURRENT)
        previous = await self._store.get(state_keys.SESSION_PREVIOUS)
        return SessionTokenPair(current=current, previous=previous)

    async def rotate(self, new_token: str) -> None:
        if not new_token:
            raise ValueError("new_token must be non-empty")
        prior = await self._store.get(state_keys.SESSION_CURRENT)
        await self._store.write_many({
            state_keys.SESSION_CURRENT: new_token,
            state_keys.SESSION_PREVIOUS: prior,
        })

    async def clear_previous(self) -> None:
        """Drop the previous token (closes the replay window)."""
        await self._store.delete(state_keys.SESSION_PREVIOUS)
