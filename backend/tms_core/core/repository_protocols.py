"""Boundary Protocols — contracts between the connectivity layer and its collaborators.

Invariants:
    - Services depend on these Protocols, never on the ORM or on FastAPI internals
    - KeyValueStore is the sole coordination point across processes
    - Implementations provided by infrastructure via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, tests pass a plain in-memory fake
      (ADR: ExMA anti-pattern)
    - write_many beside get/upsert/delete: lets token rotation land in one commit
"""

from collections.abc import Mapping
from typing import Protocol

from starlette.requests import Request

from tms_core.core.domain_types import Principal


class KeyValueStore(Protocol):
    """Durable string → string mapping. Failures raise DatabaseError."""
    async def get(self, key: str) -> str | None: ...
    async def upsert(self, key: str, value: str) -> None: ...
    async def delete(self, key: str) -> None: ...
    async def create_if_absent(self, key: str, value: str) -> str:
        """Insert unless present; return whichever value is persisted."""
        ...
    async def write_many(self, values: Mapping[str, str | None]) -> None:
        """Upsert every key atomically; a None value deletes the key."""
        ...


class SessionVerifier(Protocol):
    """Resolves the dashboard user behind a request — implemented by the host app."""
    async def verify(self, request: Request) -> Principal | None: ...
