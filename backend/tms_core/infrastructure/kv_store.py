"""SQLAlchemy Key-Value Store — KeyValueStore protocol over the system_meta table.

Invariants:
    - Every write commits before returning; write_many commits once for all keys
    - create_if_absent never overwrites: the first persisted value wins, every
      caller gets the winner back
    - delete of an absent key is a no-op
    - SQLAlchemy failures roll back and surface as DatabaseError (PersistenceFailure)

Design Decisions:
    - INSERT ... ON CONFLICT for PostgreSQL and SQLite (both dialects ship it):
      the unique primary key is the create-if-absent primitive, no read-then-write race
    - Other dialects fall back to merge() / IntegrityError-then-reread
"""

import logging
from collections.abc import Mapping
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tms_core.core.errors import DatabaseError
from tms_core.infrastructure.database import to_database_error
from tms_core.models.system_meta import SystemMeta

logger = logging.getLogger(__name__)

_ON_CONFLICT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


class SqlAlchemyKeyValueStore:
    """Durable string → string mapping backed by one table."""

    def __init__(self, db: AsyncSession):
        self._db = db

    async def get(self, key: str) -> str | None:
        async with self._guard("get"):
            result = await self._db.execute(
                select(SystemMeta.value).where(SystemMeta.key == key),
            )
            return result.scalar_one_or_none()

    async def upsert(self, key: str, value: str) -> None:
        async with self._guard("upsert"):
            await self._write(key, value)
            await self._db.commit()

    async def delete(self, key: str) -> None:
        async with self._guard("delete"):
            await self._write(key, None)
            await self._db.commit()

    async def write_many(self, values: Mapping[str, str | None]) -> None:
        async with self._guard("write_many"):
            for key, value in values.items():
                await self._write(key, value)
            await self._db.commit()

    async def create_if_absent(self, key: str, value: str) -> str:
        async with self._guard("create_if_absent"):
            insert = self._on_conflict_insert()
            if insert is not None:
                stmt = insert(SystemMeta).values(
                    key=key, value=value, updated_at=_utcnow(),
                ).on_conflict_do_nothing(index_elements=["key"])
                await self._db.execute(stmt)
                await self._db.commit()
            else:
                try:
                    self._db.add(SystemMeta(key=key, value=value))
                    await self._db.commit()
                except IntegrityError:
                    # Lost the race; the other writer's row is authoritative
                    await self._db.rollback()
                    logger.info(f"Key {key} created concurrently, re-reading")

        persisted = await self.get(key)
        if persisted is None:
            raise DatabaseError(f"key {key} missing after insert", "create_if_absent")
        return persisted

    async def _write(self, key: str, value: str | None) -> None:
        """Stage one upsert or delete inside the current transaction."""
        if value is None:
            await self._db.execute(
                delete(SystemMeta).where(SystemMeta.key == key),
            )
            return
        insert = self._on_conflict_insert()
        if insert is None:
            await self._db.merge(SystemMeta(key=key, value=value))
            return
        now = _utcnow()
        stmt = insert(SystemMeta).values(key=key, value=value, updated_at=now)
        stmt = stmt.on_conflict_do_update(
            index_elements=["key"],
            set_={"value": value, "updated_at": now},
        )
        await self._db.execute(stmt)

    def _on_conflict_insert(self):
        return _ON_CONFLICT_INSERTS.get(self._db.get_bind().dialect.name)

    @asynccontextmanager
    async def _guard(self, operation: str):
        try:
            yield
        except SQLAlchemyError as e:
            await self._db.rollback()
            raise to_database_error(e, f"kv.{operation}") from e


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)
