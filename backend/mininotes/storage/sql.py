"""
Mini Notes Backend — SQL Key-Value Store
==========================================

What:  KeyValueStore implementation over the `kv_entries` table.
Why:   Production persistence on any database async SQLAlchemy supports
       (PostgreSQL via asyncpg by default, SQLite via aiosqlite in tests).
How:   Each operation opens its own short session and transaction. The store
       holds no connection between calls; the engine pool does.

Error Handling:
    Every SQLAlchemyError is logged with the operation and namespace, then
    re-raised as StorageError so the router answers 500. The original
    exception is chained for the log's traceback but never reaches the
    client.

Concurrency:
    put() is read-then-write inside one transaction. Two concurrent first
    inserts of the same key can collide on the primary key; the loser gets a
    StorageError. Overwrites of an existing key are last-write-wins.
    put_if_absent() is a bare INSERT: the primary key decides the winner and
    the loser sees False instead of an error.
"""

import logging
from typing import List, Optional

from sqlalchemy import select, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from mininotes.exceptions import StorageError
from mininotes.models.kv_entry import KVEntry
from mininotes.storage.base import KeyValueStore

logger = logging.getLogger(__name__)


class SQLKeyValueStore(KeyValueStore):
    """
    One namespace of the kv_entries table.

    Args:
        session_factory: async_sessionmaker bound to the application engine
        namespace:       value of the `namespace` column for every row this
                         store reads or writes
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        namespace: str,
    ) -> None:
        self._session_factory = session_factory
        self.namespace = namespace

    async def get(self, key: str) -> Optional[str]:
        try:
            async with self._session_factory() as session:
                entry = await session.get(KVEntry, (self.namespace, key))
                return entry.value if entry is not None else None
        except SQLAlchemyError as e:
            raise self._wrap("get", e) from e

    async def put(self, key: str, value: str) -> None:
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    entry = await session.get(KVEntry, (self.namespace, key))
                    if entry is None:
                        session.add(KVEntry(namespace=self.namespace, key=key, value=value))
                    else:
                        entry.value = value
        except SQLAlchemyError as e:
            raise self._wrap("put", e) from e

    async def put_if_absent(self, key: str, value: str) -> bool:
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    session.add(KVEntry(namespace=self.namespace, key=key, value=value))
            return True
        except IntegrityError:
            return False
        except SQLAlchemyError as e:
            raise self._wrap("put_if_absent", e) from e

    async def delete(self, key: str) -> None:
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    entry = await session.get(KVEntry, (self.namespace, key))
                    if entry is not None:
                        await session.delete(entry)
        except SQLAlchemyError as e:
            raise self._wrap("delete", e) from e

    async def list_keys(self, prefix: str = "") -> List[str]:
        # autoescape: a '%' or '_' in a username must match literally
        query = (
            select(KVEntry.key)
            .where(KVEntry.namespace == self.namespace)
            .where(KVEntry.key.startswith(prefix, autoescape=True))
            .order_by(KVEntry.key)
        )
        try:
            async with self._session_factory() as session:
                result = await session.execute(query)
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise self._wrap("list", e) from e

    async def ping(self) -> bool:
        try:
            async with self._session_factory() as session:
                await session.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.warning("Storage ping failed for namespace %s: %s", self.namespace, e)
            return False

    def _wrap(self, operation: str, error: Exception) -> StorageError:
        # Keys stay out of the log: session keys embed bearer tokens
        logger.error(
            "Storage %s failed (namespace=%s): %s",
            operation,
            self.namespace,
            error,
        )
        return StorageError(
            context={
                "operation": operation,
                "namespace": self.namespace,
                "error_type": type(error).__name__,
            },
        )
