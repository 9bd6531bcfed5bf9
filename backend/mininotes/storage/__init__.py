"""
Mini Notes Backend — Storage Layer
====================================

What:  Key-value persistence behind the services.
How:   `build_storage()` turns settings into a StorageBackends pair. The
       database variant also returns the engine so the lifespan can create
       tables on startup and dispose the pool on shutdown.

Backends:
    - MemoryKeyValueStore: dict per namespace (development, tests)
    - SQLKeyValueStore:    kv_entries table through async SQLAlchemy
"""

from typing import Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncEngine

from mininotes.config import Settings
from mininotes.storage.base import KeyValueStore, StorageBackends
from mininotes.storage.memory import MemoryKeyValueStore

NOTES_NAMESPACE = "notes"
USERS_NAMESPACE = "users"

__all__ = [
    "KeyValueStore",
    "MemoryKeyValueStore",
    "StorageBackends",
    "build_storage",
    "NOTES_NAMESPACE",
    "USERS_NAMESPACE",
]


def build_storage(settings: Settings) -> Tuple[StorageBackends, Optional[AsyncEngine]]:
    """
    Build the notes and users namespaces selected by STORAGE_BACKEND.

    Returns:
        (backends, engine). engine is None for the memory backend.
    """
    if settings.storage_backend == "memory":
        return StorageBackends(notes=MemoryKeyValueStore(), users=MemoryKeyValueStore()), None

    from mininotes.database import build_engine, build_session_factory
    from mininotes.storage.sql import SQLKeyValueStore

    engine = build_engine(settings)
    session_factory = build_session_factory(engine)
    backends = StorageBackends(
        notes=SQLKeyValueStore(session_factory, NOTES_NAMESPACE),
        users=SQLKeyValueStore(session_factory, USERS_NAMESPACE),
    )
    return backends, engine
