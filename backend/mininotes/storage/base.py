"""
Mini Notes Backend — Key-Value Store Interface
================================================

What:  Abstract interface every storage backend implements.
Why:   Services depend on five operations, not on a database. Swapping the
       SQL table for an in-memory dict (tests) or another KV service needs
       no service changes.
How:   ABC with async methods; values are opaque strings (the services
       store JSON documents).

Contract:
    - get(key)           → value or None when absent
    - put(key, value)    → create or overwrite (last write wins)
    - put_if_absent(k, v)→ create only; False when the key already exists
    - delete(key)        → remove; deleting a missing key is not an error
    - list_keys(prefix)  → every key starting with prefix, sorted
    - ping()             → True when the backend is reachable

    Implementations raise StorageError for backend failures. They never
    raise NotFoundError; absence is a normal return value.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional


class KeyValueStore(ABC):
    """One logical namespace of keys."""

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    async def put(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    async def put_if_absent(self, key: str, value: str) -> bool:
        """Insert `key` only if it is absent. Atomic with respect to other
        writers of the same key; returns False when the key was taken."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        ...

    @abstractmethod
    async def list_keys(self, prefix: str = "") -> List[str]:
        ...

    @abstractmethod
    async def ping(self) -> bool:
        ...


@dataclass(frozen=True)
class StorageBackends:
    """
    The two namespaces the application is wired with at process start.

    notes: note records keyed by user:<userId>:notes:<noteId>
    users: user records (user:<username>) and sessions (session:<token>)
    """

    notes: KeyValueStore
    users: KeyValueStore
