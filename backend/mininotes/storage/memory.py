"""
Mini Notes Backend — In-Memory Key-Value Store
================================================

What:  Dict-backed KeyValueStore.
Why:   Lets the app and its tests run without a database.
Who:   Built by build_storage() when STORAGE_BACKEND=memory, and directly by
       the test fixtures.

Limitations:
    Data lives in one process and is lost on restart. It is a single-writer
    convenience store: there are no await points inside an operation, so
    each call is atomic on one event loop, but nothing coordinates multiple
    workers. Never use it behind `uvicorn --workers N`.
"""

from typing import Dict, List, Optional

from mininotes.storage.base import KeyValueStore


class MemoryKeyValueStore(KeyValueStore):

    def __init__(self) -> None:
        self._data: Dict[str, str] = {}

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def put(self, key: str, value: str) -> None:
        self._data[key] = value

    async def put_if_absent(self, key: str, value: str) -> bool:
        # No await between check and set: atomic on one event loop
        if key in self._data:
            return False
        self._data[key] = value
        return True

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def list_keys(self, prefix: str = "") -> List[str]:
        return sorted(k for k in self._data if k.startswith(prefix))

    async def ping(self) -> bool:
        return True

    def __len__(self) -> int:
        return len(self._data)
