"""
In-process key-value store.
"""

from inkreflect.core.kv_store.base import KeyValueStore


class InMemoryKeyValueStore(KeyValueStore):
    """Dict-backed store; contents are lost when the process exits."""

    def __init__(self):
        self._data: dict[str, str] = {}

    async def initialize(self) -> None:
        pass

    async def get(self, key: str) -> str | None:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)
