"""
Tests for key-value store backends.
"""

import pytest

from inkreflect.core.kv_store import InMemoryKeyValueStore, SQLiteKeyValueStore


@pytest.fixture
async def sqlite_store(tmp_path):
    store = SQLiteKeyValueStore(db_path=str(tmp_path / "kv" / "test.db"))
    await store.initialize()
    yield store
    await store.close()


@pytest.fixture(params=["memory", "sqlite"])
async def store(request, tmp_path):
    if request.param == "memory":
        store = InMemoryKeyValueStore()
    else:
        store = SQLiteKeyValueStore(db_path=str(tmp_path / "store.db"))
    await store.initialize()
    yield store
    await store.close()


@pytest.mark.unit
@pytest.mark.asyncio
class TestKeyValueStore:
    """Behavior shared by every backend."""

    async def test_missing_key(self, store):
        assert await store.get("absent") is None

    async def test_set_and_get(self, store):
        await store.set("greeting", "hello")
        assert await store.get("greeting") == "hello"

    async def test_overwrite(self, store):
        await store.set("greeting", "hello")
        await store.set("greeting", "goodbye")
        assert await store.get("greeting") == "goodbye"

    async def test_delete(self, store):
        await store.set("greeting", "hello")
        await store.delete("greeting")
        assert await store.get("greeting") is None

    async def test_delete_missing_key(self, store):
        await store.delete("absent")
        assert await store.get("absent") is None


@pytest.mark.unit
@pytest.mark.asyncio
class TestSQLiteKeyValueStore:
    """SQLite-specific behavior."""

    async def test_creates_parent_directory(self, tmp_path):
        SQLiteKeyValueStore(db_path=str(tmp_path / "nested" / "dir" / "cache.db"))
        assert (tmp_path / "nested" / "dir").is_dir()

    async def test_values_survive_reconnect(self, tmp_path):
        path = str(tmp_path / "persist.db")
        first = SQLiteKeyValueStore(db_path=path)
        await first.set("reflection_cache_v1", '{"a": 1}')
        await first.close()

        second = SQLiteKeyValueStore(db_path=path)
        assert await second.get("reflection_cache_v1") == '{"a": 1}'
        await second.close()

    async def test_initialize_is_idempotent(self, sqlite_store):
        await sqlite_store.initialize()
        await sqlite_store.set("k", "v")
        await sqlite_store.initialize()
        assert await sqlite_store.get("k") == "v"

    async def test_close_resets_connection(self, sqlite_store):
        await sqlite_store.close()
        assert sqlite_store.connection is None

        # Lazily reconnects on next use
        assert await sqlite_store.get("k") is None

    async def test_in_memory_database(self):
        store = SQLiteKeyValueStore(db_path=":memory:")
        await store.set("k", "v")
        assert await store.get("k") == "v"
        await store.close()
