"""Durable key-value storage backing the persistent reflection cache tier."""

from inkreflect.core.kv_store.base import KeyValueStore
from inkreflect.core.kv_store.memory import InMemoryKeyValueStore
from inkreflect.core.kv_store.sqlite_store import SQLiteKeyValueStore

__all__ = ["KeyValueStore", "InMemoryKeyValueStore", "SQLiteKeyValueStore"]
