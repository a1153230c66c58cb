"""
Factory for creating the durable key-value store behind the reflection cache.
"""

from inkreflect.config import CacheConfig
from inkreflect.core.kv_store.base import KeyValueStore
from inkreflect.core.kv_store.memory import InMemoryKeyValueStore
from inkreflect.core.kv_store.sqlite_store import SQLiteKeyValueStore
from inkreflect.utils.exceptions import ConfigurationError


class KeyValueStoreFactory:
    """Factory for creating key-value store backends from configuration."""

    @staticmethod
    def create(config: CacheConfig) -> KeyValueStore:
        """
        Create key-value store from configuration.

        Args:
            config: Cache configuration

        Returns:
            Key-value store instance

        Raises:
            ConfigurationError: If backend is not supported
        """
        if config.backend == "sqlite":
            return SQLiteKeyValueStore(db_path=config.db_path)
        elif config.backend == "memory":
            return InMemoryKeyValueStore()
        else:
            raise ConfigurationError(f"Unsupported cache backend: {config.backend}")
