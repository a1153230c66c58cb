"""
Base interface for durable key-value storage.

Plays the role of a host settings store: string values under string keys,
each write replacing the previous value.
"""

from abc import ABC, abstractmethod


class KeyValueStore(ABC):
    """Abstract base class for key-value storage implementations."""

    @abstractmethod
    async def initialize(self) -> None:
        """Prepare the store (open connections, create schema)."""

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """
        Read a value.

        Args:
            key: Storage key

        Returns:
            Stored value or None if the key is absent
        """

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """
        Write a value, replacing any previous one.

        Args:
            key: Storage key
            value: Serialized value
        """

    @abstractmethod
    async def delete(self, key: str) -> None:
        """
        Remove a key. Removing a missing key is not an error.

        Args:
            key: Storage key
        """

    async def close(self) -> None:
        """Close connections. Optional to override."""
