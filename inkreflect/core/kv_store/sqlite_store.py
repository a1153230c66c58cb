"""
SQLite key-value store using aiosqlite.
"""

from datetime import datetime
from pathlib import Path

import aiosqlite

from inkreflect.core.kv_store.base import KeyValueStore
from inkreflect.utils.exceptions import StoreError
from inkreflect.utils.logger import get_logger

logger = get_logger(__name__)


class SQLiteKeyValueStore(KeyValueStore):
    """
    Settings-style key-value table in a local SQLite file.

    Features:
    - Single connection, opened lazily
    - WAL journal for crash-safe writes
    - UPSERT writes
    """

    def __init__(self, db_path: str = "data/inkreflect.db"):
        """
        Initialize SQLite key-value store.

        Args:
            db_path: Path to SQLite database file (":memory:" for a private in-memory DB)
        """
        self.db_path = db_path
        self.connection: aiosqlite.Connection | None = None
        self._initialized = False

        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    async def connect(self) -> None:
        """Establish connection to SQLite."""
        if self.connection is None:
            self.connection = await aiosqlite.connect(self.db_path)
            await self.connection.execute("PRAGMA journal_mode = WAL")
            await self.connection.commit()

    async def initialize(self) -> None:
        """Create the settings table."""
        if self._initialized:
            return
        try:
            await self.connect()
            await self.connection.execute(
                """
                CREATE TABLE IF NOT EXISTS settings (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """
            )
            await self.connection.commit()
            self._initialized = True
        except aiosqlite.Error as e:
            raise StoreError(f"Failed to initialize key-value store: {e}") from e

    async def get(self, key: str) -> str | None:
        await self.initialize()
        try:
            async with self.connection.execute(
                "SELECT value FROM settings WHERE key = ?", (key,)
            ) as cursor:
                row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise StoreError(f"Failed to read key {key}: {e}", context={"key": key}) from e

        return row[0] if row else None

    async def set(self, key: str, value: str) -> None:
        await self.initialize()
        try:
            await self.connection.execute(
                """
                INSERT INTO settings (key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
                """,
                (key, value, datetime.now().isoformat()),
            )
            await self.connection.commit()
        except aiosqlite.Error as e:
            raise StoreError(f"Failed to write key {key}: {e}", context={"key": key}) from e

    async def delete(self, key: str) -> None:
        await self.initialize()
        try:
            await self.connection.execute("DELETE FROM settings WHERE key = ?", (key,))
            await self.connection.commit()
        except aiosqlite.Error as e:
            raise StoreError(f"Failed to delete key {key}: {e}", context={"key": key}) from e

    async def close(self) -> None:
        """Close connection."""
        if self.connection:
            await self.connection.close()
            self.connection = None
            self._initialized = False
            logger.debug(f"Closed key-value store at {self.db_path}")
