"""
Two-tier expiring cache for mood reflections.

- In-process tier: dict of CacheEntry, lost on restart
- Persistent tier: one JSON document of {key: CacheEntry} stored under a
  well-known key in a KeyValueStore

Both tiers use the same key (see make_cache_key) and the same TTL.
"""

import asyncio
from collections.abc import Callable
from datetime import datetime, timedelta

from pydantic import ValidationError as PydanticValidationError

from inkreflect.core.kv_store.base import KeyValueStore
from inkreflect.models.cache import DEFAULT_TTL, CacheDocument, CacheEntry
from inkreflect.models.reflection import MoodReflection
from inkreflect.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_STORAGE_KEY = "reflection_cache_v1"


class ReflectionCache:
    """
    Expiring reflection cache with an in-process and a persistent tier.

    Each tier has its own lock. The persistent tier's load-mutate-save cycle
    runs entirely under its lock so concurrent writers cannot drop each
    other's entries.
    """

    def __init__(
        self,
        store: KeyValueStore,
        storage_key: str = DEFAULT_STORAGE_KEY,
        ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], datetime] | None = None,
    ):
        """
        Initialize reflection cache.

        Args:
            store: Durable key-value store for the persistent tier
            storage_key: Key the persistent document is stored under
            ttl: Lifetime of a cached reflection
            clock: Returns the current time (default: datetime.now)
        """
        self.store = store
        self.storage_key = storage_key
        self.ttl = ttl
        self.clock = clock or datetime.now

        self._memory: dict[str, CacheEntry] = {}
        self._memory_lock = asyncio.Lock()
        self._persistent_lock = asyncio.Lock()

    async def initialize(self) -> int:
        """
        Prepare the store and purge expired persistent entries.

        Returns:
            Number of expired entries removed
        """
        await self.store.initialize()
        return await self.purge_expired()

    # ═══════════════════════════════════════════════════════════
    # PUBLIC OPERATIONS
    # ═══════════════════════════════════════════════════════════

    async def get(self, key: str) -> MoodReflection | None:
        """
        Return a valid cached reflection, preferring the persistent tier.

        Expired entries found along the way are removed.
        """
        now = self.clock()

        async with self._persistent_lock:
            document = await self._load()
            entry = document.get(key)
            if entry is not None:
                if entry.is_valid(now):
                    logger.info(f"Using persistent cached reflection for {key}")
                    return entry.reflection
                del document[key]
                await self._save(document)
                logger.debug(f"Dropped expired persistent cache entry for {key}")

        async with self._memory_lock:
            entry = self._memory.get(key)
            if entry is not None:
                if entry.is_valid(now):
                    logger.info(f"Using in-memory cached reflection for {key}")
                    return entry.reflection
                del self._memory[key]

        return None

    async def put(self, key: str, reflection: MoodReflection) -> CacheEntry:
        """Write a reflection to both tiers with a fresh expiry."""
        entry = CacheEntry.create(reflection, now=self.clock(), ttl=self.ttl)

        async with self._memory_lock:
            self._memory[key] = entry

        async with self._persistent_lock:
            document = await self._load()
            document[key] = entry
            await self._save(document)

        logger.debug(f"Cached reflection for {key}, expires at {entry.expires_at.isoformat()}")
        return entry

    async def invalidate(self, key: str) -> None:
        """Remove a key from both tiers."""
        async with self._memory_lock:
            self._memory.pop(key, None)

        async with self._persistent_lock:
            document = await self._load()
            if document.pop(key, None) is not None:
                await self._save(document)

        logger.debug(f"Invalidated cached reflection for {key}")

    async def clear(self) -> None:
        """Wipe both tiers."""
        async with self._memory_lock:
            self._memory.clear()

        async with self._persistent_lock:
            await self.store.delete(self.storage_key)

        logger.debug("All reflection cache cleared")

    async def purge_expired(self) -> int:
        """Remove expired entries from both tiers."""
        now = self.clock()

        async with self._memory_lock:
            stale = [key for key, entry in self._memory.items() if entry.is_expired(now)]
            for key in stale:
                del self._memory[key]

        async with self._persistent_lock:
            document = await self._load()
            fresh = {key: entry for key, entry in document.items() if entry.is_valid(now)}
            removed = len(document) - len(fresh)
            if removed:
                await self._save(fresh)
                logger.debug(f"Cleaned {removed} expired cache entries")

        return removed

    async def get_entry(self, key: str) -> CacheEntry | None:
        """Raw persistent entry for a key, expired or not."""
        async with self._persistent_lock:
            return (await self._load()).get(key)

    # ═══════════════════════════════════════════════════════════
    # PERSISTENCE HELPERS (call with _persistent_lock held)
    # ═══════════════════════════════════════════════════════════

    async def _load(self) -> dict[str, CacheEntry]:
        raw = await self.store.get(self.storage_key)
        if not raw:
            return {}
        try:
            return CacheDocument.validate_json(raw)
        except PydanticValidationError as e:
            logger.warning(f"Failed to load reflection cache, starting empty: {e.error_count()} error(s)")
            return {}

    async def _save(self, document: dict[str, CacheEntry]) -> None:
        await self.store.set(self.storage_key, CacheDocument.dump_json(document).decode())
