"""
Cache entry model shared by both reflection cache tiers.
"""

from datetime import datetime, timedelta

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from inkreflect.models.journal import Mood, TimeFrame
from inkreflect.models.reflection import MoodReflection

DEFAULT_TTL = timedelta(hours=24)


def make_cache_key(mood: Mood, timeframe: TimeFrame) -> str:
    """
    Build the cache key for a (mood, timeframe) pair.

    Entry identifiers are deliberately not part of the key: a window keeps
    serving its cached reflection until the entry expires or is invalidated.
    """
    return f"{mood.value}_{timeframe.value}"


class CacheEntry(BaseModel):
    """A cached reflection with its validity window."""

    model_config = ConfigDict(frozen=True)

    reflection: MoodReflection
    created_at: datetime
    expires_at: datetime

    @classmethod
    def create(
        cls, reflection: MoodReflection, now: datetime, ttl: timedelta = DEFAULT_TTL
    ) -> "CacheEntry":
        return cls(reflection=reflection, created_at=now, expires_at=now + ttl)

    def is_valid(self, now: datetime) -> bool:
        return now < self.expires_at

    def is_expired(self, now: datetime) -> bool:
        return not self.is_valid(now)


# Persisted layout: {cache_key: {reflection, created_at, expires_at}}
CacheDocument = TypeAdapter(dict[str, CacheEntry])
