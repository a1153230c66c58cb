"""
Journal-side models consumed by the reflection pipeline.
"""

from datetime import datetime, timedelta
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from inkreflect.utils.id_generator import generate_entry_id


def to_local_naive(value: datetime) -> datetime:
    """Convert an aware timestamp to naive local time; naive values pass through."""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


class Mood(str, Enum):
    """Emotional category an entry is tagged with."""

    HAPPY = "Happy"
    EXCITED = "Excited"
    PEACEFUL = "Peaceful"
    NEUTRAL = "Neutral"
    THOUGHTFUL = "Thoughtful"
    SAD = "Sad"
    ANXIOUS = "Anxious"
    ANGRY = "Angry"


class TimeFrame(str, Enum):
    """Window of time a reflection covers."""

    TODAY = "Today"
    THIS_WEEK = "This Week"
    THIS_MONTH = "This Month"
    THIS_YEAR = "This Year"
    LAST_YEAR = "Last Year"
    ALL_TIME = "All Time"

    def date_range(self, now: datetime | None = None) -> tuple[datetime, datetime]:
        """
        Inclusive (start, end) window for this timeframe.

        Weeks start on Monday. The end bound is one microsecond before the
        start of the next period.

        Args:
            now: Reference time (default: current local time)

        Returns:
            Tuple of (start, end)
        """
        now = to_local_naive(now) if now is not None else datetime.now()
        day_start = now.replace(hour=0, minute=0, second=0, microsecond=0)
        tick = timedelta(microseconds=1)

        if self is TimeFrame.TODAY:
            return day_start, day_start + timedelta(days=1) - tick

        if self is TimeFrame.THIS_WEEK:
            start = day_start - timedelta(days=day_start.weekday())
            return start, start + timedelta(days=7) - tick

        if self is TimeFrame.THIS_MONTH:
            start = day_start.replace(day=1)
            if start.month == 12:
                next_start = start.replace(year=start.year + 1, month=1)
            else:
                next_start = start.replace(month=start.month + 1)
            return start, next_start - tick

        if self is TimeFrame.THIS_YEAR:
            start = day_start.replace(month=1, day=1)
            return start, start.replace(year=start.year + 1) - tick

        if self is TimeFrame.LAST_YEAR:
            start = day_start.replace(year=day_start.year - 1, month=1, day=1)
            return start, start.replace(year=start.year + 1) - tick

        return datetime.min, datetime.max


class ReflectionDepth(str, Enum):
    """
    Depth policy for reflection generation.

    Each depth maps to a fixed (entries per chunk, tokens per chunk,
    max external calls) triple.
    """

    QUICK = "Quick"
    STANDARD = "Standard"
    DEEP = "Deep"

    @property
    def entries_per_chunk(self) -> int:
        return _DEPTH_POLICIES[self][0]

    @property
    def tokens_per_chunk(self) -> int:
        return _DEPTH_POLICIES[self][1]

    @property
    def max_api_calls(self) -> int:
        return _DEPTH_POLICIES[self][2]

    @property
    def description(self) -> str:
        return _DEPTH_DESCRIPTIONS[self]


_DEPTH_POLICIES: dict[ReflectionDepth, tuple[int, int, int]] = {
    ReflectionDepth.QUICK: (5, 2000, 1),
    ReflectionDepth.STANDARD: (10, 4000, 3),
    ReflectionDepth.DEEP: (15, 6000, 5),
}

_DEPTH_DESCRIPTIONS: dict[ReflectionDepth, str] = {
    ReflectionDepth.QUICK: "Fast analysis, key themes",
    ReflectionDepth.STANDARD: "Balanced depth and speed",
    ReflectionDepth.DEEP: "Comprehensive analysis",
}


class JournalEntry(BaseModel):
    """
    A journal entry as supplied by the journal store.

    Read-only to the pipeline; entries are never mutated or truncated in place.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=generate_entry_id, description="Unique entry ID")
    title: str = Field(default="", description="Entry title")
    content: str = Field(default="", description="Entry body text")
    created_at: datetime = Field(default_factory=datetime.now, description="Creation timestamp")
    mood: Mood = Field(default=Mood.NEUTRAL, description="Emotional category tag")

    @field_validator("created_at")
    @classmethod
    def normalize_created_at(cls, v: datetime) -> datetime:
        return to_local_naive(v)


class EntryFilter(BaseModel):
    """Query passed to a journal store."""

    mood: Mood | None = None
    start: datetime | None = None
    end: datetime | None = None

    @field_validator("start", "end")
    @classmethod
    def normalize_bounds(cls, v: datetime | None) -> datetime | None:
        return to_local_naive(v) if v is not None else None

    @classmethod
    def for_timeframe(
        cls, mood: Mood, timeframe: TimeFrame, now: datetime | None = None
    ) -> "EntryFilter":
        start, end = timeframe.date_range(now)
        return cls(mood=mood, start=start, end=end)

    def matches(self, entry: JournalEntry) -> bool:
        if self.mood is not None and entry.mood != self.mood:
            return False
        if self.start is not None and entry.created_at < self.start:
            return False
        if self.end is not None and entry.created_at > self.end:
            return False
        return True
