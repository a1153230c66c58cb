"""
Reflection pipeline models: chunks, per-chunk results, generation response
shapes and the final MoodReflection artifact.
"""

from datetime import datetime, timedelta
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from inkreflect.models.journal import JournalEntry, Mood, TimeFrame
from inkreflect.utils.id_generator import generate_chunk_id, generate_reflection_id


class ReflectionChunk(BaseModel):
    """
    A bounded, chronologically sorted slice of entries sent in one
    generation call.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=generate_chunk_id, description="Unique chunk ID")
    entries: list[JournalEntry] = Field(..., min_length=1, description="Entries, oldest first")
    token_count: int = Field(..., ge=0, description="Estimated tokens for all entries")
    chunk_index: int = Field(..., ge=0, description="Zero-based position in the batch")
    total_chunks: int = Field(..., ge=1, description="Number of chunks in the batch")

    @property
    def date_range(self) -> tuple[datetime, datetime]:
        dates = [entry.created_at for entry in self.entries]
        return min(dates), max(dates)

    @property
    def progress_label(self) -> str:
        return f"Chunk {self.chunk_index + 1} of {self.total_chunks}"


class ChunkProcessingResult(BaseModel):
    """Summary produced for one successfully processed chunk."""

    model_config = ConfigDict(frozen=True)

    chunk: ReflectionChunk
    summary: str
    themes: list[str] = Field(default_factory=list)
    processing_time: float = Field(..., ge=0.0, description="Seconds spent on the call")
    tokens_used: int = Field(..., ge=0)


# ═══════════════════════════════════════════════════════════
# GENERATION RESPONSE SHAPES
# ═══════════════════════════════════════════════════════════


class ChunkSummaryResponse(BaseModel):
    """Structured output expected from a chunk summary call."""

    summary: str = Field(..., min_length=1, description="2-3 sentence summary of the period")
    themes: list[str] = Field(default_factory=list, description="Recurring themes")
    emotional_tone: str = Field(..., description="One-word emotional tone label")


class ReflectionResponse(BaseModel):
    """Structured output expected from the aggregation call."""

    summary: str = Field(..., min_length=1, description="Overall reflection summary")
    key_insight: str = Field(..., description="Single most important insight")
    themes: list[str] = Field(default_factory=list, description="Themes across all periods")
    emotional_progression: str = Field(..., description="How feelings evolved over time")


# ═══════════════════════════════════════════════════════════
# FINAL ARTIFACT
# ═══════════════════════════════════════════════════════════


class ProcessingMetadata(BaseModel):
    """Accounting for one pipeline run."""

    model_config = ConfigDict(frozen=True)

    total_tokens_used: int = Field(default=0, ge=0)
    chunks_processed: int = Field(default=0, ge=0)
    average_tokens_per_chunk: int = Field(default=0, ge=0)
    processing_strategy: str = "Chunked Processing"


class MoodReflection(BaseModel):
    """
    Synthesized reflection for one (mood, timeframe) window.

    Immutable once built; this is both the value returned to callers and the
    value stored in the reflection cache.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=generate_reflection_id)
    mood: Mood
    timeframe: TimeFrame
    summary: str
    key_insight: str
    themes: list[str] = Field(default_factory=list)
    emotional_progression: str
    entry_count: int = Field(..., ge=0, description="Entries supplied by the caller")
    processing_time: float = Field(default=0.0, ge=0.0, description="Seconds for the full run")
    generated_at: datetime = Field(default_factory=datetime.now)
    metadata: ProcessingMetadata = Field(default_factory=ProcessingMetadata)

    @property
    def formatted_processing_time(self) -> str:
        return f"{self.processing_time:.1f}s"

    @property
    def themes_display(self) -> str:
        return " • ".join(self.themes[:3])

    def is_recent(self, now: datetime | None = None) -> bool:
        """True when generated within the last five minutes."""
        now = now or datetime.now()
        return now - self.generated_at < timedelta(minutes=5)


# ═══════════════════════════════════════════════════════════
# PIPELINE STATE
# ═══════════════════════════════════════════════════════════


class PipelineState(str, Enum):
    """Orchestrator lifecycle states."""

    IDLE = "idle"
    CHECKING_CACHE = "checking_cache"
    CACHE_HIT = "cache_hit"
    CACHE_MISS = "cache_miss"
    SAMPLING = "sampling"
    CHUNKING = "chunking"
    PROCESSING_CHUNKS = "processing_chunks"
    AGGREGATING = "aggregating"
    CACHING = "caching"
    DONE = "done"
    FAILED = "failed"
    CANCELLED = "cancelled"


class PipelineStatus(BaseModel):
    """Observable snapshot of the orchestrator."""

    state: PipelineState = PipelineState.IDLE
    progress: float = Field(default=0.0, ge=0.0, le=1.0)
    message: str = ""
    cache_key: str | None = None
    error: dict | None = None
    reflection: MoodReflection | None = None

    @property
    def is_processing(self) -> bool:
        return self.state not in (
            PipelineState.IDLE,
            PipelineState.DONE,
            PipelineState.FAILED,
            PipelineState.CANCELLED,
        )
