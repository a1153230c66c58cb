"""
Data models for InkReflect.

- JournalEntry, EntryFilter: journal-side input
- Mood, TimeFrame, ReflectionDepth: request dimensions
- ReflectionChunk, ChunkProcessingResult: transient per-run artifacts
- ChunkSummaryResponse, ReflectionResponse: generation response shapes
- MoodReflection, ProcessingMetadata: terminal artifact
- CacheEntry: cached reflection with expiry
- PipelineState, PipelineStatus: orchestrator state
"""

from inkreflect.models.cache import CacheDocument, CacheEntry, make_cache_key
from inkreflect.models.journal import EntryFilter, JournalEntry, Mood, ReflectionDepth, TimeFrame
from inkreflect.models.reflection import (
    ChunkProcessingResult,
    ChunkSummaryResponse,
    MoodReflection,
    PipelineState,
    PipelineStatus,
    ProcessingMetadata,
    ReflectionChunk,
    ReflectionResponse,
)

__all__ = [
    # Journal models
    "JournalEntry",
    "EntryFilter",
    "Mood",
    "TimeFrame",
    "ReflectionDepth",
    # Pipeline models
    "ReflectionChunk",
    "ChunkProcessingResult",
    "ChunkSummaryResponse",
    "ReflectionResponse",
    "MoodReflection",
    "ProcessingMetadata",
    "PipelineState",
    "PipelineStatus",
    # Cache models
    "CacheEntry",
    "CacheDocument",
    "make_cache_key",
]
