"""
Reflection pipeline services.

- EntrySampler: reduces oversized corpora
- ChunkBuilder: partitions entries into bounded chunks
- ChunkProcessor: summarizes chunks sequentially
- ReflectionAggregator: merges chunk summaries into a MoodReflection
- ReflectionCache: two-tier expiring cache
- ReflectionPipeline: orchestrates all of the above
"""

from inkreflect.services.aggregator import ReflectionAggregator
from inkreflect.services.chunk_builder import ChunkBuilder
from inkreflect.services.chunk_processor import ChunkProcessor
from inkreflect.services.entry_sampler import EntrySampler
from inkreflect.services.reflection_cache import ReflectionCache
from inkreflect.services.reflection_pipeline import ReflectionPipeline

__all__ = [
    "EntrySampler",
    "ChunkBuilder",
    "ChunkProcessor",
    "ReflectionAggregator",
    "ReflectionCache",
    "ReflectionPipeline",
]
