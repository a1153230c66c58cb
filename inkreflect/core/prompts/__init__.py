"""Prompt construction for the reflection pipeline."""

from inkreflect.core.prompts.builder import (
    AggregationPromptContext,
    ChunkPromptContext,
    DefaultPromptBuilder,
    PromptBuilder,
    PromptComponents,
)

__all__ = [
    "PromptBuilder",
    "DefaultPromptBuilder",
    "PromptComponents",
    "ChunkPromptContext",
    "AggregationPromptContext",
]
