"""
Tests for the default prompt builder.
"""

import pytest

from inkreflect.core.prompts import (
    AggregationPromptContext,
    ChunkPromptContext,
    DefaultPromptBuilder,
)
from inkreflect.models import ChunkSummaryResponse, Mood, ReflectionResponse, TimeFrame


@pytest.mark.unit
class TestDefaultPromptBuilder:
    """Test prompt contents and response formats."""

    def test_chunk_prompt(self):
        components = DefaultPromptBuilder().build_chunk_prompt(
            ChunkPromptContext(
                entries_text="Day 1: walked\n---\nDay 2: rested",
                mood=Mood.PEACEFUL,
                progress_label="Chunk 2 of 3",
            )
        )

        assert components.response_format is ChunkSummaryResponse
        assert "Day 1: walked\n---\nDay 2: rested" in components.content
        assert "chunk 2 of 3" in components.content
        assert '"Peaceful"' in components.content
        assert "emotional_tone" in components.content
        assert components.system_prompt

    def test_aggregation_prompt(self):
        components = DefaultPromptBuilder().build_aggregation_prompt(
            AggregationPromptContext(
                summaries_text="Period 1: a\n\nPeriod 2: b",
                chunk_count=2,
                entry_count=14,
                mood=Mood.ANXIOUS,
                timeframe=TimeFrame.THIS_MONTH,
            )
        )

        assert components.response_format is ReflectionResponse
        assert "Period 1: a\n\nPeriod 2: b" in components.content
        assert "14 journal entries" in components.content
        assert "this month" in components.content
        assert "key_insight" in components.content
