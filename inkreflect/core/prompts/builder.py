"""
Prompt construction for chunk summaries and the final aggregation.

The pipeline treats prompt text as opaque: it asks a PromptBuilder for
PromptComponents and passes them verbatim to the text generation service.
"""

from abc import ABC, abstractmethod

from pydantic import BaseModel, ConfigDict

from inkreflect.models.journal import Mood, TimeFrame
from inkreflect.models.reflection import ChunkSummaryResponse, ReflectionResponse


class PromptComponents(BaseModel):
    """What one generation call needs from the prompt layer."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    content: str
    system_prompt: str
    response_format: type[BaseModel]


class ChunkPromptContext(BaseModel):
    """Inputs for a chunk summary prompt."""

    entries_text: str
    mood: Mood
    progress_label: str


class AggregationPromptContext(BaseModel):
    """Inputs for the aggregation prompt."""

    summaries_text: str
    chunk_count: int
    entry_count: int
    mood: Mood
    timeframe: TimeFrame


class PromptBuilder(ABC):
    """Builds prompts for the two call kinds of the reflection pipeline."""

    @abstractmethod
    def build_chunk_prompt(self, context: ChunkPromptContext) -> PromptComponents:
        """Prompt asking for a ChunkSummaryResponse."""

    @abstractmethod
    def build_aggregation_prompt(self, context: AggregationPromptContext) -> PromptComponents:
        """Prompt asking for a ReflectionResponse."""


SYSTEM_PROMPT = """You are a thoughtful, empathetic companion helping someone reflect on their journal.
Speak directly to the writer using "you". Be warm and honest, notice patterns and growth,
acknowledge difficulties gently, and never invent events that are not in the entries."""


class DefaultPromptBuilder(PromptBuilder):
    """Plain-text prompts with JSON output instructions."""

    def build_chunk_prompt(self, context: ChunkPromptContext) -> PromptComponents:
        content = f"""Summarize this group of journal entries tagged with the mood "{context.mood.value}".
This is {context.progress_label.lower()} of the period being reflected on.

Entries (oldest first, separated by ---):
{context.entries_text}

Respond with JSON:
{{
  "summary": "2-3 sentences on what happened and how it felt",
  "themes": ["2-4 short recurring themes"],
  "emotional_tone": "one word describing the overall tone"
}}"""

        return PromptComponents(
            content=content,
            system_prompt=SYSTEM_PROMPT,
            response_format=ChunkSummaryResponse,
        )

    def build_aggregation_prompt(self, context: AggregationPromptContext) -> PromptComponents:
        content = f"""Write a reflection on {context.entry_count} journal entries tagged "{context.mood.value}"
from {context.timeframe.value.lower()}. They were summarized in {context.chunk_count} periods, in order:

{context.summaries_text}

Respond with JSON:
{{
  "summary": "A warm 2-3 paragraph reflection",
  "key_insight": "The single most meaningful pattern you notice",
  "themes": ["3-5 themes across all periods"],
  "emotional_progression": "How the feelings changed from the first period to the last"
}}"""

        return PromptComponents(
            content=content,
            system_prompt=SYSTEM_PROMPT,
            response_format=ReflectionResponse,
        )
