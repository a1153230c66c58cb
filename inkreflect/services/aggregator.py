"""
Aggregation of chunk summaries into the final MoodReflection.
"""

import asyncio
import time
from datetime import datetime

from inkreflect.config import ReflectionConfig
from inkreflect.core.llm.base import TextGenerationService
from inkreflect.core.llm.decoding import decode_response
from inkreflect.core.prompts import AggregationPromptContext, PromptBuilder
from inkreflect.models.journal import Mood, TimeFrame
from inkreflect.models.reflection import (
    ChunkProcessingResult,
    MoodReflection,
    ProcessingMetadata,
    ReflectionResponse,
)
from inkreflect.utils.exceptions import AggregationFailedError, InvalidResponseError
from inkreflect.utils.logger import get_logger

logger = get_logger(__name__)


def format_period_summaries(results: list[ChunkProcessingResult]) -> str:
    """Label each chunk summary with its temporal position."""
    return "\n\n".join(
        f"Period {position}: {result.summary}" for position, result in enumerate(results, 1)
    )


def build_metadata(
    results: list[ChunkProcessingResult], strategy: str = "Chunked Processing"
) -> ProcessingMetadata:
    """Token accounting across processed chunks."""
    total_tokens = sum(result.tokens_used for result in results)
    average = total_tokens // len(results) if results else 0
    return ProcessingMetadata(
        total_tokens_used=total_tokens,
        chunks_processed=len(results),
        average_tokens_per_chunk=average,
        processing_strategy=strategy,
    )


class ReflectionAggregator:
    """
    Turns per-chunk summaries into one reflection with a single
    generation call. Failures here are fatal for the run.
    """

    def __init__(
        self,
        text_service: TextGenerationService,
        prompt_builder: PromptBuilder,
        config: ReflectionConfig | None = None,
        temperature: float = 0.7,
        max_tokens: int = 2048,
    ):
        self.text_service = text_service
        self.prompt_builder = prompt_builder
        self.config = config or ReflectionConfig()
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def aggregate(
        self,
        results: list[ChunkProcessingResult],
        mood: Mood,
        timeframe: TimeFrame,
        entry_count: int,
        started_at: float,
        clock_now: datetime | None = None,
    ) -> MoodReflection:
        """
        Build the final reflection.

        Args:
            results: Successful chunk results in chunk order
            mood: Mood being reflected on
            timeframe: Timeframe being reflected on
            entry_count: Entries the caller supplied (before sampling)
            started_at: ``time.perf_counter()`` value at run start
            clock_now: Generation timestamp (default: now)

        Returns:
            Immutable MoodReflection

        Raises:
            AggregationFailedError: If the call fails or its output is unusable
        """
        components = self.prompt_builder.build_aggregation_prompt(
            AggregationPromptContext(
                summaries_text=format_period_summaries(results),
                chunk_count=len(results),
                entry_count=entry_count,
                mood=mood,
                timeframe=timeframe,
            )
        )

        logger.debug(f"Aggregating {len(results)} chunk summaries")

        try:
            content = await self.text_service.generate(
                prompt=components.content,
                system_prompt=components.system_prompt,
                operation=self.config.operation,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                response_format=components.response_format,
            )
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Aggregation call failed: {e}")
            raise AggregationFailedError(reason=str(e)) from e

        if content is None or not content.strip():
            logger.error("Empty response from text generation service during aggregation")
            raise AggregationFailedError(reason="empty response")

        try:
            response = decode_response(content, ReflectionResponse)
        except InvalidResponseError as e:
            logger.error(f"Aggregation response did not decode: {e.context.get('detail')}")
            raise AggregationFailedError(reason="malformed response") from e

        return MoodReflection(
            mood=mood,
            timeframe=timeframe,
            summary=response.summary,
            key_insight=response.key_insight,
            themes=response.themes,
            emotional_progression=response.emotional_progression,
            entry_count=entry_count,
            processing_time=max(0.0, time.perf_counter() - started_at),
            generated_at=clock_now or datetime.now(),
            metadata=build_metadata(results, self.config.strategy_label),
        )
