"""
Sequential chunk summarization with partial-failure tolerance.
"""

import asyncio
import time
from collections.abc import Callable

from inkreflect.config import ReflectionConfig
from inkreflect.core.llm.base import TextGenerationService
from inkreflect.core.llm.decoding import decode_response
from inkreflect.core.prompts import ChunkPromptContext, PromptBuilder
from inkreflect.core.tokenizer import Tokenizer
from inkreflect.models.journal import Mood
from inkreflect.models.reflection import (
    ChunkProcessingResult,
    ChunkSummaryResponse,
    ReflectionChunk,
)
from inkreflect.utils.exceptions import (
    ChunkProcessingFailedError,
    ProcessingFailedError,
    ReflectionCancelledError,
    TokenLimitExceededError,
)
from inkreflect.utils.logger import get_logger

logger = get_logger(__name__)

ENTRY_SEPARATOR = "\n---\n"

ProgressCallback = Callable[[int, int], None]


class ChunkProcessor:
    """
    Summarizes chunks one at a time through the text generation service.

    Calls are strictly sequential so progress is monotonic and the provider
    sees one request at a time. When a batch has several chunks, a failing
    chunk is logged and dropped; a single-chunk batch cannot absorb a failure.
    """

    def __init__(
        self,
        text_service: TextGenerationService,
        prompt_builder: PromptBuilder,
        tokenizer: Tokenizer | None = None,
        config: ReflectionConfig | None = None,
        temperature: float = 0.7,
        max_tokens: int = 2048,
    ):
        self.text_service = text_service
        self.prompt_builder = prompt_builder
        self.tokenizer = tokenizer or Tokenizer()
        self.config = config or ReflectionConfig()
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def process_chunks(
        self,
        chunks: list[ReflectionChunk],
        mood: Mood,
        token_limit: int,
        on_progress: ProgressCallback | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> list[ChunkProcessingResult]:
        """
        Summarize every chunk, in order.

        Args:
            chunks: Chunks from the chunk builder
            mood: Mood the entries are tagged with
            token_limit: Depth policy's per-chunk token budget
            on_progress: Called with (completed, total) after each chunk attempt
            cancel_event: Checked before each submission

        Returns:
            One result per successfully processed chunk, in chunk order

        Raises:
            ReflectionCancelledError: If cancel_event is set at a chunk boundary
            ChunkProcessingFailedError: If no chunk could be processed
        """
        total = len(chunks)
        results: list[ChunkProcessingResult] = []
        failed = 0

        for index, chunk in enumerate(chunks):
            if cancel_event is not None and cancel_event.is_set():
                logger.info(f"Cancelled before chunk {index + 1}/{total}")
                raise ReflectionCancelledError(completed_chunks=index, total_chunks=total)

            start = time.perf_counter()
            try:
                response = await self.process_chunk(chunk, mood, token_limit)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                failed += 1
                logger.bind(chunk_id=chunk.id, error_type=type(e).__name__).error(
                    f"Failed to process chunk {index + 1}/{total}: {e}"
                )
                if total == 1:
                    raise ChunkProcessingFailedError(failed_chunks=1, total_chunks=1) from e
                continue
            finally:
                if on_progress is not None:
                    on_progress(index + 1, total)

            elapsed = time.perf_counter() - start
            results.append(
                ChunkProcessingResult(
                    chunk=chunk,
                    summary=response.summary,
                    themes=response.themes,
                    processing_time=elapsed,
                    tokens_used=chunk.token_count,
                )
            )
            logger.debug(f"Processed chunk {index + 1}/{total} in {elapsed:.2f}s")

        if not results:
            raise ChunkProcessingFailedError(failed_chunks=failed, total_chunks=total)

        if failed:
            logger.warning(f"Continuing with {len(results)}/{total} chunks after {failed} failure(s)")

        return results

    async def process_chunk(
        self, chunk: ReflectionChunk, mood: Mood, token_limit: int
    ) -> ChunkSummaryResponse:
        """
        Summarize one chunk.

        Raises:
            TokenLimitExceededError: If a truncated entry is still over token_limit
            ProcessingFailedError: If the chunk has no text to analyze
            InvalidResponseError: If the output does not decode to ChunkSummaryResponse
            LLMError: If the generation call fails
        """
        entries_text = self.render_entries(chunk, token_limit)

        if not entries_text.strip():
            raise ProcessingFailedError("No entry content to analyze")

        components = self.prompt_builder.build_chunk_prompt(
            ChunkPromptContext(
                entries_text=entries_text,
                mood=mood,
                progress_label=chunk.progress_label,
            )
        )

        logger.debug(
            f"Submitting {chunk.progress_label.lower()}: "
            f"{len(chunk.entries)} entries, ~{len(entries_text)} chars"
        )

        content = await self.text_service.generate(
            prompt=components.content,
            system_prompt=components.system_prompt,
            operation=self.config.operation,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            response_format=components.response_format,
        )

        return decode_response(content, ChunkSummaryResponse)

    def render_entries(self, chunk: ReflectionChunk, token_limit: int) -> str:
        """Join the chunk's entries, each truncated to the per-entry cap."""
        texts = []
        for entry in chunk.entries:
            text = self.tokenizer.truncate_entry(entry, self.config.max_tokens_per_entry)
            used = self.tokenizer.count_tokens(text)
            if used > token_limit:
                raise TokenLimitExceededError(used=used, limit=token_limit)
            texts.append(text)
        return ENTRY_SEPARATOR.join(texts)
