"""
Reflection pipeline orchestrator.

Flow per request:
1. Guard against empty input
2. Check the reflection cache
3. On a miss: sample -> chunk -> summarize chunks -> aggregate
4. Cache the finished reflection in both tiers
"""

import asyncio
import time
from collections.abc import Callable
from datetime import datetime
from functools import partial

from inkreflect.config import Config
from inkreflect.core.journal_store.base import JournalStore
from inkreflect.core.llm.base import TextGenerationService
from inkreflect.core.prompts import DefaultPromptBuilder, PromptBuilder
from inkreflect.core.tokenizer import Tokenizer
from inkreflect.models.cache import make_cache_key
from inkreflect.models.journal import EntryFilter, JournalEntry, Mood, ReflectionDepth, TimeFrame
from inkreflect.models.reflection import MoodReflection, PipelineState, PipelineStatus
from inkreflect.services.aggregator import ReflectionAggregator
from inkreflect.services.chunk_builder import ChunkBuilder
from inkreflect.services.chunk_processor import ChunkProcessor
from inkreflect.services.entry_sampler import EntrySampler
from inkreflect.services.reflection_cache import ReflectionCache
from inkreflect.utils.exceptions import (
    InsufficientEntriesError,
    ProcessingFailedError,
    ReflectionCancelledError,
    ReflectionError,
)
from inkreflect.utils.logger import get_logger

logger = get_logger(__name__)

# Progress checkpoints reported through PipelineStatus
PROGRESS_PREPARED = 0.1
PROGRESS_CHUNKS_START = 0.2
PROGRESS_CHUNKS_SPAN = 0.5
PROGRESS_AGGREGATING = 0.8


class ReflectionPipeline:
    """
    Public entry point for mood reflections.

    All collaborators are injected. The pipeline runs one logical task per
    request with no internal parallelism; concurrent requests for the same
    cache key are serialized so only the first one generates.

    Usage:
        pipeline = ReflectionPipeline(text_service, cache, journal_store)
        await pipeline.initialize()
        reflection = await pipeline.generate_reflection(Mood.HAPPY, entries, TimeFrame.THIS_WEEK)
    """

    def __init__(
        self,
        text_service: TextGenerationService,
        cache: ReflectionCache,
        journal_store: JournalStore | None = None,
        prompt_builder: PromptBuilder | None = None,
        config: Config | None = None,
        tokenizer: Tokenizer | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        """
        Initialize the pipeline.

        Args:
            text_service: Text generation service for chunk and aggregation calls
            cache: Two-tier reflection cache
            journal_store: Entry source for reflect_on_journal
            prompt_builder: Prompt construction (default: DefaultPromptBuilder)
            config: Configuration object (default: Config())
            tokenizer: Token estimator (default: built from config.tokenizer)
            clock: Returns the current time (default: datetime.now)
        """
        self.config = config or Config()
        self.text_service = text_service
        self.cache = cache
        self.journal_store = journal_store
        self.prompt_builder = prompt_builder or DefaultPromptBuilder()
        self.tokenizer = tokenizer or Tokenizer(self.config.tokenizer)
        self.clock = clock or datetime.now

        reflection_config = self.config.reflection
        llm_config = self.config.llm

        self.sampler = EntrySampler(
            threshold=reflection_config.sampling_threshold,
            target=reflection_config.sample_target,
        )
        self.chunk_builder = ChunkBuilder(self.tokenizer)
        self.chunk_processor = ChunkProcessor(
            text_service,
            self.prompt_builder,
            tokenizer=self.tokenizer,
            config=reflection_config,
            temperature=llm_config.temperature,
            max_tokens=llm_config.max_tokens,
        )
        self.aggregator = ReflectionAggregator(
            text_service,
            self.prompt_builder,
            config=reflection_config,
            temperature=llm_config.temperature,
            max_tokens=llm_config.max_tokens,
        )

        self._statuses: dict[str, PipelineStatus] = {}
        self._latest_key: str | None = None
        self._cancel_events: dict[str, asyncio.Event] = {}
        self._key_locks: dict[str, asyncio.Lock] = {}

    async def initialize(self) -> None:
        """Initialize the cache (purges expired persistent entries)."""
        removed = await self.cache.initialize()
        if removed:
            logger.info(f"Purged {removed} expired reflections at startup")

    # ═══════════════════════════════════════════════════════════
    # STATE
    # ═══════════════════════════════════════════════════════════

    @property
    def status(self) -> PipelineStatus:
        """Snapshot of the most recently started run."""
        if self._latest_key is None:
            return PipelineStatus()
        return self._statuses[self._latest_key].model_copy()

    def status_for(self, mood: Mood, timeframe: TimeFrame) -> PipelineStatus:
        """Snapshot of the latest run for (mood, timeframe)."""
        status = self._statuses.get(make_cache_key(mood, timeframe))
        return status.model_copy() if status is not None else PipelineStatus()

    def cancel(self, mood: Mood | None = None, timeframe: TimeFrame | None = None) -> None:
        """
        Request cancellation of running generations.

        With mood and timeframe only the run for that cache key is cancelled,
        otherwise every active run is. Checked at each chunk boundary;
        aggregation is never started after cancellation has been requested.

        Raises:
            ValueError: If only one of mood and timeframe is given
        """
        if mood is None and timeframe is None:
            events = list(self._cancel_events.values())
        elif mood is None or timeframe is None:
            raise ValueError("mood and timeframe must be given together")
        else:
            event = self._cancel_events.get(make_cache_key(mood, timeframe))
            events = [event] if event is not None else []

        for event in events:
            event.set()

    def _start_status(self, key: str, status: PipelineStatus) -> None:
        self._statuses[key] = status
        self._latest_key = key

    def _set_state(
        self, key: str, state: PipelineState, progress: float | None = None, message: str = ""
    ) -> None:
        update = {"state": state, "message": message}
        if progress is not None:
            update["progress"] = progress
        self._statuses[key] = self._statuses[key].model_copy(update=update)

    def _on_chunk_progress(self, key: str, completed: int, total: int) -> None:
        progress = PROGRESS_CHUNKS_START + PROGRESS_CHUNKS_SPAN * completed / total
        message = f"Processing chunk {min(completed + 1, total)} of {total}..."
        self._set_state(key, PipelineState.PROCESSING_CHUNKS, progress, message)

    def _lock_for(self, key: str) -> asyncio.Lock:
        lock = self._key_locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._key_locks[key] = lock
        return lock

    # ═══════════════════════════════════════════════════════════
    # PUBLIC OPERATIONS
    # ═══════════════════════════════════════════════════════════

    async def generate_reflection(
        self,
        mood: Mood,
        entries: list[JournalEntry],
        timeframe: TimeFrame,
        depth: ReflectionDepth = ReflectionDepth.STANDARD,
    ) -> MoodReflection:
        """
        Return the reflection for (mood, timeframe), generating it on a cache miss.

        Args:
            mood: Mood the entries are tagged with
            entries: Entries already filtered to the mood and timeframe
            timeframe: Timeframe being reflected on
            depth: Depth policy for chunking

        Returns:
            Cached or freshly generated MoodReflection

        Raises:
            InsufficientEntriesError: If fewer than the minimum entries are supplied
            ChunkProcessingFailedError: If every chunk failed
            AggregationFailedError: If the final reflection could not be generated
            ReflectionCancelledError: If cancel() was called mid-run
            ProcessingFailedError: For any other failure
        """
        key = make_cache_key(mood, timeframe)

        minimum = self.config.reflection.min_entries
        if len(entries) < minimum:
            error = InsufficientEntriesError(minimum=minimum, actual=len(entries))
            self._start_status(key, PipelineStatus(cache_key=key))
            self._fail(key, error)
            raise error

        async with self._lock_for(key):
            cancel_event = asyncio.Event()
            self._cancel_events[key] = cancel_event
            self._start_status(
                key,
                PipelineStatus(
                    state=PipelineState.CHECKING_CACHE, message="Checking cache...", cache_key=key
                ),
            )

            try:
                cached = await self.cache.get(key)
                if cached is not None:
                    self._set_state(key, PipelineState.CACHE_HIT, 1.0, "Using cached reflection")
                    self._finish(key, cached)
                    return cached

                self._set_state(key, PipelineState.CACHE_MISS, 0.0, "Generating reflection...")
                reflection = await self._run(key, mood, entries, timeframe, depth, cancel_event)

                self._set_state(
                    key, PipelineState.CACHING, PROGRESS_AGGREGATING, "Saving reflection..."
                )
                await self.cache.put(key, reflection)
            except asyncio.CancelledError:
                self._set_state(key, PipelineState.CANCELLED, 0.0, "Cancelled")
                raise
            except ReflectionCancelledError as e:
                self._fail(key, e, state=PipelineState.CANCELLED)
                raise
            except ReflectionError as e:
                self._fail(key, e)
                raise
            except Exception as e:
                logger.exception(f"Unexpected failure generating reflection for {key}")
                error = ProcessingFailedError(str(e) or type(e).__name__)
                self._fail(key, error)
                raise error from e
            finally:
                del self._cancel_events[key]

            self._finish(key, reflection)
            logger.info(
                f"Generated and cached reflection for {key} in {reflection.formatted_processing_time}"
            )
            return reflection

    async def regenerate_reflection(
        self,
        mood: Mood,
        entries: list[JournalEntry],
        timeframe: TimeFrame,
        depth: ReflectionDepth = ReflectionDepth.STANDARD,
    ) -> MoodReflection:
        """Invalidate the cached reflection for (mood, timeframe), then generate afresh."""
        key = make_cache_key(mood, timeframe)
        async with self._lock_for(key):
            await self.cache.invalidate(key)
        logger.info(f"Regenerating reflection for {key}")
        return await self.generate_reflection(mood, entries, timeframe, depth)

    async def reflect_on_journal(
        self,
        mood: Mood,
        timeframe: TimeFrame,
        depth: ReflectionDepth = ReflectionDepth.STANDARD,
        regenerate: bool = False,
    ) -> MoodReflection:
        """
        Fetch entries for (mood, timeframe) from the journal store and reflect on them.

        Raises:
            ProcessingFailedError: If no journal store was configured or it failed
        """
        if self.journal_store is None:
            raise ProcessingFailedError("No journal store configured")

        entry_filter = EntryFilter.for_timeframe(mood, timeframe, now=self.clock())
        try:
            entries = await self.journal_store.fetch_entries(entry_filter)
        except Exception as e:
            logger.exception(f"Failed to fetch journal entries for {mood.value}")
            raise ProcessingFailedError(f"Could not load journal entries: {e}") from e

        if regenerate:
            return await self.regenerate_reflection(mood, entries, timeframe, depth)
        return await self.generate_reflection(mood, entries, timeframe, depth)

    async def clear_cache(self) -> None:
        """Wipe both cache tiers."""
        await self.cache.clear()
        logger.debug("Reflection cache cleared")

    async def close(self) -> None:
        """Close the text service and the cache store."""
        await self.text_service.close()
        await self.cache.store.close()
        if self.journal_store is not None:
            await self.journal_store.close()

    # ═══════════════════════════════════════════════════════════
    # PIPELINE STAGES
    # ═══════════════════════════════════════════════════════════

    async def _run(
        self,
        key: str,
        mood: Mood,
        entries: list[JournalEntry],
        timeframe: TimeFrame,
        depth: ReflectionDepth,
        cancel_event: asyncio.Event,
    ) -> MoodReflection:
        started_at = time.perf_counter()

        self._set_state(key, PipelineState.SAMPLING, 0.0, "Preparing entries...")
        processable = self.sampler.sample(entries)
        if len(processable) < len(entries):
            logger.info(f"Sampled {len(processable)} of {len(entries)} entries")

        self._set_state(key, PipelineState.CHUNKING, PROGRESS_PREPARED, "Preparing entries...")
        chunks = self.chunk_builder.build(processable, depth)
        logger.info(f"Created {len(chunks)} chunks for {len(processable)} entries")

        planned_calls = len(chunks) + 1
        if planned_calls > depth.max_api_calls:
            logger.warning(
                f"{depth.value} depth plans {planned_calls} calls, above its budget of "
                f"{depth.max_api_calls}"
            )

        self._set_state(
            key,
            PipelineState.PROCESSING_CHUNKS,
            PROGRESS_CHUNKS_START,
            "Analyzing journal entries...",
        )
        results = await self.chunk_processor.process_chunks(
            chunks,
            mood,
            token_limit=depth.tokens_per_chunk,
            on_progress=partial(self._on_chunk_progress, key),
            cancel_event=cancel_event,
        )

        if cancel_event.is_set():
            raise ReflectionCancelledError(completed_chunks=len(chunks), total_chunks=len(chunks))

        self._set_state(
            key, PipelineState.AGGREGATING, PROGRESS_AGGREGATING, "Generating reflection..."
        )
        return await self.aggregator.aggregate(
            results,
            mood=mood,
            timeframe=timeframe,
            entry_count=len(entries),
            started_at=started_at,
            clock_now=self.clock(),
        )

    def _finish(self, key: str, reflection: MoodReflection) -> None:
        self._statuses[key] = self._statuses[key].model_copy(
            update={
                "state": PipelineState.DONE,
                "progress": 1.0,
                "message": "",
                "error": None,
                "reflection": reflection,
            }
        )

    def _fail(
        self, key: str, error: ReflectionError, state: PipelineState = PipelineState.FAILED
    ) -> None:
        logger.error(f"Reflection for {key} failed: {error.user_message}")
        self._statuses[key] = self._statuses[key].model_copy(
            update={
                "state": state,
                "progress": 0.0,
                "message": error.description,
                "error": error.to_dict(),
                "reflection": None,
            }
        )
