"""
InkReflect FastAPI Application

A REST API server for the InkReflect reflection pipeline.
Provides endpoints for adding journal entries and generating, regenerating
and clearing mood reflections.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timedelta

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from inkreflect import __version__
from inkreflect.config import Config
from inkreflect.core.factory import KeyValueStoreFactory, LLMFactory
from inkreflect.core.journal_store import InMemoryJournalStore
from inkreflect.models import JournalEntry, Mood, MoodReflection, PipelineStatus, ReflectionDepth, TimeFrame
from inkreflect.services import ReflectionCache, ReflectionPipeline
from inkreflect.utils.exceptions import InsufficientEntriesError, ReflectionError
from inkreflect.utils.logger import get_logger, setup_logging

# Global pipeline instance
pipeline: ReflectionPipeline | None = None
journal_store: InMemoryJournalStore | None = None
logger = get_logger(__name__)


# Pydantic models for API
class AddEntryRequest(BaseModel):
    """Request model for adding a journal entry."""

    title: str = Field(default="", description="Entry title")
    content: str = Field(..., description="Entry body text")
    mood: Mood = Field(default=Mood.NEUTRAL, description="Mood tag")
    created_at: datetime | None = Field(default=None, description="Defaults to now")


class AddEntryResponse(BaseModel):
    """Response model for add entry."""

    entry_id: str
    created_at: str
    mood: Mood
    total_entries: int


class ReflectionRequest(BaseModel):
    """Request model for generating a reflection."""

    mood: Mood
    timeframe: TimeFrame = TimeFrame.THIS_WEEK
    depth: ReflectionDepth = ReflectionDepth.STANDARD
    entries: list[JournalEntry] | None = Field(
        default=None, description="Entries to reflect on; the journal store is queried if omitted"
    )


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    pipeline_initialized: bool
    llm: str
    cache_backend: str
    journal_entries: int


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown."""
    global pipeline, journal_store

    config = Config.from_env()
    setup_logging(config.logging)

    logger.info("Starting InkReflect server")
    logger.info(
        f"Configuration: LLM={config.llm.provider}/{config.llm.model}, "
        f"Cache={config.cache.backend}, Tokenizer={config.tokenizer.provider}"
    )

    logger.info("Creating text generation service")
    text_service = LLMFactory.create(config.llm)

    logger.info("Creating cache store")
    store = KeyValueStoreFactory.create(config.cache)
    cache = ReflectionCache(
        store,
        storage_key=config.cache.storage_key,
        ttl=timedelta(hours=config.cache.ttl_hours),
    )

    journal_store = InMemoryJournalStore()

    pipeline = ReflectionPipeline(
        text_service=text_service,
        cache=cache,
        journal_store=journal_store,
        config=config,
    )
    app.state.config = config

    await pipeline.initialize()
    logger.info("Reflection pipeline initialized")

    yield

    logger.info("Shutting down InkReflect server")
    await pipeline.close()
    pipeline = None
    journal_store = None
    logger.info("Cleanup complete")


# Create FastAPI app
app = FastAPI(
    title="InkReflect API",
    description="Mood reflections over journal entries using chunked text generation",
    version=__version__,
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _reflection_http_error(error: ReflectionError) -> HTTPException:
    """Map a pipeline failure to an HTTP error carrying its suggested fallback."""
    status_code = 422 if isinstance(error, InsufficientEntriesError) else 502
    payload = error.to_dict()
    return HTTPException(
        status_code=status_code,
        detail={
            "error": payload["error"],
            "description": payload["description"],
            "fallback": payload["fallback"],
        },
    )


def _require_pipeline() -> ReflectionPipeline:
    if not pipeline:
        raise HTTPException(status_code=503, detail="Pipeline not initialized")
    return pipeline


# Health check endpoint
@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    config: Config | None = getattr(app.state, "config", None)
    return HealthResponse(
        status="healthy" if pipeline else "initializing",
        pipeline_initialized=pipeline is not None,
        llm=f"{config.llm.provider}/{config.llm.model}" if config else "unknown",
        cache_backend=config.cache.backend if config else "unknown",
        journal_entries=len(journal_store) if journal_store is not None else 0,
    )


# Journal endpoints
@app.post("/entries", response_model=AddEntryResponse)
async def add_entry(request: AddEntryRequest):
    """Add a journal entry to the in-process journal store."""
    _require_pipeline()

    fields = request.model_dump(exclude_none=True)
    entry = JournalEntry(**fields)
    journal_store.add_entry(entry)

    return AddEntryResponse(
        entry_id=entry.id,
        created_at=entry.created_at.isoformat(),
        mood=entry.mood,
        total_entries=len(journal_store),
    )


@app.delete("/entries/{entry_id}")
async def delete_entry(entry_id: str):
    """
    Remove a journal entry.

    Cached reflections are keyed by mood and timeframe, so they keep the
    removed entry until they expire or are regenerated.
    """
    _require_pipeline()

    if not journal_store.remove_entry(entry_id):
        raise HTTPException(status_code=404, detail="Entry not found")

    return {"deleted": True, "entry_id": entry_id, "total_entries": len(journal_store)}


# Reflection endpoints
@app.post("/reflections", response_model=MoodReflection)
async def create_reflection(request: ReflectionRequest):
    """
    Generate (or fetch from cache) the reflection for a mood and timeframe.

    When entries are supplied they are used as-is; otherwise entries tagged
    with the mood inside the timeframe are read from the journal store.
    """
    active = _require_pipeline()

    try:
        if request.entries is not None:
            return await active.generate_reflection(
                request.mood, request.entries, request.timeframe, request.depth
            )
        return await active.reflect_on_journal(request.mood, request.timeframe, request.depth)
    except ReflectionError as e:
        raise _reflection_http_error(e) from e


@app.post("/reflections/regenerate", response_model=MoodReflection)
async def regenerate_reflection(request: ReflectionRequest):
    """Drop the cached reflection for the mood and timeframe, then generate afresh."""
    active = _require_pipeline()

    try:
        if request.entries is not None:
            return await active.regenerate_reflection(
                request.mood, request.entries, request.timeframe, request.depth
            )
        return await active.reflect_on_journal(
            request.mood, request.timeframe, request.depth, regenerate=True
        )
    except ReflectionError as e:
        raise _reflection_http_error(e) from e


@app.delete("/reflections/cache")
async def clear_reflection_cache():
    """Wipe both reflection cache tiers."""
    active = _require_pipeline()
    await active.clear_cache()
    return {"cleared": True}


@app.get("/reflections/status", response_model=PipelineStatus)
async def reflection_status(mood: Mood | None = None, timeframe: TimeFrame | None = None):
    """
    State and progress of a reflection run.

    With mood and timeframe the latest run for that pair is reported,
    otherwise the most recently started run.
    """
    active = _require_pipeline()
    if mood is not None and timeframe is not None:
        return active.status_for(mood, timeframe)
    return active.status


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "InkReflect API",
        "version": __version__,
        "description": "Mood reflections over journal entries using chunked text generation",
        "docs": "/docs",
        "health": "/health",
    }
