"""Utility modules for InkReflect."""

from inkreflect.utils.exceptions import (
    AggregationFailedError,
    ChunkProcessingFailedError,
    ConfigurationError,
    InkReflectError,
    InsufficientEntriesError,
    InvalidResponseError,
    LLMError,
    ProcessingFailedError,
    ReflectionCancelledError,
    ReflectionError,
    StoreError,
    TokenLimitExceededError,
    ValidationError,
)
from inkreflect.utils.id_generator import (
    generate_chunk_id,
    generate_entry_id,
    generate_reflection_id,
)
from inkreflect.utils.logger import get_logger, setup_logging

__all__ = [
    # Logging
    "get_logger",
    "setup_logging",
    # ID Generators
    "generate_entry_id",
    "generate_chunk_id",
    "generate_reflection_id",
    # Exceptions
    "InkReflectError",
    "ConfigurationError",
    "ValidationError",
    "LLMError",
    "StoreError",
    "ReflectionError",
    "InsufficientEntriesError",
    "TokenLimitExceededError",
    "ChunkProcessingFailedError",
    "AggregationFailedError",
    "InvalidResponseError",
    "ProcessingFailedError",
    "ReflectionCancelledError",
]
