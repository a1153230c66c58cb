"""
Exception hierarchy for InkReflect.

All errors inherit from InkReflectError so callers can catch everything the
service raises in one place. Reflection pipeline failures additionally carry
a user-facing description and a suggested fallback action.
"""

DEFAULT_FALLBACK = "Try again or use Quick mode"


class InkReflectError(Exception):
    """
    Base exception for all InkReflect errors.

    Args:
        message: Error message
        context: Optional dictionary with structured error details
    """

    def __init__(self, message: str, context: dict | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}


# ═══════════════════════════════════════════════════════════
# INFRASTRUCTURE ERRORS
# ═══════════════════════════════════════════════════════════


class ConfigurationError(InkReflectError):
    """Configuration is invalid or missing required values."""


class ValidationError(InkReflectError):
    """Input validation failed."""


class LLMError(InkReflectError):
    """
    Text generation errors.
    Raised when a provider call fails (API errors, timeouts, empty output).
    """


class StoreError(InkReflectError):
    """
    Storage errors.
    Raised when the journal store or the durable key-value store fails.
    """


# ═══════════════════════════════════════════════════════════
# REFLECTION PIPELINE ERRORS
# ═══════════════════════════════════════════════════════════


class ReflectionError(InkReflectError):
    """
    Base class for reflection pipeline failures.

    Every subclass exposes ``description`` (what went wrong, suitable for an
    end user) and ``fallback_strategy`` (what the caller can offer instead).
    """

    fallback_strategy: str = DEFAULT_FALLBACK

    @property
    def description(self) -> str:
        return self.message

    @property
    def user_message(self) -> str:
        """Description followed by the suggested fallback."""
        return f"{self.description}. {self.fallback_strategy}"

    def to_dict(self) -> dict:
        return {
            "error": type(self).__name__,
            "description": self.description,
            "fallback": self.fallback_strategy,
            "context": self.context,
        }


class InsufficientEntriesError(ReflectionError):
    """Fewer entries than the pipeline needs were supplied."""

    def __init__(self, minimum: int, actual: int):
        super().__init__(
            f"Need at least {minimum} entries, found {actual}",
            context={"minimum": minimum, "actual": actual},
        )
        self.minimum = minimum
        self.actual = actual


class TokenLimitExceededError(ReflectionError):
    """Content is still over the token budget after truncation."""

    fallback_strategy = "Try using fewer entries or Quick mode"

    def __init__(self, used: int, limit: int):
        super().__init__(
            f"Token limit exceeded: {used}/{limit}",
            context={"used": used, "limit": limit},
        )
        self.used = used
        self.limit = limit


class ChunkProcessingFailedError(ReflectionError):
    """No chunk of the batch could be summarized."""

    fallback_strategy = "Showing partial results from successful chunks"

    def __init__(self, failed_chunks: int, total_chunks: int):
        super().__init__(
            f"Failed to process {failed_chunks} of {total_chunks} chunks",
            context={"failed_chunks": failed_chunks, "total_chunks": total_chunks},
        )
        self.failed_chunks = failed_chunks
        self.total_chunks = total_chunks


class AggregationFailedError(ReflectionError):
    """The aggregation call produced no usable reflection."""

    def __init__(self, reason: str | None = None):
        context = {"reason": reason} if reason else {}
        super().__init__("Failed to generate final reflection", context=context)
        self.reason = reason


class InvalidResponseError(ReflectionError):
    """A generation call returned content that does not match the expected shape."""

    def __init__(self, expected: str | None = None, detail: str | None = None):
        context = {}
        if expected:
            context["expected"] = expected
        if detail:
            context["detail"] = detail
        super().__init__("Invalid response from AI service", context=context)
        self.expected = expected
        self.detail = detail


class ProcessingFailedError(ReflectionError):
    """Catch-all for unexpected failures inside a run."""

    def __init__(self, reason: str):
        super().__init__(f"Processing failed: {reason}", context={"reason": reason})
        self.reason = reason


class ReflectionCancelledError(ReflectionError):
    """The run was cancelled before aggregation started."""

    def __init__(self, completed_chunks: int = 0, total_chunks: int = 0):
        super().__init__(
            "Reflection generation was cancelled",
            context={"completed_chunks": completed_chunks, "total_chunks": total_chunks},
        )
        self.completed_chunks = completed_chunks
        self.total_chunks = total_chunks
