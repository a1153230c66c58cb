"""
Token estimation and entry truncation.

The character-ratio estimate is isolated in ``estimate_tokens`` so the
pipeline can switch to exact tiktoken counts through configuration without
touching chunking or processing logic.
"""

import math

import tiktoken

from inkreflect.config import TokenizerConfig
from inkreflect.models.journal import JournalEntry

TRIM_MARKER = "... [content trimmed] ..."
TRUNCATION_CHARS_PER_TOKEN = 3
HEAD_RATIO = 0.7
TAIL_RESERVE = 20


def estimate_tokens(text: str, chars_per_token: float = 3.6) -> int:
    """
    Approximate token count from character length.

    Args:
        text: Text to estimate
        chars_per_token: Average characters per token

    Returns:
        ceil(len(text) / chars_per_token), 0 for empty text
    """
    if not text:
        return 0
    return math.ceil(len(text) / chars_per_token)


def render_entry(entry: JournalEntry) -> str:
    """Render an entry as the text sent to the generation service."""
    if not entry.title:
        return entry.content
    return f"{entry.title}: {entry.content}"


class Tokenizer:
    """
    Token counter used by the chunk builder and chunk processor.

    Usage:
        tokenizer = Tokenizer()
        cost = tokenizer.entry_tokens(entry)
        text = tokenizer.truncate_entry(entry, max_tokens=400)
    """

    def __init__(self, config: TokenizerConfig | None = None):
        """
        Initialize tokenizer with configuration.

        Args:
            config: Optional tokenizer configuration. Uses defaults if not provided.
        """
        self.config = config or TokenizerConfig()
        self._encoder: tiktoken.Encoding | None = None

    @property
    def encoder(self) -> tiktoken.Encoding:
        """Lazy-load tiktoken encoder."""
        if self._encoder is None:
            self._encoder = tiktoken.get_encoding(self.config.model)
        return self._encoder

    def count_tokens(self, text: str) -> int:
        """
        Count tokens with the configured provider.

        ``approximate`` uses the character ratio, ``tiktoken`` encodes the text.
        """
        if not text:
            return 0

        if self.config.provider == "tiktoken":
            return len(self.encoder.encode(text))

        return estimate_tokens(text, self.config.chars_per_token)

    def entry_tokens(self, entry: JournalEntry) -> int:
        """Estimated cost of an entry (title plus body)."""
        return self.count_tokens(entry.title + entry.content)

    def truncate_entry(self, entry: JournalEntry, max_tokens: int) -> str:
        """
        Render an entry, trimming its middle when it is over ``max_tokens``.

        Keeps the first 70% of the character allowance and the end of the
        text, joined by a trim marker. The entry itself is left untouched.

        Args:
            entry: Entry to render
            max_tokens: Per-entry token cap

        Returns:
            Entry text, possibly trimmed
        """
        full_text = render_entry(entry)

        if self.count_tokens(full_text) <= max_tokens:
            return full_text

        max_chars = max_tokens * TRUNCATION_CHARS_PER_TOKEN
        if len(full_text) <= max_chars:
            return full_text

        head_chars = int(max_chars * HEAD_RATIO)
        tail_chars = max(0, max_chars - head_chars - TAIL_RESERVE)

        head = full_text[:head_chars]
        tail = full_text[len(full_text) - tail_chars :] if tail_chars else ""
        return f"{head}{TRIM_MARKER}{tail}"
