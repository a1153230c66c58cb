"""
Chunk construction for the reflection pipeline.

Partitions a chronological entry list into chunks bounded by the depth
policy's entry count and token budget.
"""

from inkreflect.core.tokenizer import Tokenizer
from inkreflect.models.journal import JournalEntry, ReflectionDepth
from inkreflect.models.reflection import ReflectionChunk
from inkreflect.utils.logger import get_logger

logger = get_logger(__name__)


class ChunkBuilder:
    """
    Greedy chronological chunker.

    Entries are appended to the current chunk until the next one would push
    the running token estimate over budget or the chunk is full. A chunk
    always gets at least one entry, so an entry that is over budget on its
    own becomes a single-entry chunk.
    """

    def __init__(self, tokenizer: Tokenizer | None = None):
        self.tokenizer = tokenizer or Tokenizer()

    def build(self, entries: list[JournalEntry], depth: ReflectionDepth) -> list[ReflectionChunk]:
        """
        Build chunks covering every entry exactly once.

        Args:
            entries: Entries to partition (sorted by creation time here if not already)
            depth: Depth policy supplying entries-per-chunk and tokens-per-chunk

        Returns:
            Chunks in chronological order with index and total back-filled
        """
        if not entries:
            return []

        max_entries = depth.entries_per_chunk
        max_tokens = depth.tokens_per_chunk
        ordered = sorted(entries, key=lambda entry: entry.created_at)

        groups: list[tuple[list[JournalEntry], int]] = []
        current: list[JournalEntry] = []
        current_tokens = 0

        for entry in ordered:
            entry_tokens = self.tokenizer.entry_tokens(entry)

            if current and (
                current_tokens + entry_tokens > max_tokens or len(current) >= max_entries
            ):
                groups.append((current, current_tokens))
                current = []
                current_tokens = 0

            current.append(entry)
            current_tokens += entry_tokens

        if current:
            groups.append((current, current_tokens))

        total = len(groups)
        chunks = [
            ReflectionChunk(
                entries=group,
                token_count=tokens,
                chunk_index=index,
                total_chunks=total,
            )
            for index, (group, tokens) in enumerate(groups)
        ]

        oversized = sum(1 for chunk in chunks if chunk.token_count > max_tokens)
        if oversized:
            logger.debug(f"{oversized} single-entry chunk(s) exceed the {max_tokens} token budget")

        return chunks
