"""Journal entry sources consumed by the reflection pipeline."""

from inkreflect.core.journal_store.base import JournalStore
from inkreflect.core.journal_store.memory import InMemoryJournalStore

__all__ = ["JournalStore", "InMemoryJournalStore"]
