"""
In-process journal store.
"""

from inkreflect.core.journal_store.base import JournalStore
from inkreflect.models.journal import EntryFilter, JournalEntry


class InMemoryJournalStore(JournalStore):
    """Journal store backed by a dict; used by the HTTP app and in tests."""

    def __init__(self, entries: list[JournalEntry] | None = None):
        self._entries: dict[str, JournalEntry] = {}
        for entry in entries or []:
            self.add_entry(entry)

    def add_entry(self, entry: JournalEntry) -> None:
        self._entries[entry.id] = entry

    def remove_entry(self, entry_id: str) -> bool:
        return self._entries.pop(entry_id, None) is not None

    def __len__(self) -> int:
        return len(self._entries)

    async def fetch_entries(self, entry_filter: EntryFilter) -> list[JournalEntry]:
        matches = [entry for entry in self._entries.values() if entry_filter.matches(entry)]
        return sorted(matches, key=lambda entry: entry.created_at)
