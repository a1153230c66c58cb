"""
Base interface for journal entry sources.
"""

from abc import ABC, abstractmethod

from inkreflect.models.journal import EntryFilter, JournalEntry


class JournalStore(ABC):
    """
    Read access to journal entries.

    The reflection pipeline only reads; entry persistence belongs to the host
    application.
    """

    @abstractmethod
    async def fetch_entries(self, entry_filter: EntryFilter) -> list[JournalEntry]:
        """
        Fetch entries matching a filter.

        Args:
            entry_filter: Mood and date window to match

        Returns:
            Matching entries sorted by creation time, oldest first
        """

    async def close(self) -> None:
        """Release resources. Optional to override."""
