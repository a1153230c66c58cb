"""
Tests for the in-memory journal store and entry filters.
"""

from datetime import datetime, timedelta, timezone

import pytest

from inkreflect.core.journal_store import InMemoryJournalStore
from inkreflect.models import EntryFilter, Mood, TimeFrame


@pytest.mark.unit
@pytest.mark.asyncio
class TestInMemoryJournalStore:
    """Test entry storage and filtering."""

    async def test_fetch_sorted_oldest_first(self, entries_factory):
        entries = entries_factory(5)
        store = InMemoryJournalStore(list(reversed(entries)))

        fetched = await store.fetch_entries(EntryFilter())

        assert [entry.id for entry in fetched] == [entry.id for entry in entries]

    async def test_filter_by_mood(self, entry_factory):
        store = InMemoryJournalStore(
            [entry_factory(0), entry_factory(1, mood=Mood.ANGRY), entry_factory(2)]
        )

        fetched = await store.fetch_entries(EntryFilter(mood=Mood.ANGRY))

        assert [entry.id for entry in fetched] == ["entry_0001"]

    async def test_filter_by_window(self, entry_factory, clock):
        store = InMemoryJournalStore([entry_factory(i) for i in range(5)])

        fetched = await store.fetch_entries(
            EntryFilter(start=clock() + timedelta(hours=1), end=clock() + timedelta(hours=3))
        )

        assert [entry.id for entry in fetched] == ["entry_0001", "entry_0002", "entry_0003"]

    async def test_add_and_remove(self, entry_factory):
        store = InMemoryJournalStore()
        store.add_entry(entry_factory(0))
        store.add_entry(entry_factory(1))

        assert len(store) == 2
        assert store.remove_entry("entry_0000")
        assert not store.remove_entry("entry_0000")
        assert len(store) == 1

    async def test_mixed_timezone_entries(self, entry_factory):
        store = InMemoryJournalStore(
            [
                entry_factory(0),
                entry_factory(1, created_at=datetime(2024, 3, 11, 10, 0, tzinfo=timezone.utc)),
            ]
        )

        entry_filter = EntryFilter.for_timeframe(Mood.HAPPY, TimeFrame.ALL_TIME)
        fetched = await store.fetch_entries(entry_filter)

        assert len(fetched) == 2

    async def test_aware_filter_bounds(self, entry_factory):
        store = InMemoryJournalStore([entry_factory(i) for i in range(3)])

        fetched = await store.fetch_entries(
            EntryFilter(
                start=datetime(2024, 1, 1, tzinfo=timezone.utc),
                end=datetime(2024, 12, 31, tzinfo=timezone.utc),
            )
        )

        assert len(fetched) == 3


@pytest.mark.unit
class TestEntryFilter:
    """Test timeframe-derived filters."""

    def test_for_timeframe(self):
        now = datetime(2024, 3, 13, 15, 0)  # Wednesday
        entry_filter = EntryFilter.for_timeframe(Mood.HAPPY, TimeFrame.THIS_WEEK, now=now)

        assert entry_filter.mood is Mood.HAPPY
        assert entry_filter.start == datetime(2024, 3, 11)
        assert entry_filter.end == datetime(2024, 3, 17, 23, 59, 59, 999999)
