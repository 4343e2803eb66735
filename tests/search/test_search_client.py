"""Tests for the search client"""

import threading
from datetime import datetime, timezone
from typing import override
from unittest.mock import Mock

from mindflow.models.entry import Entry
from mindflow.models.mood import Mood
from mindflow.search.entry_store import EntryPage, EntryStore, SQLiteEntryStore
from mindflow.search.errors import StorageQueryError
from mindflow.search.query_builder import EntryQuery
from mindflow.search.search_client import SearchClient, SearchStatus
from mindflow.search.search_filter import SearchFilter


class SlowFirstStore(EntryStore):
    """Store whose first query blocks until released."""

    def __init__(self, inner: EntryStore):
        self.inner = inner
        self.calls: list[EntryQuery] = []
        self.entered = threading.Event()
        self.release = threading.Event()

    @override
    def query(self, query: EntryQuery) -> EntryPage:
        self.calls.append(query)
        if len(self.calls) == 1:
            self.entered.set()
            _ = self.release.wait(5)
        return self.inner.query(query)


def _create_test_store() -> SQLiteEntryStore:
    """Helper to create a store with a few entries."""
    store = SQLiteEntryStore()
    for day, content, mood in [
        (1, "Missed the deadline again", Mood.STRESSED),
        (2, "Happy day", Mood.HAPPY),
        (3, "Deadline stress", Mood.STRESSED),
    ]:
        created = datetime(2025, 1, day, tzinfo=timezone.utc)
        store.add_entry(
            Entry(
                entry_id=f"e{day}",
                owner_id="user-1",
                content=content,
                mood=mood,
                created_at=created,
                updated_at=created,
            )
        )
    return store


class TestSearchClient:
    """Tests for the SearchClient class"""

    def test_empty_filter_never_touches_storage(self):
        store = Mock(spec=EntryStore)
        client = SearchClient(store, lambda: "user-1")

        for search_filter in (SearchFilter(), SearchFilter(keyword="   ")):
            outcome = client.search(search_filter)

            assert outcome.status == SearchStatus.SKIPPED
            assert outcome.entries == []
            assert not outcome.has_more

        store.query.assert_not_called()

    def test_keyword_search(self):
        client = SearchClient(_create_test_store(), lambda: "user-1")

        outcome = client.search(SearchFilter(keyword="deadline"))

        assert outcome.status == SearchStatus.COMPLETED
        assert [entry.entry_id for entry in outcome.entries] == ["e3", "e1"]
        assert outcome.total == 2
        assert not outcome.has_more

    def test_has_more(self):
        client = SearchClient(_create_test_store(), lambda: "user-1")

        first = client.search(SearchFilter(mood=Mood.STRESSED), offset=0, limit=1)
        second = client.search(SearchFilter(mood=Mood.STRESSED), offset=1, limit=1)

        assert first.has_more
        assert [entry.entry_id for entry in first.entries] == ["e3"]
        assert not second.has_more
        assert [entry.entry_id for entry in second.entries] == ["e1"]

    def test_zero_results_is_not_a_failure(self):
        client = SearchClient(_create_test_store(), lambda: "user-1")

        outcome = client.search(SearchFilter(keyword="beach"))

        assert outcome.status == SearchStatus.COMPLETED
        assert outcome.entries == []
        assert not outcome.is_failure

    def test_storage_error_is_reported_as_failure(self):
        store = Mock(spec=EntryStore)
        store.query.side_effect = StorageQueryError("connection lost")
        client = SearchClient(store, lambda: "user-1")

        outcome = client.search(SearchFilter(keyword="work"))

        assert outcome.status == SearchStatus.FAILED
        assert outcome.is_failure
        assert outcome.error == "connection lost"

    def test_missing_session_is_reported_as_failure(self):
        store = Mock(spec=EntryStore)
        client = SearchClient(store, lambda: None)

        outcome = client.search(SearchFilter(keyword="work"))

        assert outcome.status == SearchStatus.FAILED
        store.query.assert_not_called()

    def test_owner_comes_from_session_provider(self):
        store = Mock(spec=EntryStore)
        store.query.return_value = EntryPage(entries=[], total=0)
        client = SearchClient(store, lambda: "user-42")

        _ = client.search(SearchFilter(keyword="work"))

        query: EntryQuery = store.query.call_args.args[0]
        assert query.owner_id == "user-42"

    def test_generations_increase(self):
        client = SearchClient(Mock(spec=EntryStore), lambda: "user-1")

        first = client.search(SearchFilter())
        second = client.search(SearchFilter())

        assert second.generation > first.generation
        assert client.is_current(second.generation)
        assert not client.is_current(first.generation)

    def test_reserved_generation_is_used(self):
        client = SearchClient(_create_test_store(), lambda: "user-1")
        generation = client.invalidate()

        outcome = client.search(SearchFilter(keyword="happy"), generation=generation)

        assert outcome.generation == generation
        assert outcome.status == SearchStatus.COMPLETED

    def test_earlier_search_resolving_last_is_superseded(self):
        """A then B issued, B resolves first: A's late result is discarded"""
        store = SlowFirstStore(_create_test_store())
        client = SearchClient(store, lambda: "user-1")
        outcomes = {}

        thread = threading.Thread(
            target=lambda: outcomes.update(
                a=client.search(SearchFilter(keyword="deadline"))
            )
        )
        thread.start()
        assert store.entered.wait(5)

        outcomes["b"] = client.search(SearchFilter(keyword="happy"))
        store.release.set()
        thread.join(5)

        assert outcomes["b"].status == SearchStatus.COMPLETED
        assert [entry.entry_id for entry in outcomes["b"].entries] == ["e2"]
        assert outcomes["a"].status == SearchStatus.SUPERSEDED
        assert outcomes["a"].entries == []

    def test_invalidate_supersedes_search_in_flight(self):
        store = SlowFirstStore(_create_test_store())
        client = SearchClient(store, lambda: "user-1")
        outcomes = {}

        thread = threading.Thread(
            target=lambda: outcomes.update(a=client.search(SearchFilter(keyword="day")))
        )
        thread.start()
        assert store.entered.wait(5)
        _ = client.invalidate()
        store.release.set()
        thread.join(5)

        assert outcomes["a"].status == SearchStatus.SUPERSEDED

    def test_failure_of_superseded_search_is_not_reported(self):
        store = Mock(spec=EntryStore)
        client = SearchClient(store, lambda: "user-1")

        def fail_after_new_search(query: EntryQuery) -> EntryPage:
            _ = client.invalidate()
            raise StorageQueryError("timeout")

        store.query.side_effect = fail_after_new_search

        outcome = client.search(SearchFilter(keyword="work"))

        assert outcome.status == SearchStatus.SUPERSEDED
