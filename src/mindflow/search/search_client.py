"""
Search Client - executes entry searches and tags them with generations.

Every search takes a new generation number. A search that finishes after a
newer one was started is reported as superseded and carries no entries.
"""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from mindflow.config import settings
from mindflow.models.entry import Entry
from mindflow.search.entry_store import EntryStore
from mindflow.search.errors import SearchError
from mindflow.search.query_builder import build_query
from mindflow.search.search_filter import SearchFilter

CurrentUserProvider = Callable[[], str | None]


class SearchStatus(Enum):
    """How a search ended."""

    COMPLETED = "completed"
    SKIPPED = "skipped"  # empty filter, storage never touched
    FAILED = "failed"
    SUPERSEDED = "superseded"


@dataclass
class SearchOutcome:
    """Result of a single search call."""

    status: SearchStatus
    generation: int
    search_filter: SearchFilter
    offset: int = 0
    entries: list[Entry] = field(default_factory=list)
    total: int = 0
    error: str | None = None

    @property
    def has_more(self) -> bool:
        return self.offset + len(self.entries) < self.total

    @property
    def is_failure(self) -> bool:
        return self.status == SearchStatus.FAILED


class SearchClient:
    """
    Runs searches against the entry store.

    Safe to call from worker threads: generations are handed out under a
    lock and compared once the store has answered.
    """

    def __init__(self, store: EntryStore, current_user: CurrentUserProvider):
        """
        Initialize the search client.

        Args:
            store: Entry store to query
            current_user: Returns the signed-in user ID, None if signed out
        """
        self.logger = logging.getLogger("SearchClient")
        self._store = store
        self._current_user = current_user
        self._lock = threading.Lock()
        self._generation: int = 0

    @property
    def generation(self) -> int:
        """The generation of the most recently issued search."""
        with self._lock:
            return self._generation

    def is_current(self, generation: int) -> bool:
        with self._lock:
            return generation == self._generation

    def invalidate(self) -> int:
        """Supersede every search in flight and return the new generation."""
        with self._lock:
            self._generation += 1
            return self._generation

    def search(
        self,
        search_filter: SearchFilter,
        offset: int = 0,
        limit: int = settings.SEARCH_PAGE_SIZE,
        generation: int | None = None,
    ) -> SearchOutcome:
        """
        Execute a search.

        Args:
            search_filter: Filter to search with
            offset: Number of results to skip
            limit: Maximum number of results
            generation: Generation reserved with invalidate() by the caller,
                a new one is taken when omitted

        Returns:
            The SearchOutcome. Empty filters are skipped without touching
            the store, storage errors come back as FAILED.
        """
        if generation is None:
            generation = self.invalidate()

        if search_filter.is_empty:
            return SearchOutcome(SearchStatus.SKIPPED, generation, search_filter)

        try:
            query = build_query(search_filter, self._current_user(), offset, limit)
            page = self._store.query(query)
        except SearchError as e:
            if not self.is_current(generation):
                return self._superseded(generation, search_filter, offset)
            self.logger.warning("Search failed: %s", e)
            return SearchOutcome(
                SearchStatus.FAILED,
                generation,
                search_filter,
                offset=offset,
                error=str(e),
            )

        if not self.is_current(generation):
            return self._superseded(generation, search_filter, offset)

        return SearchOutcome(
            SearchStatus.COMPLETED,
            generation,
            search_filter,
            offset=offset,
            entries=page.entries,
            total=page.total,
        )

    def _superseded(
        self, generation: int, search_filter: SearchFilter, offset: int
    ) -> SearchOutcome:
        self.logger.debug("Discarding superseded search #%d", generation)
        return SearchOutcome(
            SearchStatus.SUPERSEDED, generation, search_filter, offset=offset
        )
