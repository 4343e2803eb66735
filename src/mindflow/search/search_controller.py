"""
Search Controller - owns the state of the search page.

Debounces filter changes, runs searches on worker threads and only lets
the most recently issued search update what the user sees.
"""

import logging
from datetime import date
from enum import Enum

from PyQt6.QtCore import QObject, QThread, QTimer, pyqtSignal

from mindflow.config import settings
from mindflow.models.entry import Entry
from mindflow.models.mood import Mood
from mindflow.search.highlighter import SearchResult
from mindflow.search.recent_searches import RecentSearchStore
from mindflow.search.search_client import SearchClient, SearchOutcome, SearchStatus
from mindflow.search.search_filter import DateRangePreset, SearchFilter
from mindflow.search.search_worker import SearchWorker


class SearchState(Enum):
    """States of the search page."""

    IDLE = "idle"
    DEBOUNCING = "debouncing"
    SEARCHING = "searching"
    RESULTS = "results"
    EMPTY = "empty"
    FAILED = "failed"


class SearchController(QObject):
    """
    State machine behind the search page.

    Filter changes restart the debounce timer. When it expires the search
    runs on a SearchWorker thread; outcomes of superseded searches are
    dropped when they arrive.
    """

    # Signals
    state_changed: pyqtSignal = pyqtSignal(object)  # SearchState
    results_changed: pyqtSignal = pyqtSignal()
    recent_searches_changed: pyqtSignal = pyqtSignal(list)  # list[str]
    entry_selected: pyqtSignal = pyqtSignal(str)  # entry_id

    def __init__(
        self,
        client: SearchClient,
        recent_searches: RecentSearchStore,
        debounce_ms: int = settings.SEARCH_DEBOUNCE_MS,
        timeout_ms: int = settings.SEARCH_TIMEOUT_MS,
        page_size: int = settings.SEARCH_PAGE_SIZE,
        preview_length: int = settings.SEARCH_PREVIEW_LENGTH,
        parent: QObject | None = None,
    ):
        """
        Initialize the search controller.

        Args:
            client: Client used to run the searches
            recent_searches: Store of the recent keywords
            debounce_ms: Quiet period before a filter change is searched
            timeout_ms: Time after which a search is reported as failed
            page_size: Number of entries fetched per page
            preview_length: Length of the highlighted previews
            parent: Parent object
        """
        super().__init__(parent)
        self.logger: logging.Logger = logging.getLogger("SearchController")
        self._client: SearchClient = client
        self._recent_searches: RecentSearchStore = recent_searches
        self._page_size: int = page_size
        self._preview_length: int = preview_length

        self._filter: SearchFilter = SearchFilter()
        self._state: SearchState = SearchState.IDLE
        self._entries: list[Entry] = []
        self._total: int = 0
        self._keyword: str = ""
        self._error: str | None = None

        # Debounce timer
        self._debounce_timer: QTimer = QTimer(self)
        self._debounce_timer.setSingleShot(True)
        self._debounce_timer.setInterval(debounce_ms)
        _ = self._debounce_timer.timeout.connect(self._execute_search)

        self._timeout_timer: QTimer = QTimer(self)
        self._timeout_timer.setSingleShot(True)
        self._timeout_timer.setInterval(timeout_ms)
        _ = self._timeout_timer.timeout.connect(self._on_timeout)

        # Threads stay referenced until they have finished
        self._threads: list[tuple[QThread, SearchWorker]] = []

    @property
    def state(self) -> SearchState:
        return self._state

    @property
    def search_filter(self) -> SearchFilter:
        return self._filter

    @property
    def entries(self) -> list[Entry]:
        return list(self._entries)

    @property
    def results(self) -> list[SearchResult]:
        """The entries shown, with previews highlighted for the searched keyword."""
        return [
            SearchResult.from_entry(entry, self._keyword, self._preview_length)
            for entry in self._entries
        ]

    @property
    def total(self) -> int:
        return self._total

    @property
    def has_more(self) -> bool:
        return len(self._entries) < self._total

    @property
    def error_message(self) -> str | None:
        return self._error

    @property
    def recent_searches(self) -> list[str]:
        return self._recent_searches.list()

    def set_keyword(self, keyword: str) -> None:
        self._update_filter(self._filter.with_keyword(keyword))

    def set_mood(self, mood: Mood | None) -> None:
        self._update_filter(self._filter.with_mood(mood))

    def set_date_range(self, start_date: date | None, end_date: date | None) -> None:
        self._update_filter(self._filter.with_date_range(start_date, end_date))

    def apply_date_preset(
        self, preset: DateRangePreset, today: date | None = None
    ) -> None:
        start_date, end_date = preset.resolve(today)
        self.set_date_range(start_date, end_date)

    def clear_filters(self) -> None:
        self._update_filter(self._filter.cleared())

    def apply_recent(self, keyword: str) -> None:
        """Search a recent keyword right away, keeping the other filters."""
        self._filter = self._filter.with_keyword(keyword)
        self._execute_search()

    def clear_recent(self) -> None:
        self._recent_searches.clear()
        self.recent_searches_changed.emit(self._recent_searches.list())

    def retry(self) -> None:
        """Run the current filter again without waiting for the debounce."""
        self._execute_search()

    def load_more(self) -> None:
        """Fetch the next page of the current results."""
        if self._state != SearchState.RESULTS or not self.has_more:
            return
        self._execute_search(offset=len(self._entries))

    def select_entry(self, entry_id: str) -> None:
        self.entry_selected.emit(entry_id)

    def close(self) -> None:
        """Stop the timers and wait for the worker threads."""
        self._debounce_timer.stop()
        self._timeout_timer.stop()
        _ = self._client.invalidate()
        for thread, _worker in self._threads:
            if thread.isRunning():
                thread.quit()
                if not thread.wait(5000):
                    self.logger.warning("Search thread did not stop in time")
        self._threads = []

    def _set_state(self, state: SearchState) -> None:
        if state == self._state:
            return
        self.logger.debug("Search state %s -> %s", self._state.value, state.value)
        self._state = state
        self.state_changed.emit(state)

    def _update_filter(self, search_filter: SearchFilter) -> None:
        """Handle a filter change with debouncing."""
        if search_filter == self._filter:
            return
        self._filter = search_filter
        self._debounce_timer.stop()
        self._timeout_timer.stop()
        # Whatever is in flight belongs to the previous filter
        _ = self._client.invalidate()

        if search_filter.is_empty:
            self._reset()
            return

        self._set_state(SearchState.DEBOUNCING)
        self._debounce_timer.start()

    def _reset(self) -> None:
        """Go back to idle, dropping the results."""
        self._entries = []
        self._total = 0
        self._keyword = ""
        self._error = None
        self._set_state(SearchState.IDLE)
        self.results_changed.emit()

    def _execute_search(self, offset: int = 0) -> None:
        """Issue a search for the current filter."""
        self._debounce_timer.stop()
        if self._filter.is_empty:
            _ = self._client.invalidate()
            self._reset()
            return

        generation = self._client.invalidate()
        self.logger.debug(
            "Issuing search #%d: %s (offset %d)", generation, self._filter, offset
        )
        self._set_state(SearchState.SEARCHING)
        self._timeout_timer.start()
        self._start_worker(self._filter, generation, offset)

    def _start_worker(
        self, search_filter: SearchFilter, generation: int, offset: int
    ) -> None:
        thread = QThread()
        worker = SearchWorker(
            self._client, search_filter, generation, offset, self._page_size
        )
        worker.moveToThread(thread)

        # Connect signals
        _ = thread.started.connect(worker.run)
        _ = worker.finished.connect(self._on_search_finished)

        # Cleanup connections - quit thread when worker finishes
        _ = worker.finished.connect(thread.quit)
        _ = thread.finished.connect(self._on_thread_finished)

        self._threads.append((thread, worker))
        thread.start()

    def _on_thread_finished(self) -> None:
        """Drop the references to the threads that are done."""
        finished_thread = self.sender()
        if isinstance(finished_thread, QThread):
            # finished is emitted just before the thread actually stops
            _ = finished_thread.wait()
        self._threads = [
            (thread, worker)
            for thread, worker in self._threads
            if not thread.isFinished()
        ]

    def _on_search_finished(self, outcome: SearchOutcome) -> None:
        """Handle a search outcome, ignoring the ones of superseded searches."""
        if outcome.status == SearchStatus.SUPERSEDED or not self._client.is_current(
            outcome.generation
        ):
            self.logger.debug("Dropping stale search #%d", outcome.generation)
            return

        self._timeout_timer.stop()

        if outcome.status == SearchStatus.SKIPPED:
            self._reset()
            return

        if outcome.status == SearchStatus.FAILED:
            self.logger.info("Search #%d failed: %s", outcome.generation, outcome.error)
            self._error = outcome.error or "Search failed"
            if outcome.offset == 0:
                self._entries = []
                self._total = 0
            self._set_state(SearchState.FAILED)
            self.results_changed.emit()
            return

        self._error = None
        self._keyword = outcome.search_filter.normalized_keyword
        if outcome.offset == 0:
            self._entries = list(outcome.entries)
        else:
            self._entries.extend(outcome.entries)
        self._total = outcome.total

        self._set_state(SearchState.RESULTS if self._entries else SearchState.EMPTY)
        self.results_changed.emit()

        if outcome.offset == 0 and outcome.search_filter.has_keyword:
            self._recent_searches.record(outcome.search_filter.normalized_keyword)
            self.recent_searches_changed.emit(self._recent_searches.list())

    def _on_timeout(self) -> None:
        """Report the search in flight as failed, its late outcome is ignored."""
        if self._state != SearchState.SEARCHING:
            return
        _ = self._client.invalidate()
        self.logger.warning("Search timed out")
        self._error = "Search timed out"
        self._set_state(SearchState.FAILED)
        self.results_changed.emit()
