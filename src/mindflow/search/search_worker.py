"""Run a search on another thread"""

import logging

from PyQt6.QtCore import QObject, pyqtSignal

from mindflow.search.search_client import SearchClient, SearchOutcome, SearchStatus
from mindflow.search.search_filter import SearchFilter


class SearchWorker(QObject):
    """Worker that runs one search in a separate thread"""

    # Signals
    finished: pyqtSignal = pyqtSignal(object)  # SearchOutcome

    def __init__(
        self,
        client: SearchClient,
        search_filter: SearchFilter,
        generation: int,
        offset: int,
        limit: int,
    ):
        super().__init__()
        self.client: SearchClient = client
        self.search_filter: SearchFilter = search_filter
        self.generation: int = generation
        self.offset: int = offset
        self.limit: int = limit
        self.logger: logging.Logger = logging.getLogger("SearchWorker")

    def run(self):
        """Main work function"""
        self.logger.debug(
            "Running search #%d (offset %d)", self.generation, self.offset
        )
        try:
            outcome: SearchOutcome = self.client.search(
                self.search_filter,
                offset=self.offset,
                limit=self.limit,
                generation=self.generation,
            )
        except Exception as e:
            self.logger.exception("Unexpected error in search #%d", self.generation)
            outcome = SearchOutcome(
                SearchStatus.FAILED,
                self.generation,
                self.search_filter,
                offset=self.offset,
                error=str(e) or type(e).__name__,
            )
        self.finished.emit(outcome)
