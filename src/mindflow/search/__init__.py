"""
Search module for the MindFlow application.

Keyword, mood and date-range search over journal entries backed by an
SQLite FTS5 index, with highlighted previews and recent-search history.
"""

from mindflow.search.entry_store import EntryPage, EntryStore, SQLiteEntryStore
from mindflow.search.errors import SearchError, SessionRequiredError, StorageQueryError
from mindflow.search.highlighter import (
    HighlightedPreview,
    SearchResult,
    extract_snippets,
    highlight,
)
from mindflow.search.query_builder import EntryQuery, build_query
from mindflow.search.recent_searches import RecentSearchEntry, RecentSearchStore
from mindflow.search.search_client import SearchClient, SearchOutcome, SearchStatus
from mindflow.search.search_filter import DateRangePreset, SearchFilter

__all__ = [
    "DateRangePreset",
    "EntryPage",
    "EntryQuery",
    "EntryStore",
    "HighlightedPreview",
    "RecentSearchEntry",
    "RecentSearchStore",
    "SQLiteEntryStore",
    "SearchClient",
    "SearchError",
    "SearchFilter",
    "SearchOutcome",
    "SearchResult",
    "SearchStatus",
    "SessionRequiredError",
    "StorageQueryError",
    "build_query",
    "extract_snippets",
    "highlight",
]
