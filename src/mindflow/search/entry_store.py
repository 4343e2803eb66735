"""
SQLite FTS5 entry store for the MindFlow application.

Keeps journal entries in a SQLite database with a full-text index on the
entry content. The search code only reads from it; writes come from the
entry editor.
"""

import logging
import sqlite3
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import override

from mindflow.models.entry import Entry
from mindflow.models.mood import Mood
from mindflow.search.errors import StorageQueryError
from mindflow.search.query_builder import EntryQuery


@dataclass
class EntryPage:
    """One page of entries plus the number of entries matching overall."""

    entries: list[Entry]
    total: int


class EntryStore(ABC):
    """Read access to the entries of the current user."""

    @abstractmethod
    def query(self, query: EntryQuery) -> EntryPage:
        """Run a query, raising StorageQueryError when it cannot be executed"""


class SQLiteEntryStore(EntryStore):
    """
    Entry store backed by SQLite with an FTS5 index on the content.

    The connection is shared between the UI thread and the search worker
    threads, so every access goes through a lock.
    """

    def __init__(self, db_path: Path | str = ":memory:"):
        """
        Initialize the entry store.

        Args:
            db_path: Database file, ":memory:" for a throwaway store
        """
        self.logger = logging.getLogger("SQLiteEntryStore")
        self._db_path = db_path
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.Lock()

    def open(self) -> None:
        """Open the database and create the schema if needed."""
        if self._conn is not None:
            return

        if isinstance(self._db_path, Path):
            self._db_path.parent.mkdir(parents=True, exist_ok=True)

        self._conn = sqlite3.connect(str(self._db_path), check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._create_schema()
        self.logger.debug("Opened entry store at %s", self._db_path)

    def close(self) -> None:
        """Close the database."""
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    def _create_schema(self) -> None:
        """Create the entries table and its FTS5 index."""
        if self._conn is None:
            return

        cursor = self._conn.cursor()

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS entries (
                entry_id TEXT PRIMARY KEY,
                owner_id TEXT NOT NULL,
                content TEXT NOT NULL,
                mood TEXT,
                created_at REAL NOT NULL,
                updated_at REAL NOT NULL
            )
        """)

        cursor.execute("""
            CREATE VIRTUAL TABLE IF NOT EXISTS entries_fts USING fts5(
                content,
                entry_id UNINDEXED,
                tokenize='porter unicode61'
            )
        """)

        cursor.execute("""
            CREATE INDEX IF NOT EXISTS idx_entries_owner_created
            ON entries(owner_id, created_at DESC)
        """)
        cursor.execute("""
            CREATE INDEX IF NOT EXISTS idx_entries_mood ON entries(mood)
        """)

        self._conn.commit()

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self.open()
        return self._conn  # pyright: ignore[reportReturnType]

    def add_entry(self, entry: Entry) -> None:
        """
        Add or replace an entry.

        Args:
            entry: Entry to store
        """
        conn = self._connection()
        with self._lock:
            cursor = conn.cursor()
            cursor.execute(
                "DELETE FROM entries_fts WHERE entry_id = ?", (entry.entry_id,)
            )
            cursor.execute(
                """
                INSERT OR REPLACE INTO entries
                (entry_id, owner_id, content, mood, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    entry.entry_id,
                    entry.owner_id,
                    entry.content,
                    entry.mood.value if entry.mood else None,
                    entry.created_at.timestamp(),
                    entry.updated_at.timestamp(),
                ),
            )
            cursor.execute(
                "INSERT INTO entries_fts (content, entry_id) VALUES (?, ?)",
                (entry.content, entry.entry_id),
            )
            conn.commit()

    def remove_entry(self, entry_id: str) -> None:
        """Remove an entry and its index row."""
        if self._conn is None:
            return

        with self._lock:
            cursor = self._conn.cursor()
            cursor.execute("DELETE FROM entries_fts WHERE entry_id = ?", (entry_id,))
            cursor.execute("DELETE FROM entries WHERE entry_id = ?", (entry_id,))
            self._conn.commit()

    def get_entry(self, entry_id: str) -> Entry | None:
        """Get a specific entry by ID."""
        conn = self._connection()
        with self._lock:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM entries WHERE entry_id = ?", (entry_id,))
            row = cursor.fetchone()
        return self._row_to_entry(row) if row else None

    @override
    def query(self, query: EntryQuery) -> EntryPage:
        """
        Run a search query.

        Args:
            query: Query produced by the query builder

        Returns:
            The requested page and the total number of matches
        """
        sql, params = query.to_sql()
        count_sql, count_params = query.to_count_sql()

        try:
            conn = self._connection()
            with self._lock:
                cursor = conn.cursor()
                cursor.execute(count_sql, count_params)
                total = cursor.fetchone()["count"]
                cursor.execute(sql, params)
                rows = cursor.fetchall()
            entries = [self._row_to_entry(row) for row in rows]
        except (sqlite3.Error, OSError) as e:
            raise StorageQueryError(f"Entry query failed: {e}") from e
        except ValueError as e:
            raise StorageQueryError(f"Invalid entry row: {e}") from e

        return EntryPage(entries=entries, total=total)

    @staticmethod
    def _row_to_entry(row: sqlite3.Row) -> Entry:
        return Entry(
            entry_id=row["entry_id"],
            owner_id=row["owner_id"],
            content=row["content"],
            mood=Mood.parse(row["mood"]),
            created_at=datetime.fromtimestamp(row["created_at"], tz=timezone.utc),
            updated_at=datetime.fromtimestamp(row["updated_at"], tz=timezone.utc),
        )
