"""
Recent-search store - most-recent-first list of past keyword searches.

Persisted as a msgpack file so it survives restarts.
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, cast

import msgpack

from mindflow.config import settings


@dataclass(frozen=True)
class RecentSearchEntry:
    """A keyword searched in the past."""

    keyword: str
    last_used: float

    def to_dict(self) -> dict[str, Any]:
        return {"keyword": self.keyword, "last_used": self.last_used}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RecentSearchEntry":
        return cls(keyword=str(data["keyword"]), last_used=float(data["last_used"]))


class RecentSearchStore:
    """
    Capped, deduplicated list of recent keywords.

    Keywords are stored trimmed with their original casing and compared
    case-insensitively. Only the UI thread reads and writes the store.
    """

    VERSION: int = 1

    def __init__(
        self,
        path: Path = settings.RECENT_SEARCHES_PATH,
        max_entries: int = settings.RECENT_SEARCHES_MAX,
    ):
        if max_entries <= 0:
            raise ValueError(f"max_entries must be positive, got {max_entries}")
        self.logger = logging.getLogger("RecentSearchStore")
        self.path: Path = path
        self.max_entries: int = max_entries
        self._entries: list[RecentSearchEntry] | None = None

    def _load(self) -> list[RecentSearchEntry]:
        """Load the entries from disk on first use."""
        if self._entries is not None:
            return self._entries

        self._entries = []
        if not self.path.exists():
            return self._entries

        try:
            data = cast(
                dict[str, Any], msgpack.unpackb(self.path.read_bytes(), raw=False)
            )
            self._entries = [
                RecentSearchEntry.from_dict(item) for item in data.get("entries", [])
            ][: self.max_entries]
        except (
            OSError,
            ValueError,
            KeyError,
            TypeError,
            AttributeError,
            msgpack.UnpackException,
        ) as e:
            self.logger.warning("Could not read recent searches: %s", e)
            self._entries = []
        return self._entries

    def _save(self) -> None:
        """Write the entries to a temporary file and swap it in."""
        entries = self._load()
        data = {
            "version": self.VERSION,
            "entries": [entry.to_dict() for entry in entries],
        }
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            _ = tmp_path.write_bytes(
                cast(bytes, msgpack.packb(data, use_bin_type=True))
            )
            _ = tmp_path.replace(self.path)
        except OSError as e:
            self.logger.error("Could not save recent searches: %s", e)

    def record(self, keyword: str) -> None:
        """Move a keyword to the front of the list, adding it if needed."""
        keyword = keyword.strip()
        if not keyword:
            return

        key = keyword.casefold()
        entries = [
            entry for entry in self._load() if entry.keyword.casefold() != key
        ]
        entries.insert(0, RecentSearchEntry(keyword, time.time()))
        self._entries = entries[: self.max_entries]
        self._save()

    def entries(self) -> list[RecentSearchEntry]:
        return list(self._load())

    def list(self) -> list[str]:
        """Recent keywords, most recent first."""
        return [entry.keyword for entry in self._load()]

    def clear(self) -> None:
        self._entries = []
        self._save()
