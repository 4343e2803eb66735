"""
Query Builder - turns a SearchFilter into a single entry store query.

Converts the keyword to FTS5 syntax, drops filters that are not set and
normalizes reversed date ranges.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo

from mindflow.config import settings
from mindflow.models.mood import Mood
from mindflow.search.errors import SessionRequiredError
from mindflow.search.search_filter import SearchFilter

_WORD_PATTERN = re.compile(r"\w", re.UNICODE)


@dataclass(frozen=True)
class EntryQuery:
    """
    Storage-agnostic description of an entry search.

    `text_match` is None when no keyword was given and an empty string when
    the keyword contained nothing searchable (so nothing can match).
    `created_from` is inclusive, `created_before` is exclusive.
    """

    owner_id: str
    text_match: str | None = None
    mood: Mood | None = None
    created_from: datetime | None = None
    created_before: datetime | None = None
    offset: int = 0
    limit: int = settings.SEARCH_PAGE_SIZE

    def _where(self) -> tuple[str, list[str | float | int]]:
        clauses = ["e.owner_id = ?"]
        params: list[str | float | int] = [self.owner_id]

        if self.text_match is not None:
            if self.text_match:
                clauses.append(
                    "e.entry_id IN "
                    "(SELECT entry_id FROM entries_fts WHERE entries_fts MATCH ?)"
                )
                params.append(self.text_match)
            else:
                clauses.append("0")

        if self.mood is not None:
            clauses.append("e.mood = ?")
            params.append(self.mood.value)

        if self.created_from is not None:
            clauses.append("e.created_at >= ?")
            params.append(self.created_from.timestamp())

        if self.created_before is not None:
            clauses.append("e.created_at < ?")
            params.append(self.created_before.timestamp())

        return " AND ".join(clauses), params

    def to_sql(self) -> tuple[str, list[str | float | int]]:
        """Render the page query for the SQLite entry store."""
        where, params = self._where()
        sql = f"""
            SELECT e.entry_id, e.owner_id, e.content, e.mood,
                   e.created_at, e.updated_at
            FROM entries e
            WHERE {where}
            ORDER BY e.created_at DESC, e.entry_id DESC
            LIMIT ? OFFSET ?
        """
        return sql, [*params, self.limit, self.offset]

    def to_count_sql(self) -> tuple[str, list[str | float | int]]:
        """Render the query counting every match, ignoring pagination."""
        where, params = self._where()
        return f"SELECT COUNT(*) AS count FROM entries e WHERE {where}", params


def convert_to_fts5_query(keyword: str) -> str:
    """
    Convert a user keyword to FTS5 syntax.

    Every term is quoted so operators and punctuation typed by the user are
    taken literally. Terms are AND-ed implicitly; long enough terms match
    as prefixes so a partially typed word still finds entries.

    Args:
        keyword: Raw keyword from the search bar

    Returns:
        FTS5 query string, empty if nothing in the keyword is searchable
    """
    terms: list[str] = []
    for word in keyword.split():
        if not _WORD_PATTERN.search(word):
            continue
        term = '"' + word.replace('"', '""') + '"'
        if len(word) >= settings.SEARCH_PREFIX_MIN_LENGTH:
            term += "*"
        terms.append(term)
    return " ".join(terms)


def _start_of_day(day: date, tz: tzinfo | None) -> datetime:
    if tz is None:
        return datetime.combine(day, time.min).astimezone()
    return datetime.combine(day, time.min, tzinfo=tz)


def build_query(
    search_filter: SearchFilter,
    owner_id: str | None,
    offset: int = 0,
    limit: int = settings.SEARCH_PAGE_SIZE,
    tz: tzinfo | None = None,
) -> EntryQuery:
    """
    Build the entry store query for a filter.

    Args:
        search_filter: Filter set by the user
        owner_id: Current user, as supplied by the session provider
        offset: Number of results to skip
        limit: Page size
        tz: Zone the dates are days of, the local zone when omitted

    Returns:
        The EntryQuery for the filter
    """
    if not owner_id:
        raise SessionRequiredError("A signed-in user is required to search")
    if offset < 0:
        raise ValueError(f"offset must not be negative, got {offset}")
    if limit <= 0:
        raise ValueError(f"limit must be positive, got {limit}")

    text_match: str | None = None
    if search_filter.has_keyword:
        text_match = convert_to_fts5_query(search_filter.normalized_keyword)

    start, end = search_filter.date_bounds()
    created_from = _start_of_day(start, tz) if start is not None else None
    # The whole end day is included
    created_before = (
        _start_of_day(end + timedelta(days=1), tz) if end is not None else None
    )

    return EntryQuery(
        owner_id=owner_id,
        text_match=text_match,
        mood=search_filter.mood,
        created_from=created_from,
        created_before=created_before,
        offset=offset,
        limit=limit,
    )
