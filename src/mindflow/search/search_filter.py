"""
Search filter - the keyword, mood and date-range constraints of a search.
"""

import calendar
from dataclasses import dataclass, replace
from datetime import date, timedelta
from enum import Enum

from mindflow.models.mood import Mood


@dataclass(frozen=True)
class SearchFilter:
    """
    Constraints driving a search.

    An empty filter (blank keyword, no mood, no dates) means "no search in
    progress" and is never turned into a query.
    """

    keyword: str = ""
    mood: Mood | None = None
    start_date: date | None = None
    end_date: date | None = None

    @property
    def normalized_keyword(self) -> str:
        """The keyword without surrounding whitespace."""
        return self.keyword.strip()

    @property
    def has_keyword(self) -> bool:
        return bool(self.normalized_keyword)

    @property
    def is_empty(self) -> bool:
        return (
            not self.has_keyword
            and self.mood is None
            and self.start_date is None
            and self.end_date is None
        )

    def date_bounds(self) -> tuple[date | None, date | None]:
        """Return (start, end) in chronological order."""
        start, end = self.start_date, self.end_date
        if start is not None and end is not None and start > end:
            start, end = end, start
        return start, end

    def with_keyword(self, keyword: str) -> "SearchFilter":
        return replace(self, keyword=keyword)

    def with_mood(self, mood: Mood | None) -> "SearchFilter":
        return replace(self, mood=mood)

    def with_date_range(
        self, start_date: date | None, end_date: date | None
    ) -> "SearchFilter":
        return replace(self, start_date=start_date, end_date=end_date)

    def cleared(self) -> "SearchFilter":
        return SearchFilter()

    def describe_date_range(self) -> str:
        """Human readable label for the date range of the filter."""
        start, end = self.date_bounds()
        if start is None and end is None:
            return "All Time"
        if end is None:
            return f"From {_format_day(start)}"
        if start is None:
            return f"Until {_format_day(end)}"
        return f"{start.strftime('%b')} {start.day} - {_format_day(end)}"


def _format_day(day: date | None) -> str:
    if day is None:
        return ""
    return f"{day.strftime('%b')} {day.day}, {day.year}"


def _months_back(day: date, months: int) -> date:
    month_index = day.year * 12 + (day.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


class DateRangePreset(Enum):
    """Shortcut date ranges offered next to the date pickers."""

    LAST_7_DAYS = "last_7_days"
    LAST_30_DAYS = "last_30_days"
    LAST_YEAR = "last_year"

    @property
    def label(self) -> str:
        return {
            DateRangePreset.LAST_7_DAYS: "Last 7 Days",
            DateRangePreset.LAST_30_DAYS: "Last 30 Days",
            DateRangePreset.LAST_YEAR: "Last Year",
        }[self]

    def resolve(self, today: date | None = None) -> tuple[date, date]:
        """Return the (start, end) pair of this preset, ending today."""
        today = today or date.today()
        if self is DateRangePreset.LAST_7_DAYS:
            return today - timedelta(days=7), today
        if self is DateRangePreset.LAST_30_DAYS:
            return _months_back(today, 1), today
        return _months_back(today, 12), today
