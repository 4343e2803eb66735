"""
Highlighter - builds keyword-highlighted previews of entry bodies.

The preview keeps the body text and the match positions apart: text is
only escaped when rendered, and the highlight markup is added around the
escaped pieces, never substituted into already escaped text.
"""

import html
import re
from dataclasses import dataclass

from mindflow.config import settings
from mindflow.models.entry import Entry

HIGHLIGHT_OPEN: str = "<mark>"
HIGHLIGHT_CLOSE: str = "</mark>"
ELLIPSIS: str = "..."


@dataclass(frozen=True)
class HighlightedPreview:
    """A window of an entry body split into plain and matched segments."""

    segments: tuple[tuple[str, bool], ...]
    truncated_start: bool = False
    truncated_end: bool = False

    @property
    def plain_text(self) -> str:
        """The window exactly as it appears in the body."""
        return "".join(text for text, _ in self.segments)

    @property
    def match_count(self) -> int:
        return sum(1 for _, is_match in self.segments if is_match)

    @property
    def matches(self) -> list[str]:
        return [text for text, is_match in self.segments if is_match]

    def to_html(
        self,
        highlight_open: str = HIGHLIGHT_OPEN,
        highlight_close: str = HIGHLIGHT_CLOSE,
    ) -> str:
        """
        Render the preview as HTML.

        Body text is escaped, matches are wrapped in the highlight tags
        (<mark> by default) and truncated sides get an ellipsis.
        """
        parts: list[str] = []
        if self.truncated_start:
            parts.append(ELLIPSIS)
        for text, is_match in self.segments:
            if is_match:
                parts.append(highlight_open + html.escape(text) + highlight_close)
            else:
                parts.append(html.escape(text))
        if self.truncated_end:
            parts.append(ELLIPSIS)
        return "".join(parts)

    def to_plain(self) -> str:
        """The preview without markup, with ellipses on truncated sides."""
        prefix = ELLIPSIS if self.truncated_start else ""
        suffix = ELLIPSIS if self.truncated_end else ""
        return prefix + self.plain_text + suffix


def _keyword_pattern(keyword: str) -> re.Pattern[str] | None:
    keyword = keyword.strip()
    if not keyword:
        return None
    return re.compile(re.escape(keyword), re.IGNORECASE)


def _window(
    body: str, start: int, end: int, pattern: re.Pattern[str] | None
) -> HighlightedPreview:
    text = body[start:end]
    segments: list[tuple[str, bool]] = []
    position = 0
    if pattern is not None:
        for match in pattern.finditer(text):
            if match.start() > position:
                segments.append((text[position : match.start()], False))
            segments.append((match.group(0), True))
            position = match.end()
    if position < len(text):
        segments.append((text[position:], False))
    return HighlightedPreview(
        segments=tuple(segments),
        truncated_start=start > 0,
        truncated_end=end < len(body),
    )


def _centered_bounds(
    body_length: int, match_start: int, match_end: int, length: int
) -> tuple[int, int]:
    length = max(length, match_end - match_start)
    center = (match_start + match_end) // 2
    start = max(0, center - length // 2)
    end = min(body_length, start + length)
    start = max(0, end - length)
    return start, end


def highlight(
    body: str,
    keyword: str,
    preview_length: int = settings.SEARCH_PREVIEW_LENGTH,
) -> HighlightedPreview:
    """
    Build the preview of a body centered on the first keyword match.

    Args:
        body: Entry content
        keyword: Search keyword, may be empty
        preview_length: Maximum number of body characters in the preview

    Returns:
        HighlightedPreview with every match inside the window marked
    """
    if preview_length <= 0:
        raise ValueError(f"preview_length must be positive, got {preview_length}")

    pattern = _keyword_pattern(keyword)
    first = pattern.search(body) if pattern is not None else None
    if pattern is None or first is None:
        return _window(body, 0, min(len(body), preview_length), None)

    start, end = _centered_bounds(len(body), first.start(), first.end(), preview_length)
    return _window(body, start, end, pattern)


def extract_snippets(
    body: str,
    keyword: str,
    snippet_length: int = settings.SEARCH_SNIPPET_LENGTH,
    max_snippets: int = settings.SEARCH_MAX_SNIPPETS,
) -> list[HighlightedPreview]:
    """
    Cut short previews around successive keyword matches.

    A match already shown in an earlier snippet does not start a new one.

    Args:
        body: Entry content
        keyword: Search keyword
        snippet_length: Number of body characters per snippet
        max_snippets: Maximum number of snippets

    Returns:
        Snippets in body order, empty when the keyword does not occur
    """
    pattern = _keyword_pattern(keyword)
    if pattern is None or max_snippets <= 0:
        return []

    snippets: list[HighlightedPreview] = []
    covered_until = 0
    for match in pattern.finditer(body):
        if match.start() < covered_until:
            continue
        start, end = _centered_bounds(
            len(body), match.start(), match.end(), snippet_length
        )
        snippets.append(_window(body, start, end, pattern))
        covered_until = end
        if len(snippets) >= max_snippets:
            break
    return snippets


@dataclass(frozen=True)
class SearchResult:
    """An entry found by a search, with its highlighted preview and snippets."""

    entry: Entry
    preview: HighlightedPreview
    snippets: tuple[HighlightedPreview, ...] = ()

    @staticmethod
    def from_entry(
        entry: Entry,
        keyword: str,
        preview_length: int = settings.SEARCH_PREVIEW_LENGTH,
    ) -> "SearchResult":
        """Create a SearchResult, highlighting the keyword in the entry body."""
        return SearchResult(
            entry=entry,
            preview=highlight(entry.content, keyword, preview_length),
            snippets=tuple(extract_snippets(entry.content, keyword)),
        )
