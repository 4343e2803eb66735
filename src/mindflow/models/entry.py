"""A journal entry as seen by the search subsystem"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

from mindflow.models.mood import Mood

MAX_CONTENT_LENGTH: int = 50_000


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Entry:
    """
    A single journal record belonging to one user.

    Timestamps are timezone-aware. Entries are read-only for the search
    code; the editor creates new instances instead of mutating them.
    """

    owner_id: str
    content: str
    mood: Mood | None = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)
    entry_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def __post_init__(self):
        if len(self.content) > MAX_CONTENT_LENGTH:
            raise ValueError(
                f"Entry content exceeds {MAX_CONTENT_LENGTH} characters"
            )
        if self.created_at.tzinfo is None or self.updated_at.tzinfo is None:
            raise ValueError("Entry timestamps must be timezone-aware")
