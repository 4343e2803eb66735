"""Tests for the mood model and the entry model"""

from datetime import datetime

import pytest

from mindflow.models.entry import MAX_CONTENT_LENGTH, Entry
from mindflow.models.mood import (
    DEFAULT_MOOD_COLOR,
    MOODS,
    Mood,
    mood_color,
    mood_config,
    mood_emoji,
    mood_label,
)


class TestMood:
    """Tests for Mood and its display configuration"""

    def test_every_mood_has_a_config(self):
        assert [config.value for config in MOODS] == list(Mood)

    def test_parse(self):
        assert Mood.parse("Happy") == Mood.HAPPY
        assert Mood.parse(" stressed ") == Mood.STRESSED
        assert Mood.parse(Mood.CALM) == Mood.CALM
        assert Mood.parse("") is None
        assert Mood.parse(None) is None

    def test_parse_unknown_mood(self):
        with pytest.raises(ValueError):
            _ = Mood.parse("furious")

    def test_display_helpers(self):
        config = mood_config(Mood.ANXIOUS)

        assert config is not None
        assert mood_label(Mood.ANXIOUS) == "Anxious"
        assert mood_emoji(Mood.ANXIOUS) == config.emoji
        assert mood_color(Mood.ANXIOUS) == config.color

    def test_no_mood(self):
        assert mood_config(None) is None
        assert mood_label(None) == ""
        assert mood_emoji(None) == ""
        assert mood_color(None) == DEFAULT_MOOD_COLOR


class TestEntry:
    """Tests for the Entry model"""

    def test_defaults(self):
        entry = Entry(owner_id="user-1", content="hello")

        assert entry.mood is None
        assert entry.entry_id
        assert entry.created_at.tzinfo is not None
        assert Entry(owner_id="user-1", content="x").entry_id != entry.entry_id

    def test_content_too_long(self):
        with pytest.raises(ValueError):
            _ = Entry(owner_id="user-1", content="a" * (MAX_CONTENT_LENGTH + 1))

    def test_naive_timestamp_is_rejected(self):
        with pytest.raises(ValueError):
            _ = Entry(owner_id="user-1", content="x", created_at=datetime(2025, 1, 1))
