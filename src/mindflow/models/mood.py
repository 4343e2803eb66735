"""The closed set of moods an entry can be tagged with"""

from dataclasses import dataclass
from enum import Enum


class Mood(Enum):
    """Emotion label attached to a journal entry"""

    HAPPY = "happy"
    SAD = "sad"
    ANXIOUS = "anxious"
    CALM = "calm"
    STRESSED = "stressed"
    NEUTRAL = "neutral"

    @classmethod
    def parse(cls, value: "str | Mood | None") -> "Mood | None":
        """
        Convert a raw mood value into a Mood.

        Empty values mean "no mood". Unknown values raise ValueError.
        """
        if value is None or isinstance(value, Mood):
            return value
        value = value.strip().lower()
        if not value:
            return None
        return cls(value)


@dataclass(frozen=True)
class MoodConfig:
    """Display information for a mood"""

    value: Mood
    label: str
    emoji: str
    color: str
    description: str


MOODS: list[MoodConfig] = [
    MoodConfig(Mood.HAPPY, "Happy", "😊", "#10B981", "Feeling joyful and content"),
    MoodConfig(Mood.SAD, "Sad", "😢", "#3B82F6", "Feeling down or melancholic"),
    MoodConfig(Mood.ANXIOUS, "Anxious", "😰", "#F59E0B", "Feeling worried or uneasy"),
    MoodConfig(Mood.CALM, "Calm", "😌", "#8B5CF6", "Feeling peaceful and relaxed"),
    MoodConfig(
        Mood.STRESSED, "Stressed", "😫", "#EF4444", "Feeling overwhelmed or pressured"
    ),
    MoodConfig(
        Mood.NEUTRAL, "Neutral", "😐", "#6B7280", "Feeling neither positive nor negative"
    ),
]

DEFAULT_MOOD_COLOR: str = "#6B7280"

_MOODS_BY_VALUE: dict[Mood, MoodConfig] = {config.value: config for config in MOODS}


def mood_config(mood: Mood | None) -> MoodConfig | None:
    """Get the display configuration of a mood, None when no mood is set"""
    if mood is None:
        return None
    return _MOODS_BY_VALUE.get(mood)


def mood_label(mood: Mood | None) -> str:
    config = mood_config(mood)
    return config.label if config else ""


def mood_emoji(mood: Mood | None) -> str:
    config = mood_config(mood)
    return config.emoji if config else ""


def mood_color(mood: Mood | None) -> str:
    config = mood_config(mood)
    return config.color if config else DEFAULT_MOOD_COLOR
