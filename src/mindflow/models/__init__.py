"""The models used to represent journal data at a high level"""

__all__ = [
    "Entry",
    "Mood",
    "MoodConfig",
    "MOODS",
    "mood_config",
]

from .entry import Entry
from .mood import MOODS, Mood, MoodConfig, mood_config
