"""
Contains the configuration options for the MindFlow search application
"""

import json
import logging
import os
from pathlib import Path

from pydantic import ValidationError
from pydantic_settings import BaseSettings

USERPROFILE: Path = Path(os.getenv("userprofile", os.getenv("HOME", "")))
BASE_FOLDER: Path = (USERPROFILE / ".mindflow").resolve()
SETTINGS_FILE_PATH: Path = BASE_FOLDER / "config.json"

BASE_FOLDER.mkdir(parents=True, exist_ok=True)


class Settings(BaseSettings):
    """Settings class for the MindFlow search application"""

    DATA_DIR_PATH: Path = BASE_FOLDER / "data"
    ENTRIES_DB_PATH: Path = DATA_DIR_PATH / "entries.db"
    RECENT_SEARCHES_PATH: Path = DATA_DIR_PATH / "recent_searches.msgpack"
    LOGGING_DIR_PATH: Path = DATA_DIR_PATH / "logging"

    # Identity used when the app runs against the local entry store
    LOCAL_USER_ID: str = "local-user"

    # Search
    SEARCH_PAGE_SIZE: int = 20
    SEARCH_PREVIEW_LENGTH: int = 250
    SEARCH_DEBOUNCE_MS: int = 300
    SEARCH_TIMEOUT_MS: int = 10_000
    SEARCH_PREFIX_MIN_LENGTH: int = 3
    SEARCH_SNIPPET_LENGTH: int = 100
    SEARCH_MAX_SNIPPETS: int = 3
    RECENT_SEARCHES_MAX: int = 10

    @classmethod
    def load_from_file(cls, path: Path) -> "Settings":
        """Loads settings from a JSON file."""
        if not path.exists():
            return cls()  # Return default

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            return cls(**data)
        except (json.JSONDecodeError, ValidationError) as e:
            logging.getLogger("Config").error("Error loading settings: %s", e)
            return cls()  # Return defaults


settings = Settings.load_from_file(Path(SETTINGS_FILE_PATH))
