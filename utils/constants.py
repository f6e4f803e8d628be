"""Constants file."""

import os
import sys
from pathlib import Path

APP_NAME = "Dutch Flashcards"


def _default_base_dir() -> Path:
    """Return the writable base directory for config/data/logging."""
    override = os.getenv("FLASHCARDS_DATA_DIR")
    if override:
        return Path(override).expanduser()
    if getattr(sys, "frozen", False):
        local_appdata = os.getenv("LOCALAPPDATA")
        if local_appdata:
            return Path(local_appdata) / APP_NAME
    # user data never lives beside the installed package
    return Path.home() / ".dutch_flashcards"


BASE_DATA_DIR = _default_base_dir()
CONFIG_DIR = BASE_DATA_DIR / "config"
DATA_DIR = BASE_DATA_DIR / "data"
LOGS_DIR = BASE_DATA_DIR / "logs"


def ensure_base_dirs() -> None:
    """Ensure base config/data/log directories exist without importing side effects."""
    BASE_DATA_DIR.mkdir(parents=True, exist_ok=True)
    for path in (CONFIG_DIR, DATA_DIR, LOGS_DIR):
        path.mkdir(parents=True, exist_ok=True)


SETTINGS_FILE = CONFIG_DIR / "settings.json"

CARDS_STORE = DATA_DIR / "cards.json"
DECKS_STORE = DATA_DIR / "decks.json"
SAVE_STATES_STORE = DATA_DIR / "save_states.json"

__all__ = [
    "APP_NAME",
    "BASE_DATA_DIR",
    "CONFIG_DIR",
    "DATA_DIR",
    "LOGS_DIR",
    "SETTINGS_FILE",
    "CARDS_STORE",
    "DECKS_STORE",
    "SAVE_STATES_STORE",
    "ensure_base_dirs",
]
