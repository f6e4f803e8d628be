from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from loguru import logger

from services.merge_service import MergeStrategy
from utils.constants import SETTINGS_FILE
from utils.service_config import (
    DEFAULT_MAX_SAVE_STATES,
    DEFAULT_MERGE_STRATEGY,
    DEFAULT_SAVE_STATE_MAX_AGE_DAYS,
    MAX_SAVE_STATES,
    MIN_SAVE_STATES,
    SAVE_STATE_MAX_AGE_DAYS,
    SAVE_STATE_MIN_AGE_DAYS,
)


@dataclass
class LibrarySettings:
    """User preferences for the flashcard library."""

    default_merge_strategy: MergeStrategy = MergeStrategy(DEFAULT_MERGE_STRATEGY)
    max_save_states: int = DEFAULT_MAX_SAVE_STATES
    save_state_max_age_days: int = DEFAULT_SAVE_STATE_MAX_AGE_DAYS
    auto_clear_old_save_states: bool = True


class StateService:
    """Loads library settings."""

    def __init__(self, settings_path: Path | None = None) -> None:
        self.settings_path = settings_path or SETTINGS_FILE
        self._settings: LibrarySettings | None = None

    def load(self) -> dict[str, Any]:
        if not self.settings_path.exists():
            return {}
        try:
            with self.settings_path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (json.JSONDecodeError, OSError) as exc:
            logger.warning(f"Failed to load library settings: {exc}")
            return {}
        return data if isinstance(data, dict) else {}

    @staticmethod
    def coerce_bool(value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.strip().lower() in {"1", "true", "yes", "on"}
        return bool(value)

    @staticmethod
    def clamp_int(value: Any, *, default: int, min_value: int, max_value: int) -> int:
        try:
            number = int(float(value))
        except (TypeError, ValueError):
            number = default
        return max(min_value, min(number, max_value))

    @staticmethod
    def coerce_merge_strategy(value: Any) -> MergeStrategy:
        try:
            return MergeStrategy(value)
        except ValueError:
            return MergeStrategy(DEFAULT_MERGE_STRATEGY)

    def build_settings(self, settings: dict[str, Any]) -> LibrarySettings:
        """Build runtime settings from persisted preferences; missing keys take defaults."""
        state = LibrarySettings(
            default_merge_strategy=self.coerce_merge_strategy(
                settings.get("default_merge_strategy", DEFAULT_MERGE_STRATEGY)
            ),
            max_save_states=self.clamp_int(
                settings.get("max_save_states", DEFAULT_MAX_SAVE_STATES),
                default=DEFAULT_MAX_SAVE_STATES,
                min_value=MIN_SAVE_STATES,
                max_value=MAX_SAVE_STATES,
            ),
            save_state_max_age_days=self.clamp_int(
                settings.get("save_state_max_age_days", DEFAULT_SAVE_STATE_MAX_AGE_DAYS),
                default=DEFAULT_SAVE_STATE_MAX_AGE_DAYS,
                min_value=SAVE_STATE_MIN_AGE_DAYS,
                max_value=SAVE_STATE_MAX_AGE_DAYS,
            ),
            auto_clear_old_save_states=self.coerce_bool(
                settings.get("auto_clear_old_save_states", True)
            ),
        )
        self._settings = state
        return state

    def get_settings(self) -> LibrarySettings:
        if self._settings is None:
            self._settings = self.build_settings(self.load())
        return self._settings


__all__ = ["LibrarySettings", "StateService"]
