"""
Save State Repository - Persistence for resumable game sessions.

Holds every GameSaveState in memory (most recent first) and persists the
collection as a single JSON snapshot.
"""

from pathlib import Path
from typing import Any

from loguru import logger

from models.save_state import GameSaveState, SaveStateKey
from services.store_service import StoreService, get_store_service
from utils.constants import SAVE_STATES_STORE


class SaveStateRepository:
    """Repository for game save states keyed by (game type, sorted deck ids)."""

    def __init__(
        self,
        store_path: Path | None = None,
        store_service: StoreService | None = None,
    ):
        self.store_path = store_path or SAVE_STATES_STORE
        self._store = store_service or get_store_service()
        self._states: list[GameSaveState] = []

    def get_all(self) -> list[GameSaveState]:
        """Return all save states, most recent first."""
        return list(self._states)

    def find(self, key: SaveStateKey) -> GameSaveState | None:
        for state in self._states:
            if state.key == key:
                return state
        return None

    def replace_all(self, states: list[GameSaveState]) -> None:
        self._states = sorted(states, key=lambda state: state.saved_at, reverse=True)

    def load(self) -> int:
        """
        Load save states from disk. Corrupt entries are skipped.

        Returns:
            Number of save states loaded
        """
        data = self._store.load_store(self.store_path)
        states: dict[SaveStateKey, GameSaveState] = {}
        for entry in data.get("save_states", []):
            if not isinstance(entry, dict):
                continue
            try:
                state = GameSaveState.from_dict(entry)
            except (KeyError, TypeError, ValueError, AttributeError) as exc:
                logger.warning(f"Skipping corrupt save state in {self.store_path}: {exc}")
                continue
            current = states.get(state.key)
            if current is None or state.saved_at > current.saved_at:
                states[state.key] = state
        self.replace_all(list(states.values()))
        logger.debug(f"Loaded {len(self._states)} save states from {self.store_path}")
        return len(self._states)

    def save(self) -> bool:
        payload: dict[str, Any] = {"save_states": [state.to_dict() for state in self._states]}
        return self._store.save_store(self.store_path, payload)


# Global instance for backward compatibility
_default_repository = None


def get_save_state_repository() -> SaveStateRepository:
    """Get the default save state repository instance."""
    global _default_repository
    if _default_repository is None:
        _default_repository = SaveStateRepository()
    return _default_repository


def reset_save_state_repository() -> None:
    """Reset the global save state repository instance."""
    global _default_repository
    _default_repository = None
