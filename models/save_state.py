"""Save-state models for resumable game sessions."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from models.card import new_id


class GameType(str, Enum):
    """Games whose progress can be saved and resumed."""

    STUDY = "study"
    TEST = "test"
    MEMORY_GAME = "memory_game"
    TRUE_FALSE = "true_false"
    HANGMAN = "hangman"
    DEHET = "dehet"
    LOOK_COVER_CHECK = "look_cover_check"
    WRITING = "writing"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    GameType.STUDY: "Study Cards",
    GameType.TEST: "Test Mode",
    GameType.MEMORY_GAME: "Memory Game",
    GameType.TRUE_FALSE: "True or False",
    GameType.HANGMAN: "Hangman",
    GameType.DEHET: "de of het",
    GameType.LOOK_COVER_CHECK: "Look Cover Check",
    GameType.WRITING: "Write Your Card",
}


SaveStateKey = tuple[GameType, tuple[str, ...]]


def save_state_key(game_type: GameType | str, deck_ids: Iterable[str]) -> SaveStateKey:
    """Lookup key for a save state; deck id order and repeats do not matter."""
    return GameType(game_type), tuple(sorted({str(deck_id) for deck_id in deck_ids}))


@dataclass
class GameProgress:
    """
    In-progress session data for one game.

    ``outcome_sets`` maps an outcome name (``known``, ``unknown``, ``incorrect``...)
    to the card ids that reached it; ``card_order`` is the shuffled order the
    session presents cards in. Anything game-specific goes in ``extras``.
    """

    current_index: int = 0
    counters: dict[str, int] = field(default_factory=dict)
    outcome_sets: dict[str, set[str]] = field(default_factory=dict)
    card_order: list[str] = field(default_factory=list)
    extras: dict[str, Any] = field(default_factory=dict)

    def referenced_card_ids(self) -> set[str]:
        ids = set(self.card_order)
        for members in self.outcome_sets.values():
            ids |= members
        return ids

    def to_dict(self) -> dict[str, Any]:
        return {
            "current_index": self.current_index,
            "counters": dict(self.counters),
            "outcome_sets": {name: sorted(ids) for name, ids in self.outcome_sets.items()},
            "card_order": list(self.card_order),
            "extras": dict(self.extras),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GameProgress:
        return cls(
            current_index=int(data.get("current_index") or 0),
            counters={str(k): int(v) for k, v in (data.get("counters") or {}).items()},
            outcome_sets={
                str(name): {str(card_id) for card_id in ids}
                for name, ids in (data.get("outcome_sets") or {}).items()
            },
            card_order=[str(card_id) for card_id in data.get("card_order") or []],
            extras=dict(data.get("extras") or {}),
        )


@dataclass
class GameSaveState:
    """A persisted snapshot of one game's progress over a set of decks."""

    game_type: GameType
    deck_ids: tuple[str, ...]
    progress: GameProgress
    saved_at: datetime = field(default_factory=datetime.now)
    id: str = field(default_factory=new_id)

    @property
    def key(self) -> SaveStateKey:
        return save_state_key(self.game_type, self.deck_ids)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "game_type": self.game_type.value,
            "deck_ids": list(self.deck_ids),
            "saved_at": self.saved_at.isoformat(),
            "payload": self.progress.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GameSaveState:
        """
        Raises:
            KeyError/ValueError/TypeError: If the entry is malformed
        """
        game_type, deck_ids = save_state_key(data["game_type"], data.get("deck_ids") or [])
        return cls(
            id=str(data.get("id") or new_id()),
            game_type=game_type,
            deck_ids=deck_ids,
            progress=GameProgress.from_dict(data["payload"]),
            saved_at=datetime.fromisoformat(data["saved_at"]),
        )


__all__ = ["GameProgress", "GameSaveState", "GameType", "SaveStateKey", "save_state_key"]
