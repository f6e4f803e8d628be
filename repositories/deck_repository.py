"""
Deck Repository - Centralized data access layer for deck operations.

This module handles:
- The in-memory deck list (insertion order)
- The reserved "Uncategorized" deck
- Whole-collection commits
- JSON snapshot persistence
"""

from pathlib import Path
from typing import Any

from loguru import logger

from models.deck import Deck
from services.store_service import StoreService, get_store_service
from utils.constants import DECKS_STORE
from utils.service_config import UNCATEGORIZED_DECK_NAME


class DeckRepository:
    """Repository for deck data access operations and deck state management."""

    def __init__(
        self,
        store_path: Path | None = None,
        store_service: StoreService | None = None,
    ):
        """
        Initialize the deck repository.

        Args:
            store_path: JSON file holding the deck snapshot (defaults to DECKS_STORE)
            store_service: StoreService used for reading/writing snapshots
        """
        self.store_path = store_path or DECKS_STORE
        self._store = store_service or get_store_service()
        self._decks: list[Deck] = []
        self.ensure_reserved_decks()

    # ============= Reads =============

    def get_all(self) -> list[Deck]:
        """Return all decks in insertion order."""
        return list(self._decks)

    def get(self, deck_id: str) -> Deck | None:
        for deck in self._decks:
            if deck.id == deck_id:
                return deck
        return None

    def ids(self) -> set[str]:
        return {deck.id for deck in self._decks}

    def reserved_ids(self) -> set[str]:
        return {deck.id for deck in self._decks if deck.is_reserved}

    def get_uncategorized(self) -> Deck:
        for deck in self._decks:
            if deck.is_reserved and deck.name == UNCATEGORIZED_DECK_NAME:
                return deck
        return self.ensure_reserved_decks()

    # ============= Writes =============

    def add(self, deck: Deck) -> Deck:
        if self.get(deck.id) is not None:
            raise ValueError(f"Deck {deck.id} already exists")
        self._decks = [*self._decks, deck]
        return deck

    def replace_all(self, decks: list[Deck]) -> None:
        """Commit a complete new deck list in one step."""
        self._decks = list(decks)
        self.ensure_reserved_decks()

    def ensure_reserved_decks(self) -> Deck:
        """
        Make sure the reserved "Uncategorized" deck exists.

        A legacy deck carrying the reserved name is promoted in place so its id
        (and any references to it) survive.

        Returns:
            The reserved deck
        """
        for index, deck in enumerate(self._decks):
            if deck.name == UNCATEGORIZED_DECK_NAME and deck.parent_id is None:
                if deck.is_editable:
                    promoted = Deck(
                        id=deck.id,
                        name=deck.name,
                        is_editable=False,
                        created_at=deck.created_at,
                    )
                    decks = list(self._decks)
                    decks[index] = promoted
                    self._decks = decks
                    return promoted
                return deck

        reserved = Deck(name=UNCATEGORIZED_DECK_NAME, is_editable=False)
        self._decks = [*self._decks, reserved]
        logger.debug(f"Created reserved deck '{UNCATEGORIZED_DECK_NAME}'")
        return reserved

    # ============= Persistence =============

    def load(self) -> int:
        """
        Load the deck snapshot from disk.

        Malformed entries are skipped and child links that point at missing
        decks are dropped so the hierarchy stays consistent.

        Returns:
            Number of decks loaded (including the reserved deck)
        """
        data = self._store.load_store(self.store_path)
        decks: list[Deck] = []
        for entry in data.get("decks", []):
            if not isinstance(entry, dict):
                continue
            try:
                deck = Deck.from_dict(entry)
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning(f"Skipping malformed deck entry in {self.store_path}: {exc}")
                continue
            if not deck.name:
                logger.warning(f"Skipping deck {deck.id} with an empty name")
                continue
            decks.append(deck)

        self._decks = decks
        self.ensure_reserved_decks()
        decks = self._decks
        by_id = {deck.id: deck for deck in decks}
        for deck in decks:
            parent = by_id.get(deck.parent_id) if deck.parent_id else None
            if deck.parent_id is not None and (
                parent is None or parent.parent_id is not None or parent.is_reserved
            ):
                logger.warning(f"Deck '{deck.name}' has an invalid parent; moving to top level")
                deck.parent_id = None
        # Child sets are rebuilt from parent links
        for deck in decks:
            deck.sub_deck_ids = {
                child.id for child in decks if child.parent_id == deck.id
            }

        logger.debug(f"Loaded {len(self._decks)} decks from {self.store_path}")
        return len(self._decks)

    def save(self) -> bool:
        payload: dict[str, Any] = {"decks": [deck.to_dict() for deck in self._decks]}
        return self._store.save_store(self.store_path, payload)


# Global instance for backward compatibility
_default_repository = None


def get_deck_repository() -> DeckRepository:
    """Get the default deck repository instance."""
    global _default_repository
    if _default_repository is None:
        _default_repository = DeckRepository()
    return _default_repository


def reset_deck_repository() -> None:
    """
    Reset the global deck repository instance.

    This is primarily useful for testing to ensure test isolation
    and prevent state leakage between tests.
    """
    global _default_repository
    _default_repository = None
