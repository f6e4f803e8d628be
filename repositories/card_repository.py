"""
Card Repository - Data access layer for the card store.

This module handles:
- The ordered in-memory collection of cards (creation order)
- Whole-collection commits
- JSON snapshot persistence
"""

from pathlib import Path
from typing import Any

from loguru import logger

from models.card import Card
from services.store_service import StoreService, get_store_service
from utils.constants import CARDS_STORE


class CardRepository:
    """Repository for card data access and in-memory card state."""

    def __init__(
        self,
        store_path: Path | None = None,
        store_service: StoreService | None = None,
    ):
        """
        Initialize the card repository.

        Args:
            store_path: JSON file holding the card snapshot (defaults to CARDS_STORE)
            store_service: StoreService used for reading/writing snapshots
        """
        self.store_path = store_path or CARDS_STORE
        self._store = store_service or get_store_service()
        self._cards: list[Card] = []

    # ============= Reads =============

    def get_all(self) -> list[Card]:
        """Return all cards in creation order."""
        return list(self._cards)

    def get(self, card_id: str) -> Card | None:
        for card in self._cards:
            if card.id == card_id:
                return card
        return None

    def ids(self) -> set[str]:
        return {card.id for card in self._cards}

    def count(self) -> int:
        return len(self._cards)

    # ============= Writes =============

    def add(self, card: Card) -> Card:
        """Append a new card to the store."""
        if self.get(card.id) is not None:
            raise ValueError(f"Card {card.id} already exists")
        self._cards = [*self._cards, card]
        return card

    def replace(self, card: Card) -> bool:
        """
        Replace the stored card that has the same id, keeping its position.

        Returns:
            True if a card was replaced, False if the id is unknown
        """
        for index, existing in enumerate(self._cards):
            if existing.id == card.id:
                updated = list(self._cards)
                updated[index] = card
                self._cards = updated
                return True
        return False

    def remove(self, card_id: str) -> bool:
        remaining = [card for card in self._cards if card.id != card_id]
        if len(remaining) == len(self._cards):
            return False
        self._cards = remaining
        return True

    def replace_all(self, cards: list[Card]) -> None:
        """Commit a complete new card list in one step."""
        self._cards = list(cards)

    # ============= Persistence =============

    def load(self) -> int:
        """
        Load the card snapshot from disk, skipping malformed entries.

        Returns:
            Number of cards loaded
        """
        data = self._store.load_store(self.store_path)
        cards: list[Card] = []
        seen: set[str] = set()
        for entry in data.get("cards", []):
            if not isinstance(entry, dict):
                continue
            try:
                card = Card.from_dict(entry)
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning(f"Skipping malformed card entry in {self.store_path}: {exc}")
                continue
            if card.id in seen:
                logger.warning(f"Skipping duplicate card id {card.id}")
                continue
            seen.add(card.id)
            cards.append(card)
        self._cards = cards
        logger.debug(f"Loaded {len(cards)} cards from {self.store_path}")
        return len(cards)

    def save(self) -> bool:
        payload: dict[str, Any] = {"cards": [card.to_dict() for card in self._cards]}
        saved = self._store.save_store(self.store_path, payload)
        if saved:
            logger.debug(f"Saved {len(self._cards)} cards to {self.store_path}")
        return saved


# Global instance for backward compatibility
_default_repository = None


def get_card_repository() -> CardRepository:
    """Get the default card repository instance."""
    global _default_repository
    if _default_repository is None:
        _default_repository = CardRepository()
    return _default_repository


def reset_card_repository() -> None:
    """
    Reset the global card repository instance.

    This is primarily useful for testing to ensure test isolation
    and prevent state leakage between tests.
    """
    global _default_repository
    _default_repository = None
