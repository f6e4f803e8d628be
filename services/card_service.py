"""
Card Service - Business logic for the card store.

This module contains:
- Card validation (required fields, articles)
- Adding, editing and deleting cards
- Deck membership sanitizing
- Study statistics (shown/correct counters, known/unknown status)
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable
from enum import Enum

from loguru import logger

from models.card import Card, CardFields
from repositories.card_repository import CardRepository, get_card_repository
from repositories.deck_repository import DeckRepository, get_deck_repository
from utils.errors import NotFoundError, ValidationError
from utils.text import normalize_article, word_key


class CardStatus(str, Enum):
    KNOWN = "known"
    UNKNOWN = "unknown"


def validate_fields(fields: CardFields) -> CardFields:
    """
    Trim fields and check the required ones.

    Raises:
        ValidationError: If word or definition is empty, or the article is invalid
    """
    trimmed = fields.trimmed()
    if not trimmed.word:
        raise ValidationError("Word is required")
    if not trimmed.definition:
        raise ValidationError("Definition is required")
    return dataclasses.replace(trimmed, article=normalize_article(trimmed.article))


class CardService:
    """Service for card-related business logic."""

    def __init__(
        self,
        card_repository: CardRepository | None = None,
        deck_repository: DeckRepository | None = None,
    ):
        """
        Initialize the card service.

        Args:
            card_repository: CardRepository instance
            deck_repository: DeckRepository instance, used to validate memberships
        """
        self.card_repo = card_repository or get_card_repository()
        self.deck_repo = deck_repository or get_deck_repository()

    # ============= Lookups =============

    def get_card(self, card_id: str) -> Card:
        card = self.card_repo.get(card_id)
        if card is None:
            raise NotFoundError(f"Card {card_id} not found")
        return card

    def search(self, query: str) -> list[Card]:
        """Cards whose word or definition contains ``query`` (case-insensitive)."""
        needle = word_key(query)
        if not needle:
            return self.card_repo.get_all()
        return [
            card
            for card in self.card_repo.get_all()
            if needle in word_key(card.word) or needle in word_key(card.definition)
        ]

    def sanitize_deck_ids(self, deck_ids: Iterable[str]) -> set[str]:
        """
        Resolve a requested membership set.

        The reserved deck is implied by an empty membership, so its id is dropped.

        Raises:
            NotFoundError: If a deck id does not exist
        """
        requested = {str(deck_id) for deck_id in deck_ids}
        unknown = requested - self.deck_repo.ids()
        if unknown:
            raise NotFoundError(f"Unknown deck id(s): {', '.join(sorted(unknown))}")
        return requested - self.deck_repo.reserved_ids()

    # ============= Mutations =============

    def add_card(self, fields: CardFields, deck_ids: Iterable[str] = ()) -> Card:
        """
        Validate and append a new card.

        Args:
            fields: Submitted card content
            deck_ids: Decks the card belongs to (empty = Uncategorized)

        Returns:
            The stored card
        """
        clean = validate_fields(fields)
        card = Card(**dataclasses.asdict(clean), deck_ids=self.sanitize_deck_ids(deck_ids))
        self.card_repo.add(card)
        logger.info(f"Added card '{card.word}' to {len(card.deck_ids) or 'no'} deck(s)")
        return card

    def update_card(
        self,
        card_id: str,
        fields: CardFields,
        deck_ids: Iterable[str] | None = None,
    ) -> Card:
        """
        Replace a card's content, and optionally its membership.

        Identity and statistics are preserved.
        """
        existing = self.get_card(card_id)
        clean = validate_fields(fields)
        membership = existing.deck_ids if deck_ids is None else self.sanitize_deck_ids(deck_ids)
        updated = dataclasses.replace(existing, **dataclasses.asdict(clean), deck_ids=set(membership))
        self.card_repo.replace(updated)
        logger.info(f"Updated card '{updated.word}'")
        return updated

    def delete_card(self, card_id: str, deck_id: str | None = None) -> Card | None:
        """
        Delete a card from one deck, or from every deck and the store.

        Args:
            card_id: Card to delete
            deck_id: When given, only this membership is removed

        Returns:
            The updated card when unlinked from one deck, None when deleted
        """
        card = self.get_card(card_id)
        if deck_id is None:
            self.card_repo.remove(card_id)
            logger.info(f"Deleted card '{card.word}'")
            return None
        updated = dataclasses.replace(card, deck_ids=card.deck_ids - {deck_id})
        self.card_repo.replace(updated)
        logger.info(f"Removed card '{card.word}' from deck {deck_id}")
        return updated

    # ============= Statistics =============

    def record_card_shown(self, card_id: str, is_correct: bool) -> Card:
        card = self.get_card(card_id)
        updated = dataclasses.replace(
            card,
            times_shown=card.times_shown + 1,
            times_correct=card.times_correct + (1 if is_correct else 0),
        )
        self.card_repo.replace(updated)
        return updated

    def set_card_status(self, card_id: str, status: CardStatus | str) -> Card:
        """Known answers grow the success streak; unknown answers reset it."""
        card = self.get_card(card_id)
        status = CardStatus(status)
        success_count = card.success_count + 1 if status is CardStatus.KNOWN else 0
        updated = dataclasses.replace(card, success_count=success_count)
        self.card_repo.replace(updated)
        return updated


__all__ = [
    "CardService",
    "CardStatus",
    "validate_fields",
]
