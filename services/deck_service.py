"""
Deck Service - Business logic for the deck hierarchy.

This module contains all the business logic for working with decks including:
- Creating top-level decks and sub-decks (one level of nesting)
- Renaming, moving and deleting decks
- Hierarchical listings
- Read-time derivation of the cards in a deck

Hierarchy invariants are enforced here rather than by callers: violations
raise InvalidOperationError and unknown ids raise NotFoundError. Mutations that
touch several decks or cards build the complete next state and commit it with
a single ``replace_all`` per repository.
"""

import dataclasses

from loguru import logger

from models.card import Card
from models.deck import Deck
from repositories.card_repository import CardRepository, get_card_repository
from repositories.deck_repository import DeckRepository, get_deck_repository
from utils.errors import InvalidOperationError, NotFoundError, ValidationError
from utils.service_config import UNCATEGORIZED_DECK_NAME
from utils.text import clean_text, word_key


class DeckService:
    """Service for deck-related business logic."""

    def __init__(
        self,
        deck_repository: DeckRepository | None = None,
        card_repository: CardRepository | None = None,
    ):
        """
        Initialize the deck service.

        Args:
            deck_repository: DeckRepository instance
            card_repository: CardRepository instance
        """
        self.deck_repo = deck_repository or get_deck_repository()
        self.card_repo = card_repository or get_card_repository()

    # ============= Lookups =============

    def get_deck(self, deck_id: str) -> Deck:
        deck = self.deck_repo.get(deck_id)
        if deck is None:
            raise NotFoundError(f"Deck {deck_id} not found")
        return deck

    def find_by_name(self, name: str) -> Deck | None:
        """Return the first deck whose name matches (case-insensitive)."""
        key = word_key(name)
        for deck in self.deck_repo.get_all():
            if word_key(deck.name) == key:
                return deck
        return None

    def get_or_create_by_name(self, name: str) -> Deck:
        return self.find_by_name(name) or self.create_deck(name)

    # ============= Hierarchy Listings =============

    def get_top_level_decks(self) -> list[Deck]:
        return [deck for deck in self.deck_repo.get_all() if deck.parent_id is None]

    def get_sub_decks(self, parent_id: str) -> list[Deck]:
        return [deck for deck in self.deck_repo.get_all() if deck.parent_id == parent_id]

    def get_all_decks_hierarchical(self) -> list[Deck]:
        """Top-level decks in insertion order, each followed by its sub-decks."""
        ordered: list[Deck] = []
        for deck in self.get_top_level_decks():
            ordered.append(deck)
            ordered.extend(self.get_sub_decks(deck.id))
        return ordered

    def get_selectable_decks(self) -> list[Deck]:
        """Hierarchical listing without reserved decks."""
        return [deck for deck in self.get_all_decks_hierarchical() if not deck.is_reserved]

    # ============= Card Membership =============

    def get_cards_in_deck(self, deck_id: str) -> list[Card]:
        """
        Cards that belong to a deck, derived from card memberships on each call.

        The reserved deck lists every card without a deck assignment.
        """
        deck = self.get_deck(deck_id)
        cards = self.card_repo.get_all()
        if deck.is_reserved:
            return [card for card in cards if not card.deck_ids]
        return [card for card in cards if deck_id in card.deck_ids]

    def get_total_cards_in_deck_hierarchy(self, deck_id: str) -> int:
        """Number of distinct cards in a deck and its sub-decks."""
        return len(self.get_cards_in_hierarchy([deck_id]))

    def get_cards_in_hierarchy(self, deck_ids: list[str]) -> list[Card]:
        """Distinct cards in the given decks and their sub-decks, in store order."""
        wanted: set[str] = set()
        include_unassigned = False
        for deck_id in deck_ids:
            deck = self.get_deck(deck_id)
            include_unassigned = include_unassigned or deck.is_reserved
            wanted.add(deck.id)
            wanted |= deck.sub_deck_ids
        return [
            card
            for card in self.card_repo.get_all()
            if card.deck_ids & wanted or (include_unassigned and not card.deck_ids)
        ]

    # ============= Mutations =============

    def create_deck(self, name: str) -> Deck:
        """Create a top-level deck."""
        deck = Deck(name=self._validate_name(name))
        self.deck_repo.add(deck)
        logger.info(f"Created deck '{deck.name}'")
        return deck

    def create_sub_deck(self, name: str, parent_id: str) -> Deck:
        """
        Create a deck nested under a top-level deck.

        Raises:
            InvalidOperationError: If the parent is a sub-deck or reserved
        """
        parent = self._require_parent(parent_id)
        deck = Deck(name=self._validate_name(name), parent_id=parent.id)
        updated_parent = dataclasses.replace(parent, sub_deck_ids=parent.sub_deck_ids | {deck.id})
        decks = [updated_parent if d.id == parent.id else d for d in self.deck_repo.get_all()]
        self.deck_repo.replace_all([*decks, deck])
        logger.info(f"Created sub-deck '{deck.name}' under '{parent.name}'")
        return deck

    def rename_deck(self, deck_id: str, new_name: str) -> Deck:
        deck = self._require_editable(deck_id)
        renamed = dataclasses.replace(deck, name=self._validate_name(new_name))
        self.deck_repo.replace_all(
            [renamed if d.id == deck_id else d for d in self.deck_repo.get_all()]
        )
        logger.info(f"Renamed deck '{deck.name}' to '{renamed.name}'")
        return renamed

    def move_deck(self, deck_id: str, new_parent_id: str | None) -> Deck:
        """
        Re-parent a deck; ``None`` makes it a top-level deck.

        The old parent, the new parent and the deck are updated in one commit.

        Raises:
            InvalidOperationError: If the move would nest more than one level,
                targets the deck itself, or involves a reserved deck
        """
        deck = self._require_editable(deck_id)
        new_parent: Deck | None = None
        if new_parent_id is not None:
            if new_parent_id == deck_id:
                raise InvalidOperationError("A deck cannot be moved under itself")
            new_parent = self._require_parent(new_parent_id)
            if deck.sub_deck_ids:
                raise InvalidOperationError(
                    f"Deck '{deck.name}' has sub-decks and cannot become a sub-deck"
                )

        if deck.parent_id == new_parent_id:
            logger.debug(f"Deck '{deck.name}' already has the requested parent")
            return deck

        moved = dataclasses.replace(deck, parent_id=new_parent_id)
        decks: list[Deck] = []
        for current in self.deck_repo.get_all():
            if current.id == deck_id:
                continue
            if current.id == deck.parent_id:
                current = dataclasses.replace(
                    current, sub_deck_ids=current.sub_deck_ids - {deck_id}
                )
            if new_parent is not None and current.id == new_parent.id:
                current = dataclasses.replace(
                    current, sub_deck_ids=current.sub_deck_ids | {deck_id}
                )
                # A moved deck is listed first under its new parent
                decks.extend([current, moved])
                continue
            decks.append(current)
        if new_parent is None:
            decks.append(moved)
        self.deck_repo.replace_all(decks)
        target = new_parent.name if new_parent else "top level"
        logger.info(f"Moved deck '{deck.name}' to {target}")
        return moved

    def delete_deck(self, deck_id: str, from_all_decks: bool = False) -> int:
        """
        Delete a deck together with its sub-decks.

        Args:
            deck_id: Deck to delete
            from_all_decks: When True the member cards are deleted from the store;
                otherwise they are only unlinked from the deleted decks

        Returns:
            Number of cards affected (unlinked or deleted)
        """
        deck = self._require_editable(deck_id)
        removed_ids = {deck.id} | deck.sub_deck_ids

        decks: list[Deck] = []
        for current in self.deck_repo.get_all():
            if current.id in removed_ids:
                continue
            if current.id == deck.parent_id:
                current = dataclasses.replace(
                    current, sub_deck_ids=current.sub_deck_ids - removed_ids
                )
            decks.append(current)

        cards: list[Card] = []
        affected = 0
        for card in self.card_repo.get_all():
            if not card.deck_ids & removed_ids:
                cards.append(card)
                continue
            affected += 1
            if not from_all_decks:
                cards.append(dataclasses.replace(card, deck_ids=card.deck_ids - removed_ids))

        self.card_repo.replace_all(cards)
        self.deck_repo.replace_all(decks)
        action = "deleted" if from_all_decks else "unlinked"
        logger.info(f"Deleted deck '{deck.name}' ({len(removed_ids)} deck(s), {affected} card(s) {action})")
        return affected

    # ============= Private Helper Methods =============

    def _validate_name(self, name: str) -> str:
        cleaned = clean_text(name)
        if not cleaned:
            raise ValidationError("Deck name is required")
        if word_key(cleaned) == word_key(UNCATEGORIZED_DECK_NAME):
            raise InvalidOperationError(f"'{UNCATEGORIZED_DECK_NAME}' is a reserved deck name")
        return cleaned

    def _require_editable(self, deck_id: str) -> Deck:
        deck = self.get_deck(deck_id)
        if deck.is_reserved:
            raise InvalidOperationError(f"Deck '{deck.name}' is reserved and cannot be changed")
        return deck

    def _require_parent(self, parent_id: str) -> Deck:
        parent = self.get_deck(parent_id)
        if parent.is_reserved:
            raise InvalidOperationError(f"Deck '{parent.name}' cannot hold sub-decks")
        if parent.is_sub_deck:
            raise InvalidOperationError(
                f"Deck '{parent.name}' is a sub-deck; only one level of nesting is allowed"
            )
        return parent


__all__ = [
    "DeckService",
]
