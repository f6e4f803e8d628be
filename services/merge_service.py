"""
Merge Service - Reconciles a duplicate submission with the existing card.

Membership is always additive: the merged card belongs to every deck the
existing card was in plus the decks the submission targeted. Scalar fields
follow the chosen MergeStrategy.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable
from enum import Enum

from loguru import logger

from models.card import SECONDARY_FIELDS, Card, CardFields
from repositories.card_repository import CardRepository, get_card_repository
from repositories.deck_repository import DeckRepository, get_deck_repository
from utils.errors import NotFoundError


class MergeStrategy(str, Enum):
    KEEP_EXISTING = "keep_existing"
    REPLACE_WITH_NEW = "replace_with_new"
    MERGE_ADDITIONAL_FIELDS = "merge_additional_fields"


def _merged_fields(existing: Card, candidate: CardFields, strategy: MergeStrategy) -> dict[str, str]:
    current = existing.fields()
    updates: dict[str, str] = {}
    for name in SECONDARY_FIELDS:
        old_value = current.get(name)
        new_value = candidate.get(name)
        if strategy is MergeStrategy.REPLACE_WITH_NEW:
            # definition is required, an empty submission never clears it
            if name == "definition" and not new_value:
                updates[name] = old_value
            else:
                updates[name] = new_value
        elif strategy is MergeStrategy.MERGE_ADDITIONAL_FIELDS:
            updates[name] = new_value if not old_value and new_value else old_value
        else:
            updates[name] = old_value
    return updates


def merge(
    existing: Card,
    candidate: CardFields,
    new_deck_ids: Iterable[str],
    strategy: MergeStrategy | str,
) -> Card:
    """
    Produce the reconciled card.

    Args:
        existing: Card already in the store
        candidate: Submitted fields
        new_deck_ids: Decks the submission targeted
        strategy: How scalar fields are reconciled

    Returns:
        A card with the same id, word and statistics as ``existing``
    """
    strategy = MergeStrategy(strategy)
    deck_ids = set(existing.deck_ids) | {str(deck_id) for deck_id in new_deck_ids}
    if strategy is MergeStrategy.KEEP_EXISTING:
        return dataclasses.replace(existing, deck_ids=deck_ids)
    return dataclasses.replace(
        existing,
        deck_ids=deck_ids,
        **_merged_fields(existing, candidate, strategy),
    )


class MergeService:
    """Applies merge strategies to cards in the store."""

    def __init__(
        self,
        card_repository: CardRepository | None = None,
        deck_repository: DeckRepository | None = None,
    ):
        self.card_repo = card_repository or get_card_repository()
        self.deck_repo = deck_repository or get_deck_repository()

    def apply(
        self,
        card_id: str,
        candidate: CardFields,
        deck_ids: Iterable[str],
        strategy: MergeStrategy | str,
    ) -> Card:
        """
        Merge a submission into a stored card and commit the result.

        Reserved deck ids are dropped from the membership.

        Raises:
            NotFoundError: If the card no longer exists
        """
        existing = self.card_repo.get(card_id)
        if existing is None:
            raise NotFoundError(f"Card {card_id} not found")
        reserved = self.deck_repo.reserved_ids()
        merged = merge(existing, candidate, deck_ids, strategy)
        if merged.deck_ids & reserved:
            merged = dataclasses.replace(merged, deck_ids=merged.deck_ids - reserved)
        self.card_repo.replace(merged)
        logger.info(f"Merged submission into '{merged.word}' using {MergeStrategy(strategy).value}")
        return merged


__all__ = ["MergeService", "MergeStrategy", "merge"]
