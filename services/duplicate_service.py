"""
Duplicate Service - Detects whether a submitted card already exists.

A candidate is compared against the card store by word (trimmed, case-folded).
The first card in creation order with the same word is the match; it is then
classified as an exact match (every other field equal after trimming) or a
partial match, together with a field-by-field comparison.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from loguru import logger

from models.card import SECONDARY_FIELDS, Card, CardFields
from repositories.card_repository import CardRepository, get_card_repository
from utils.text import word_key


@dataclass(frozen=True)
class CardComparison:
    """How a candidate differs from the existing card it matched."""

    existing_filled_fields: int
    new_filled_fields: int
    field_differences: dict[str, tuple[str, str]] = field(default_factory=dict)
    new_fields_count: int = 0


@dataclass(frozen=True)
class NoDuplicate:
    pass


@dataclass(frozen=True)
class ExactMatch:
    existing_card: Card


@dataclass(frozen=True)
class PartialMatch:
    existing_card: Card
    comparison: CardComparison


DuplicateResult = NoDuplicate | ExactMatch | PartialMatch


def compare(existing: Card, candidate: CardFields) -> CardComparison:
    """Build the comparison between an existing card and a candidate."""
    existing_fields = existing.fields()
    differences: dict[str, tuple[str, str]] = {}
    new_fields = 0
    for name in SECONDARY_FIELDS:
        old_value = existing_fields.get(name)
        new_value = candidate.get(name)
        if old_value != new_value:
            differences[name] = (old_value, new_value)
            if not old_value and new_value:
                new_fields += 1
    return CardComparison(
        existing_filled_fields=existing_fields.filled_count(),
        new_filled_fields=candidate.filled_count(),
        field_differences=differences,
        new_fields_count=new_fields,
    )


def detect(candidate: CardFields, existing_cards: Iterable[Card]) -> DuplicateResult:
    """
    Classify a candidate against existing cards.

    Args:
        candidate: Submitted card fields
        existing_cards: Cards to check, in creation order

    Returns:
        NoDuplicate, ExactMatch(card) or PartialMatch(card, comparison)
    """
    key = word_key(candidate.word)
    if not key:
        return NoDuplicate()

    for card in existing_cards:
        if word_key(card.word) != key:
            continue
        comparison = compare(card, candidate)
        if not comparison.field_differences:
            return ExactMatch(card)
        return PartialMatch(card, comparison)
    return NoDuplicate()


class DuplicateService:
    """Runs duplicate checks against the card store."""

    def __init__(self, card_repository: CardRepository | None = None):
        self.card_repo = card_repository or get_card_repository()

    def check(self, candidate: CardFields) -> DuplicateResult:
        result = detect(candidate, self.card_repo.get_all())
        if not isinstance(result, NoDuplicate):
            logger.debug(f"Duplicate found for '{candidate.get('word')}': {type(result).__name__}")
        return result

    def check_batch(self, candidates: Sequence[CardFields]) -> dict[int, DuplicateResult]:
        """
        Check several candidates against the store.

        Returns:
            Mapping of candidate index to result, for duplicates only
        """
        cards = self.card_repo.get_all()
        duplicates: dict[int, DuplicateResult] = {}
        for index, candidate in enumerate(candidates):
            result = detect(candidate, cards)
            if not isinstance(result, NoDuplicate):
                duplicates[index] = result
        return duplicates


__all__ = [
    "CardComparison",
    "DuplicateResult",
    "DuplicateService",
    "ExactMatch",
    "NoDuplicate",
    "PartialMatch",
    "compare",
    "detect",
]
