"""
Library Controller - Wires repositories and services into one flashcard library.

The controller owns every repository and service instance, so callers get
explicit read/write methods instead of shared global state. It also runs the
add-card flow: duplicate check first, then either a plain add or a merge
chosen by the caller.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger

from models.card import Card, CardFields
from repositories.card_repository import CardRepository
from repositories.deck_repository import DeckRepository
from repositories.save_state_repository import SaveStateRepository
from services.card_service import CardService, validate_fields
from services.csv_service import CsvService, ImportReport
from services.deck_service import DeckService
from services.duplicate_service import (
    DuplicateResult,
    DuplicateService,
    ExactMatch,
    NoDuplicate,
    PartialMatch,
)
from services.merge_service import MergeService, MergeStrategy
from services.save_state_service import SaveStateService
from services.state_service import LibrarySettings, StateService
from services.store_service import StoreService, get_store_service
from utils.constants import DATA_DIR, SETTINGS_FILE


@dataclass(frozen=True)
class SubmissionOutcome:
    """Result of submitting a card: either added, or a duplicate awaiting resolution."""

    card: Card | None
    duplicate: DuplicateResult = field(default_factory=NoDuplicate)

    @property
    def needs_resolution(self) -> bool:
        return self.card is None


@dataclass
class BatchSubmission:
    added: list[Card] = field(default_factory=list)
    duplicates: dict[int, DuplicateResult] = field(default_factory=dict)
    errors: dict[int, str] = field(default_factory=dict)


class LibraryController:
    """Application-level entry point for the flashcard library."""

    def __init__(
        self,
        data_dir: Path | None = None,
        settings_path: Path | None = None,
        store_service: StoreService | None = None,
    ) -> None:
        if settings_path is None:
            settings_path = data_dir / "settings.json" if data_dir else SETTINGS_FILE
        data_dir = data_dir or DATA_DIR
        store = store_service or get_store_service()
        self.state_service = StateService(settings_path)
        self.settings: LibrarySettings = self.state_service.get_settings()

        self.card_repo = CardRepository(data_dir / "cards.json", store)
        self.deck_repo = DeckRepository(data_dir / "decks.json", store)
        self.save_state_repo = SaveStateRepository(data_dir / "save_states.json", store)

        self.cards = CardService(self.card_repo, self.deck_repo)
        self.decks = DeckService(self.deck_repo, self.card_repo)
        self.duplicates = DuplicateService(self.card_repo)
        self.merges = MergeService(self.card_repo, self.deck_repo)
        self.csv = CsvService(self.cards, self.decks)
        self.save_states = SaveStateService(
            self.save_state_repo,
            self.card_repo,
            max_save_states=self.settings.max_save_states,
            max_age_days=self.settings.save_state_max_age_days,
        )

    # ============= Persistence =============

    def load(self) -> None:
        """Load cards, decks and save states from their snapshots."""
        self.deck_repo.load()
        self.card_repo.load()
        self.save_state_repo.load()
        self._drop_dangling_memberships()
        if self.settings.auto_clear_old_save_states:
            self.save_states.clear_old()
        logger.info(
            f"Library loaded: {self.card_repo.count()} cards, "
            f"{len(self.deck_repo.get_all())} decks, "
            f"{len(self.save_state_repo.get_all())} save states"
        )

    def save(self) -> bool:
        """Write every snapshot; returns False if any write failed."""
        results = [self.card_repo.save(), self.deck_repo.save(), self.save_state_repo.save()]
        return all(results)

    # ============= Card Submission =============

    def submit_card(self, fields: CardFields, deck_ids: Iterable[str] = ()) -> SubmissionOutcome:
        """
        Add a card unless an equivalent word already exists.

        Raises:
            ValidationError: If required fields are missing
        """
        clean = validate_fields(fields)
        result = self.duplicates.check(clean)
        if isinstance(result, NoDuplicate):
            return SubmissionOutcome(card=self.cards.add_card(clean, deck_ids))
        return SubmissionOutcome(card=None, duplicate=result)

    def submit_cards(
        self, entries: Sequence[CardFields], deck_ids: Iterable[str] = ()
    ) -> BatchSubmission:
        """
        Submit several cards at once.

        Entries are checked in order against the store as it grows, so a word
        repeated inside the batch is reported as a duplicate of the earlier entry.
        Invalid entries are reported per index and do not stop the batch.
        """
        deck_ids = list(deck_ids)
        batch = BatchSubmission()
        for index, entry in enumerate(entries):
            try:
                outcome = self.submit_card(entry, deck_ids)
            except ValueError as exc:
                batch.errors[index] = str(exc)
                continue
            if outcome.card is not None:
                batch.added.append(outcome.card)
            else:
                batch.duplicates[index] = outcome.duplicate
        return batch

    def resolve_duplicate(
        self,
        result: DuplicateResult,
        fields: CardFields,
        deck_ids: Iterable[str] = (),
        strategy: MergeStrategy | str | None = None,
    ) -> Card | None:
        """
        Apply a merge strategy to a duplicate reported by ``submit_card``.

        Returns:
            The merged card, or None for NoDuplicate
        """
        if not isinstance(result, ExactMatch | PartialMatch):
            return None
        chosen = MergeStrategy(strategy or self.settings.default_merge_strategy)
        clean = validate_fields(fields)
        membership = self.cards.sanitize_deck_ids(deck_ids)
        return self.merges.apply(result.existing_card.id, clean, membership, chosen)

    # ============= Import / Export =============

    def import_csv_file(self, path: Path) -> ImportReport:
        return self.csv.import_file(path)

    def export_csv_file(self, path: Path, deck_ids: Iterable[str] | None = None) -> int:
        """
        Write cards (all, or those in the given decks) to a CSV file.

        Returns:
            Number of cards exported
        """
        if deck_ids is None:
            cards = self.card_repo.get_all()
        else:
            cards = self.decks.get_cards_in_hierarchy(list(deck_ids))
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.csv.export_cards(cards), encoding="utf-8")
        logger.info(f"Exported {len(cards)} card(s) to {path}")
        return len(cards)

    # ============= Private Helper Methods =============

    def _drop_dangling_memberships(self) -> None:
        known = self.deck_repo.ids() - self.deck_repo.reserved_ids()
        cards = self.card_repo.get_all()
        cleaned = [
            card if card.deck_ids <= known else dataclasses.replace(card, deck_ids=card.deck_ids & known)
            for card in cards
        ]
        dropped = sum(1 for before, after in zip(cards, cleaned, strict=True) if before is not after)
        if dropped:
            logger.warning(f"Removed missing deck references from {dropped} card(s)")
            self.card_repo.replace_all(cleaned)


__all__ = ["BatchSubmission", "LibraryController", "SubmissionOutcome"]
