"""
CSV Service - Import and export of cards as CSV.

Columns: Word, Definition, Example, Article, Past Tense, Future Tense, Decks,
Success Count, Times Shown, Times Correct. ``Decks`` holds deck names separated
by ``;``; decks named in an import are created when missing.

Imports never abort on a bad row: each rejected row adds a message to the
ImportReport and the remaining rows are still imported.
"""

from __future__ import annotations

import csv
import dataclasses
import io
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger

from models.card import Card, CardFields
from services.card_service import CardService, validate_fields
from services.deck_service import DeckService
from utils.errors import FlashcardError
from utils.result import Result, partition_results
from utils.service_config import CSV_DECK_SEPARATOR, CSV_HEADER
from utils.text import clean_text, parse_count

# Header label -> internal name
_COLUMNS = {
    "word": "word",
    "definition": "definition",
    "example": "example",
    "article": "article",
    "past tense": "past_tense",
    "future tense": "future_tense",
    "decks": "decks",
    "success count": "success_count",
    "times shown": "times_shown",
    "times correct": "times_correct",
}
_REQUIRED_COLUMNS = ("word", "definition")


@dataclass
class ImportReport:
    success_count: int = 0
    errors: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class CsvRow:
    """A validated import row."""

    fields: CardFields
    deck_names: tuple[str, ...]
    success_count: int
    times_shown: int
    times_correct: int


def split_deck_names(value: str) -> tuple[str, ...]:
    names: list[str] = []
    for raw in clean_text(value).split(CSV_DECK_SEPARATOR):
        name = clean_text(raw)
        if name and name not in names:
            names.append(name)
    return tuple(names)


def parse_row(values: dict[str, str], row_number: int) -> Result[CsvRow]:
    """Validate one data row (``values`` keyed by internal column name)."""
    try:
        card_fields = validate_fields(
            CardFields(
                word=values.get("word", ""),
                definition=values.get("definition", ""),
                example=values.get("example", ""),
                article=values.get("article", ""),
                past_tense=values.get("past_tense", ""),
                future_tense=values.get("future_tense", ""),
            )
        )
        row = CsvRow(
            fields=card_fields,
            deck_names=split_deck_names(values.get("decks", "")),
            success_count=parse_count(values.get("success_count"), "Success Count"),
            times_shown=parse_count(values.get("times_shown"), "Times Shown"),
            times_correct=parse_count(values.get("times_correct"), "Times Correct"),
        )
    except FlashcardError as exc:
        return Result.failure(f"Row {row_number}: {exc}")
    return Result.success(row)


class CsvService:
    """Service for CSV import/export of cards."""

    def __init__(self, card_service: CardService, deck_service: DeckService):
        self.card_service = card_service
        self.deck_service = deck_service

    # ============= Import =============

    def parse(self, content: str) -> tuple[list[CsvRow], list[str]]:
        """
        Parse CSV text into validated rows and error messages.

        Row numbers in messages are the file line a record starts on, with the
        header on line 1.
        """
        reader = csv.reader(io.StringIO(content.lstrip("\ufeff")))
        header = next(reader, None)
        if not header:
            return [], ["File is empty"]

        columns = [_COLUMNS.get(clean_text(label).lower()) for label in header]
        missing = [name for name in _REQUIRED_COLUMNS if name not in columns]
        if missing:
            labels = ", ".join(name.capitalize() for name in missing)
            return [], [f"Missing required column(s): {labels}"]

        results: list[Result[CsvRow]] = []
        next_line = reader.line_num + 1
        for raw in reader:
            # quoted cells may span lines
            row_number, next_line = next_line, reader.line_num + 1
            if not any(cell.strip() for cell in raw):
                continue
            if len(raw) > len(columns):
                results.append(
                    Result.failure(
                        f"Row {row_number}: expected {len(columns)} columns, got {len(raw)}"
                    )
                )
                continue
            values = {
                name: cell for name, cell in zip(columns, raw, strict=False) if name is not None
            }
            results.append(parse_row(values, row_number))
        return partition_results(results)

    def import_csv(self, content: str) -> ImportReport:
        """
        Import cards from CSV text.

        Returns:
            ImportReport with the number of imported cards and per-row errors
        """
        rows, errors = self.parse(content)
        report = ImportReport(errors=list(errors))
        for row in rows:
            deck_ids = [self.deck_service.get_or_create_by_name(name).id for name in row.deck_names]
            card = self.card_service.add_card(row.fields, deck_ids)
            self.card_service.card_repo.replace(
                dataclasses.replace(
                    card,
                    success_count=row.success_count,
                    times_shown=row.times_shown,
                    times_correct=row.times_correct,
                )
            )
            report.success_count += 1

        if report.errors:
            logger.warning(f"CSV import rejected {len(report.errors)} row(s)")
        logger.info(f"Imported {report.success_count} card(s) from CSV")
        return report

    def import_file(self, path: Path) -> ImportReport:
        try:
            content = path.read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning(f"Failed to read {path}: {exc}")
            return ImportReport(errors=[f"Failed to read file: {exc}"])
        return self.import_csv(content)

    # ============= Export =============

    def export_cards(self, cards: Iterable[Card]) -> str:
        deck_names = {deck.id: deck.name for deck in self.deck_service.deck_repo.get_all()}
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(CSV_HEADER)
        for card in cards:
            names = sorted(deck_names[deck_id] for deck_id in card.deck_ids if deck_id in deck_names)
            writer.writerow(
                [
                    card.word,
                    card.definition,
                    card.example,
                    card.article,
                    card.past_tense,
                    card.future_tense,
                    CSV_DECK_SEPARATOR.join(names),
                    card.success_count,
                    card.times_shown,
                    card.times_correct,
                ]
            )
        return buffer.getvalue()

    def export_all(self) -> str:
        return self.export_cards(self.card_service.card_repo.get_all())

    def export_deck(self, deck_id: str) -> str:
        """Export a deck together with its sub-decks."""
        return self.export_cards(self.deck_service.get_cards_in_hierarchy([deck_id]))

    def export_decks(self, deck_ids: Iterable[str]) -> str:
        return self.export_cards(self.deck_service.get_cards_in_hierarchy(list(deck_ids)))


__all__ = ["CsvRow", "CsvService", "ImportReport", "parse_row", "split_deck_names"]
