"""Tests for CSV import and export."""

from pathlib import Path

import pytest
from test_helpers import make_fields

from services.card_service import CardService
from services.csv_service import CsvService, parse_row, split_deck_names
from services.deck_service import DeckService
from utils.service_config import CSV_HEADER

HEADER = ",".join(CSV_HEADER)


@pytest.fixture
def csv_service(card_service: CardService, deck_service: DeckService) -> CsvService:
    return CsvService(card_service, deck_service)


def test_brood_row_creates_card_and_decks(csv_service: CsvService, deck_service: DeckService):
    content = f'{HEADER}\nBrood,Bread,,het,,,"A1;Basics",3,5,3\n'

    report = csv_service.import_csv(content)

    assert report.success_count == 1
    assert report.errors == []
    card = csv_service.card_service.card_repo.get_all()[0]
    assert (card.word, card.definition, card.article) == ("Brood", "Bread", "het")
    assert (card.success_count, card.times_shown, card.times_correct) == (3, 5, 3)
    deck_names = {deck_service.get_deck(deck_id).name for deck_id in card.deck_ids}
    assert deck_names == {"A1", "Basics"}


def test_import_reuses_existing_decks_case_insensitively(
    csv_service: CsvService, deck_service: DeckService
):
    existing = deck_service.create_deck("A1")

    csv_service.import_csv(f"{HEADER}\nhuis,house,,,,,a1,,,\n")

    card = csv_service.card_service.card_repo.get_all()[0]
    assert card.deck_ids == {existing.id}
    assert len(deck_service.get_selectable_decks()) == 1


def test_import_collects_row_errors_and_keeps_valid_rows(csv_service: CsvService):
    content = "\n".join(
        [
            HEADER,
            "huis,house,,,,,,,,",
            ",no word,,,,,,,,",
            "boom,,,,,,,,,",
            "kat,cat,,een,,,,,,",
            "hond,dog,,,,,,x,,",
            "vis,fish,,,,,,,1,2",
            "",
            "fiets,bike,,de,,,,,,",
        ]
    )

    report = csv_service.import_csv(content)

    assert report.success_count == 3
    assert len(report.errors) == 4
    assert report.errors[0] == "Row 3: Word is required"
    assert report.errors[1] == "Row 4: Definition is required"
    assert report.errors[2].startswith("Row 5:")
    assert report.errors[3].startswith("Row 6: Success Count")


def test_import_keeps_counters_as_given(csv_service: CsvService):
    report = csv_service.import_csv(f"{HEADER}\nvis,fish,,,,,,0,1,2\n")

    assert report.success_count == 1
    assert report.errors == []
    card = csv_service.card_service.card_repo.get_all()[0]
    assert (card.times_shown, card.times_correct) == (1, 2)
    assert card.learning_progress == 100


def test_row_numbers_follow_file_lines_after_multiline_cell(csv_service: CsvService):
    content = f'{HEADER}\nhuis,house,"Het huis\nis groot.",,,,,,,\n,no word,,,,,,,,\n'

    report = csv_service.import_csv(content)

    assert report.success_count == 1
    assert report.errors == ["Row 4: Word is required"]
    assert csv_service.card_service.card_repo.get_all()[0].example == "Het huis\nis groot."


def test_import_accepts_reordered_and_partial_columns(csv_service: CsvService):
    report = csv_service.import_csv("Definition,Word\nhouse,huis\n")

    assert report.success_count == 1
    assert csv_service.card_service.card_repo.get_all()[0].word == "huis"


def test_import_requires_word_and_definition_columns(csv_service: CsvService):
    report = csv_service.import_csv("Word,Example\nhuis,Mijn huis.\n")

    assert report.success_count == 0
    assert report.errors == ["Missing required column(s): Definition"]


def test_import_empty_file(csv_service: CsvService):
    assert csv_service.import_csv("").errors == ["File is empty"]


def test_import_rejects_rows_with_extra_columns(csv_service: CsvService):
    report = csv_service.import_csv("Word,Definition\nhuis,house,extra\n")

    assert report.errors == ["Row 2: expected 2 columns, got 3"]


def test_import_file_handles_bom(tmp_path: Path, csv_service: CsvService):
    path = tmp_path / "cards.csv"
    path.write_text(f"\ufeff{HEADER}\nhuis,house,,,,,,,,\n", encoding="utf-8")

    report = csv_service.import_file(path)

    assert report.success_count == 1


def test_import_missing_file(tmp_path: Path, csv_service: CsvService):
    report = csv_service.import_file(tmp_path / "missing.csv")

    assert report.success_count == 0
    assert report.errors[0].startswith("Failed to read file")


def test_export_all_writes_header_and_quotes(
    csv_service: CsvService, card_service: CardService, deck_service: DeckService
):
    basics = deck_service.create_deck("Basics")
    a1 = deck_service.create_deck("A1")
    card = card_service.add_card(make_fields("brood", "bread, loaf", article="het"), [basics.id, a1.id])
    card_service.record_card_shown(card.id, is_correct=True)

    lines = csv_service.export_all().splitlines()

    assert lines[0] == HEADER
    assert lines[1] == 'brood,"bread, loaf",,het,,,A1;Basics,0,1,1'


def test_export_deck_includes_sub_decks(
    csv_service: CsvService, card_service: CardService, deck_service: DeckService
):
    a1 = deck_service.create_deck("A1")
    eten = deck_service.create_sub_deck("Eten", a1.id)
    card_service.add_card(make_fields("brood", "bread"), [eten.id])
    card_service.add_card(make_fields("huis", "house"))

    lines = csv_service.export_deck(a1.id).splitlines()

    assert len(lines) == 2
    assert lines[1].startswith("brood,bread")


def test_exported_csv_imports_back(csv_service: CsvService, card_service: CardService, deck_service: DeckService):
    deck = deck_service.create_deck("A1")
    card_service.add_card(make_fields("lopen", "to walk", past_tense="liep"), [deck.id])
    exported = csv_service.export_all()

    card_service.card_repo.replace_all([])
    report = csv_service.import_csv(exported)

    assert report.success_count == 1
    card = card_service.card_repo.get_all()[0]
    assert card.past_tense == "liep"
    assert card.deck_ids == {deck.id}


def test_split_deck_names():
    assert split_deck_names(" A1 ; Basics;;A1 ") == ("A1", "Basics")


def test_parse_row_reports_row_number():
    result = parse_row({"word": "huis"}, 9)

    assert result.is_error
    assert result.error == "Row 9: Definition is required"


def test_export_decks_lists_each_card_once(
    csv_service: CsvService, card_service: CardService, deck_service: DeckService
):
    a1 = deck_service.create_deck("A1")
    a2 = deck_service.create_deck("A2")
    card_service.add_card(make_fields("brood", "bread"), [a1.id, a2.id])
    card_service.add_card(make_fields("kaas", "cheese"), [a2.id])

    lines = csv_service.export_decks([a1.id, a2.id]).splitlines()

    assert [line.split(",")[0] for line in lines[1:]] == ["brood", "kaas"]
