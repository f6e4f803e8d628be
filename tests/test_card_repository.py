"""Tests for CardRepository in-memory state and JSON persistence."""

import json
from pathlib import Path

import pytest

from models.card import Card
from repositories.card_repository import CardRepository, get_card_repository
from services.store_service import StoreService


def _card(word: str, **kwargs) -> Card:
    return Card(word=word, definition=f"{word} definition", **kwargs)


def test_add_keeps_creation_order(card_repo: CardRepository):
    first = card_repo.add(_card("huis"))
    second = card_repo.add(_card("boom"))

    assert [card.id for card in card_repo.get_all()] == [first.id, second.id]
    assert card_repo.count() == 2
    assert card_repo.ids() == {first.id, second.id}


def test_add_rejects_duplicate_id(card_repo: CardRepository):
    card = card_repo.add(_card("huis"))

    with pytest.raises(ValueError):
        card_repo.add(_card("boom", id=card.id))


def test_get_all_returns_copy(card_repo: CardRepository):
    card_repo.add(_card("huis"))

    card_repo.get_all().clear()

    assert card_repo.count() == 1


def test_replace_keeps_position(card_repo: CardRepository):
    first = card_repo.add(_card("huis"))
    card_repo.add(_card("boom"))

    replaced = card_repo.replace(_card("huis", id=first.id, example="Mijn huis."))

    assert replaced is True
    assert card_repo.get_all()[0].example == "Mijn huis."


def test_replace_unknown_card_returns_false(card_repo: CardRepository):
    assert card_repo.replace(_card("huis")) is False
    assert card_repo.count() == 0


def test_remove(card_repo: CardRepository):
    card = card_repo.add(_card("huis"))

    assert card_repo.remove(card.id) is True
    assert card_repo.remove(card.id) is False
    assert card_repo.get(card.id) is None


def test_save_and_load_round_trip(tmp_path: Path, card_repo: CardRepository):
    card = card_repo.add(_card("eten", deck_ids={"d2", "d1"}, times_shown=4, times_correct=3))

    assert card_repo.save() is True
    payload = json.loads((tmp_path / "cards.json").read_text(encoding="utf-8"))
    assert payload["cards"][0]["deck_ids"] == ["d1", "d2"]

    reloaded = CardRepository(tmp_path / "cards.json", StoreService())
    assert reloaded.load() == 1
    restored = reloaded.get(card.id)
    assert restored == card
    assert restored.learning_progress == 75


def test_load_skips_malformed_and_duplicate_entries(tmp_path: Path):
    path = tmp_path / "cards.json"
    path.write_text(
        json.dumps(
            {
                "cards": [
                    {"id": "c1", "word": "huis", "definition": "house"},
                    {"word": "no id", "definition": "missing"},
                    {"id": "c2", "word": "boom", "definition": "tree", "times_shown": "many"},
                    {"id": "c1", "word": "huis again", "definition": "house"},
                    "not a card",
                ]
            }
        ),
        encoding="utf-8",
    )
    repo = CardRepository(path, StoreService())

    assert repo.load() == 1
    assert repo.get("c1").word == "huis"


def test_load_missing_store_gives_empty_repository(card_repo: CardRepository):
    assert card_repo.load() == 0
    assert card_repo.get_all() == []


def test_get_card_repository_returns_singleton():
    assert get_card_repository() is get_card_repository()
