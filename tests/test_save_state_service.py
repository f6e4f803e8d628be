"""Tests for SaveStateService save/load, stale-card filtering and pruning."""

from datetime import datetime, timedelta

import pytest

from models.card import Card
from models.save_state import GameProgress, GameType
from repositories.card_repository import CardRepository
from repositories.save_state_repository import SaveStateRepository
from services.save_state_service import SaveStateService, filter_stale_cards
from services.store_service import StoreService


@pytest.fixture
def cards(card_repo: CardRepository) -> list[Card]:
    return [card_repo.add(Card(word=f"woord{i}", definition=f"word {i}")) for i in range(4)]


@pytest.fixture
def service(save_state_repo: SaveStateRepository, card_repo: CardRepository) -> SaveStateService:
    return SaveStateService(save_state_repo, card_repo, max_save_states=3, max_age_days=30)


def _progress(cards: list[Card], index: int = 2) -> GameProgress:
    return GameProgress(
        current_index=index,
        counters={"correct": 1, "incorrect": 1},
        outcome_sets={"known": {cards[0].id}, "unknown": {cards[1].id}},
        card_order=[card.id for card in cards],
        extras={"show_definition_first": True},
    )


def test_save_then_load_returns_equal_progress(service: SaveStateService, cards: list[Card]):
    progress = _progress(cards)

    service.save(GameType.STUDY, ["d2", "d1"], progress)

    assert service.load("study", ["d1", "d2", "d1"]) == progress


def test_saved_progress_is_a_snapshot(service: SaveStateService, cards: list[Card]):
    progress = _progress(cards)
    service.save(GameType.STUDY, ["d1"], progress)

    progress.card_order.clear()
    progress.outcome_sets["known"].add("other")

    restored = service.load(GameType.STUDY, ["d1"])
    assert restored.card_order == [card.id for card in cards]
    assert restored.outcome_sets["known"] == {cards[0].id}


def test_load_filters_deleted_cards(service: SaveStateService, cards: list[Card], card_repo: CardRepository):
    service.save(GameType.TEST, ["d1"], _progress(cards, index=2))

    card_repo.remove(cards[0].id)
    restored = service.load(GameType.TEST, ["d1"])

    assert restored.card_order == [cards[1].id, cards[2].id, cards[3].id]
    assert restored.current_index == 1
    assert restored.outcome_sets == {"known": set(), "unknown": {cards[1].id}}
    assert restored.counters == {"correct": 1, "incorrect": 1}


def test_load_returns_none_when_all_cards_were_deleted(
    service: SaveStateService, cards: list[Card], card_repo: CardRepository
):
    service.save(GameType.HANGMAN, ["d1"], _progress(cards))

    card_repo.replace_all([])

    assert service.load(GameType.HANGMAN, ["d1"]) is None


def test_load_missing_state(service: SaveStateService):
    assert service.load(GameType.WRITING, ["d1"]) is None
    assert service.exists(GameType.WRITING, ["d1"]) is False


def test_filter_stale_cards_clamps_index_into_remaining_order():
    progress = GameProgress(current_index=3, card_order=["a", "b", "c", "d"])

    filtered = filter_stale_cards(progress, {"a", "b"})

    assert filtered.card_order == ["a", "b"]
    assert filtered.current_index == 1


def test_filter_stale_cards_keeps_index_past_end_when_nothing_removed():
    progress = GameProgress(current_index=2, card_order=["a", "b"])

    assert filter_stale_cards(progress, {"a", "b"}).current_index == 2


def test_filter_stale_cards_allows_empty_order():
    progress = GameProgress(counters={"score": 4})

    assert filter_stale_cards(progress, set()) == progress


def test_save_replaces_state_with_same_key(service: SaveStateService, cards: list[Card]):
    service.save(GameType.STUDY, ["d1", "d2"], _progress(cards, index=0))
    service.save(GameType.STUDY, ["d2", "d1"], _progress(cards, index=3))

    states = service.list_save_states()
    assert len(states) == 1
    assert service.load(GameType.STUDY, ["d1", "d2"]).current_index == 3


def test_save_prunes_to_most_recent(service: SaveStateService, cards: list[Card]):
    base = datetime(2024, 5, 1, 12, 0)
    for offset, game in enumerate([GameType.STUDY, GameType.TEST, GameType.HANGMAN, GameType.DEHET]):
        service.save(game, ["d1"], _progress(cards), saved_at=base + timedelta(minutes=offset))

    games = [state.game_type for state in service.list_save_states()]

    assert games == [GameType.DEHET, GameType.HANGMAN, GameType.TEST]


def test_get_info_and_delete(service: SaveStateService, cards: list[Card]):
    saved_at = datetime(2024, 5, 1, 9, 30)
    service.save(GameType.TRUE_FALSE, ["d1", "d2"], _progress(cards), saved_at=saved_at)

    assert service.get_info(GameType.TRUE_FALSE, ["d2", "d1"]) == (saved_at, 2)
    assert service.delete(GameType.TRUE_FALSE, ["d1", "d2"]) is True
    assert service.delete(GameType.TRUE_FALSE, ["d1", "d2"]) is False
    assert service.get_info(GameType.TRUE_FALSE, ["d1", "d2"]) is None


def test_clear_old_removes_expired_states(service: SaveStateService, cards: list[Card]):
    now = datetime(2024, 6, 1)
    service.save(GameType.STUDY, ["d1"], _progress(cards), saved_at=now - timedelta(days=45))
    service.save(GameType.TEST, ["d1"], _progress(cards), saved_at=now - timedelta(days=2))

    removed = service.clear_old(now=now)

    assert removed == 1
    assert [state.game_type for state in service.list_save_states()] == [GameType.TEST]
    assert service.clear_old(max_age_days=1, now=now) == 1


def test_clear_all(service: SaveStateService, cards: list[Card]):
    service.save(GameType.STUDY, ["d1"], _progress(cards))

    service.clear_all()

    assert service.list_save_states() == []


def test_saved_states_survive_reload(
    tmp_path, service: SaveStateService, cards: list[Card], card_repo: CardRepository
):
    progress = _progress(cards)
    service.save(GameType.LOOK_COVER_CHECK, ["d1"], progress)

    reloaded_repo = SaveStateRepository(tmp_path / "save_states.json", StoreService())
    reloaded_repo.load()
    reloaded = SaveStateService(reloaded_repo, card_repo)

    assert reloaded.load(GameType.LOOK_COVER_CHECK, ["d1"]) == progress
