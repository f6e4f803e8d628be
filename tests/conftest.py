"""Root-level pytest fixtures for all tests.

This module provides fixtures that are available to all tests in the project.
"""

from pathlib import Path

import pytest
from test_helpers import reset_all_globals

from repositories.card_repository import CardRepository
from repositories.deck_repository import DeckRepository
from repositories.save_state_repository import SaveStateRepository
from services.card_service import CardService
from services.deck_service import DeckService
from services.store_service import StoreService


@pytest.fixture(autouse=True)
def reset_global_state():
    """Automatically reset all global service and repository instances after each test.

    This fixture ensures test isolation by resetting all singleton instances
    to None after each test completes, preventing state leakage between tests.
    """
    yield
    reset_all_globals()


@pytest.fixture
def store_service() -> StoreService:
    return StoreService()


@pytest.fixture
def card_repo(tmp_path: Path, store_service: StoreService) -> CardRepository:
    return CardRepository(tmp_path / "cards.json", store_service)


@pytest.fixture
def deck_repo(tmp_path: Path, store_service: StoreService) -> DeckRepository:
    return DeckRepository(tmp_path / "decks.json", store_service)


@pytest.fixture
def save_state_repo(tmp_path: Path, store_service: StoreService) -> SaveStateRepository:
    return SaveStateRepository(tmp_path / "save_states.json", store_service)


@pytest.fixture
def card_service(card_repo: CardRepository, deck_repo: DeckRepository) -> CardService:
    return CardService(card_repository=card_repo, deck_repository=deck_repo)


@pytest.fixture
def deck_service(deck_repo: DeckRepository, card_repo: CardRepository) -> DeckService:
    return DeckService(deck_repository=deck_repo, card_repository=card_repo)

