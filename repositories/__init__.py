"""
Repositories package - Data access layer.

This package contains repository classes that hold the in-memory card, deck
and save-state collections and persist them as JSON snapshots, isolating the
business logic from storage details.
"""

from repositories.card_repository import CardRepository, get_card_repository
from repositories.deck_repository import DeckRepository, get_deck_repository
from repositories.save_state_repository import SaveStateRepository, get_save_state_repository

__all__ = [
    "CardRepository",
    "DeckRepository",
    "SaveStateRepository",
    "get_card_repository",
    "get_deck_repository",
    "get_save_state_repository",
]
