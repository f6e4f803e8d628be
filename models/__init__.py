"""
Models package - Plain data structures.

Cards, decks and game save states, with their JSON-friendly conversions.
"""

from models.card import CONTENT_FIELDS, SECONDARY_FIELDS, Card, CardFields
from models.deck import Deck
from models.save_state import GameProgress, GameSaveState, GameType, save_state_key

__all__ = [
    "CONTENT_FIELDS",
    "SECONDARY_FIELDS",
    "Card",
    "CardFields",
    "Deck",
    "GameProgress",
    "GameSaveState",
    "GameType",
    "save_state_key",
]
