"""
Services package - Business logic layer.

This package exposes business services while avoiding heavy imports at module load time.
"""

from importlib import import_module
from typing import Any

__all__ = [
    "CardService",
    "CsvService",
    "DeckService",
    "DuplicateService",
    "ImportReport",
    "LibrarySettings",
    "MergeService",
    "MergeStrategy",
    "SaveStateService",
    "StateService",
    "StoreService",
    "get_store_service",
]

_LAZY_MODULES = {
    "CardService": "services.card_service",
    "CsvService": "services.csv_service",
    "ImportReport": "services.csv_service",
    "DeckService": "services.deck_service",
    "DuplicateService": "services.duplicate_service",
    "MergeService": "services.merge_service",
    "MergeStrategy": "services.merge_service",
    "SaveStateService": "services.save_state_service",
    "LibrarySettings": "services.state_service",
    "StateService": "services.state_service",
    "StoreService": "services.store_service",
    "get_store_service": "services.store_service",
}


def __getattr__(name: str) -> Any:
    if name in _LAZY_MODULES:
        module = import_module(_LAZY_MODULES[name])
        value = getattr(module, name)
        globals()[name] = value
        return value

    raise AttributeError(f"module 'services' has no attribute '{name}'")

