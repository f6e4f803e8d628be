"""Utility service for JSON-backed key/value snapshot stores."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from loguru import logger


class StoreService:
    """Service that reads and writes whole-collection JSON snapshots."""

    def load_store(self, path: Path) -> dict[str, Any]:
        """
        Load JSON data from the given path.

        Args:
            path: Path to the JSON store

        Returns:
            Dictionary payload (empty dict if missing, unreadable or not an object)
        """
        if not path.exists():
            return {}
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.warning(f"Invalid JSON at {path}; ignoring store")
            return {}
        except OSError as exc:
            logger.warning(f"Failed to read {path}: {exc}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Unexpected top-level JSON type in {path}; ignoring store")
            return {}
        return data

    def save_store(self, path: Path, data: dict[str, Any]) -> bool:
        """
        Persist JSON data to the given path.

        The payload is written to a sibling temp file first and then moved over
        the target, so a failed write never leaves a truncated store behind.

        Args:
            path: Path to write
            data: Dictionary payload

        Returns:
            True if the store was written
        """
        temp_path = path.with_name(f"{path.name}.tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            temp_path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
            temp_path.replace(path)
            return True
        except OSError as exc:
            logger.error(f"Failed to write {path}: {exc}")
            return False


_default_store_service: StoreService | None = None


def get_store_service() -> StoreService:
    """Return a shared StoreService instance."""
    global _default_store_service
    if _default_store_service is None:
        _default_store_service = StoreService()
    return _default_store_service


def reset_store_service() -> None:
    """Reset the shared StoreService instance (used by tests)."""
    global _default_store_service
    _default_store_service = None


__all__ = ["StoreService", "get_store_service", "reset_store_service"]
