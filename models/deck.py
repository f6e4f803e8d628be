"""Deck data model."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from models.card import new_id


@dataclass
class Deck:
    """A named collection of cards; membership lives on the cards themselves."""

    name: str
    parent_id: str | None = None
    sub_deck_ids: set[str] = field(default_factory=set)
    is_editable: bool = True
    id: str = field(default_factory=new_id)
    created_at: str = field(default_factory=lambda: datetime.now().isoformat(timespec="seconds"))

    @property
    def is_sub_deck(self) -> bool:
        return self.parent_id is not None

    @property
    def is_reserved(self) -> bool:
        return not self.is_editable

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "parent_id": self.parent_id,
            "sub_deck_ids": sorted(self.sub_deck_ids),
            "is_editable": self.is_editable,
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Deck:
        parent_id = data.get("parent_id")
        return cls(
            id=str(data["id"]),
            name=str(data["name"]).strip(),
            parent_id=str(parent_id) if parent_id else None,
            sub_deck_ids={str(item) for item in data.get("sub_deck_ids") or []},
            is_editable=bool(data.get("is_editable", True)),
            created_at=str(data.get("created_at") or datetime.now().isoformat(timespec="seconds")),
        )


__all__ = ["Deck"]
