"""Card data models."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Any

from utils.text import clean_text

CONTENT_FIELDS = (
    "word",
    "definition",
    "example",
    "article",
    "plural",
    "past_tense",
    "future_tense",
    "past_participle",
)
# Everything except the word itself
SECONDARY_FIELDS = CONTENT_FIELDS[1:]


def new_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class CardFields:
    """Content fields of a card, as submitted by a user or read from an import."""

    word: str = ""
    definition: str = ""
    example: str = ""
    article: str = ""
    plural: str = ""
    past_tense: str = ""
    future_tense: str = ""
    past_participle: str = ""

    def trimmed(self) -> CardFields:
        """Return a copy with every field trimmed and None mapped to ""."""
        return CardFields(**{name: clean_text(getattr(self, name)) for name in CONTENT_FIELDS})

    def get(self, name: str) -> str:
        return clean_text(getattr(self, name))

    def filled_count(self) -> int:
        """Number of fields holding a non-empty value after trimming."""
        return sum(1 for name in CONTENT_FIELDS if self.get(name))


@dataclass
class Card:
    """A single vocabulary entry and its study statistics."""

    word: str
    definition: str
    example: str = ""
    article: str = ""
    plural: str = ""
    past_tense: str = ""
    future_tense: str = ""
    past_participle: str = ""
    deck_ids: set[str] = field(default_factory=set)
    times_shown: int = 0
    times_correct: int = 0
    success_count: int = 0
    id: str = field(default_factory=new_id)
    created_at: str = field(default_factory=lambda: datetime.now().isoformat(timespec="seconds"))

    @property
    def learning_progress(self) -> int | None:
        """Percentage of correct answers, or None when the card was never shown."""
        if self.times_shown <= 0:
            return None
        ratio = min(self.times_correct, self.times_shown) / self.times_shown
        return round(ratio * 100)

    def fields(self) -> CardFields:
        return CardFields(**{name: getattr(self, name) for name in CONTENT_FIELDS})

    def to_dict(self) -> dict[str, Any]:
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data["deck_ids"] = sorted(self.deck_ids)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Card:
        """
        Build a card from its persisted JSON shape.

        Raises:
            KeyError: If the id is missing
            ValueError/TypeError: If counters are not numeric
        """
        kwargs: dict[str, Any] = {name: clean_text(data.get(name)) for name in CONTENT_FIELDS}
        kwargs["id"] = str(data["id"])
        kwargs["deck_ids"] = {str(deck_id) for deck_id in data.get("deck_ids") or []}
        for counter in ("times_shown", "times_correct", "success_count"):
            kwargs[counter] = max(0, int(data.get(counter) or 0))
        if data.get("created_at"):
            kwargs["created_at"] = str(data["created_at"])
        return cls(**kwargs)


__all__ = ["CONTENT_FIELDS", "SECONDARY_FIELDS", "Card", "CardFields", "new_id"]
