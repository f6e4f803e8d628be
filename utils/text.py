"""Text normalization helpers for card fields."""

from __future__ import annotations

import unicodedata
from typing import Any

from utils.errors import ValidationError
from utils.service_config import VALID_ARTICLES


def clean_text(value: Any) -> str:
    """Return ``value`` as a trimmed, NFC-normalized string ("" for None)."""
    if value is None:
        return ""
    text = value if isinstance(value, str) else str(value)
    return unicodedata.normalize("NFC", text).strip()


def word_key(value: Any) -> str:
    """Key used to compare words: trimmed and case-folded."""
    return clean_text(value).casefold()


def normalize_article(value: Any) -> str:
    """
    Normalize a Dutch article.

    Raises:
        ValidationError: If the value is not "de", "het" or empty
    """
    article = clean_text(value).lower()
    if article and article not in VALID_ARTICLES:
        raise ValidationError(f"Invalid article '{clean_text(value)}' (expected de or het)")
    return article


def parse_count(value: Any, field_name: str) -> int:
    """
    Parse a non-negative integer counter; empty values count as zero.

    Raises:
        ValidationError: If the value is not a non-negative integer
    """
    text = clean_text(value)
    if not text:
        return 0
    try:
        count = int(text)
    except ValueError:
        raise ValidationError(f"{field_name} must be a whole number, got '{text}'") from None
    if count < 0:
        raise ValidationError(f"{field_name} cannot be negative")
    return count


__all__ = ["clean_text", "normalize_article", "parse_count", "word_key"]
