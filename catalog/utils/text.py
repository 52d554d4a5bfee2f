"""Text normalization used for searching and ordering category names."""

from __future__ import annotations

import unicodedata
from typing import Any, Optional, Tuple


def strip_accents(value: str) -> str:
    """Remove combining diacritics (``"Percussão"`` -> ``"Percussao"``)."""

    decomposed = unicodedata.normalize("NFD", value)
    return "".join(char for char in decomposed if not unicodedata.combining(char))


def normalize_search_text(value: Optional[str]) -> str:
    """Return an accent- and case-insensitive form of ``value``."""

    if not value:
        return ""
    return strip_accents(value).casefold()


def name_sort_key(name: Optional[str]) -> Tuple[str, str]:
    """Locale-style ordering key: accents and case ignored first, raw name as tiebreaker."""

    name = name or ""
    return normalize_search_text(name), name


def category_key(value: Any) -> Optional[str]:
    """Identifiers are compared as strings whether they arrive as numbers or text."""

    if value is None:
        return None
    text = str(value).strip()
    return text or None
