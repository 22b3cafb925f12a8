"""Portal label -> routing slug codec."""

from __future__ import annotations

import re
import unicodedata
from typing import Tuple

_WHITESPACE = re.compile(r"\s+")


def _strip_diacritics(text: str) -> str:
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def encode(label: str) -> str:
    """Return the routing slug for a portal label.

    Lowercases, removes every whitespace character and drops combining
    diacritical marks, so ``"Rádio CBN"`` and ``"radio  cbn"`` share the
    slug ``"radiocbn"``. Feeding a slug back in returns it unchanged.
    """
    slug = _WHITESPACE.sub("", label.lower())
    return _strip_diacritics(slug)


def sort_key(label: str) -> Tuple[str, str]:
    """Accent- and case-insensitive ordering key for display lists."""
    return (_strip_diacritics(label).casefold(), label)
