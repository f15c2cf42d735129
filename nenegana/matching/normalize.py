from __future__ import annotations

"""Answer normalization for typed and spoken romaji."""

import re
from typing import Optional

_WHITESPACE = re.compile(r"\s+")

# Applied in order; no replacement output contains a later pattern
ROMAJI_ALIASES = (
    ("shi", "si"),
    ("chi", "ti"),
    ("tsu", "tu"),
    ("fu", "hu"),
)


def normalize(text: str) -> str:
    """Canonicalize romaji so case, spacing and shi/si style variants compare equal."""
    t = _WHITESPACE.sub("", text.lower().strip())
    for variant, canonical in ROMAJI_ALIASES:
        t = t.replace(variant, canonical)
    return t


def answers_match(given: Optional[str], expected: str) -> bool:
    if not given:
        return False
    return normalize(given) == normalize(expected)
