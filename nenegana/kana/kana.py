from __future__ import annotations

"""Kana value type shared by the table, the quiz and the stores."""

from dataclasses import dataclass, asdict
from typing import Any, Dict

SCRIPTS = ("hiragana", "katakana")


@dataclass(frozen=True)
class Kana:
    """One learning item: a glyph and its canonical romaji."""

    char: str
    romaji: str
    script: str
    group: str

    def to_json(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Kana":
        return cls(
            char=str(data["char"]),
            romaji=str(data["romaji"]),
            script=str(data["script"]),
            group=str(data["group"]),
        )
