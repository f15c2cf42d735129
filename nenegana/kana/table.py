from __future__ import annotations

"""Kana table loader (YAML).

Loads the packaged kana rows and expands them into hiragana and katakana
`Kana` items, then filters them by selected scripts and groups.
"""

from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterable, List, Tuple

import yaml

from .kana import Kana, SCRIPTS


def _default_table_path() -> str:
    return str(Path(__file__).resolve().parents[1] / "resources" / "kana.yml")


@lru_cache(maxsize=None)
def _read_table(path: str) -> Tuple[Tuple[str, Tuple[Tuple[str, str, str], ...]], ...]:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    groups = data.get("groups") or {}
    return tuple(
        (str(group), tuple((str(r[0]), str(r[1]), str(r[2])) for r in (rows or [])))
        for group, rows in groups.items()
    )


def load_table(path: str | None = None) -> Dict[str, List[Tuple[str, str, str]]]:
    """Return `group -> [(romaji, hiragana, katakana)]`; the file is parsed once per path."""
    return {group: list(rows) for group, rows in _read_table(path or _default_table_path())}


@lru_cache(maxsize=None)
def _all_kana(path: str | None = None) -> Tuple[Kana, ...]:
    table = load_table(path)
    items: List[Kana] = []
    # All hiragana first, then katakana; rows keep table order
    for idx, script in enumerate(SCRIPTS):
        for group, rows in table.items():
            for row in rows:
                items.append(Kana(char=row[idx + 1], romaji=row[0], script=script, group=group))
    return tuple(items)


def all_kana(path: str | None = None) -> List[Kana]:
    return list(_all_kana(path))


def list_groups(path: str | None = None) -> List[str]:
    """Group names in table order."""
    return [group for group, _ in _read_table(path or _default_table_path())]


def select_kana(scripts: Iterable[str], groups: Iterable[str], path: str | None = None) -> List[Kana]:
    """Return kana whose script and group are both selected, in table order.

    Raises:
        KeyError: for an unknown script or group name.
    """
    scripts = list(scripts)
    groups = list(groups)
    for s in scripts:
        if s not in SCRIPTS:
            raise KeyError(f"Unknown kana script: {s}")
    known = set(list_groups(path))
    for g in groups:
        if g not in known:
            raise KeyError(f"Unknown kana group: {g}")
    return [k for k in _all_kana(path) if k.script in scripts and k.group in groups]


def find_kana(char: str, path: str | None = None) -> Kana:
    for k in _all_kana(path):
        if k.char == char:
            return k
    raise KeyError(f"Unknown kana: {char}")
