from __future__ import annotations

"""Configuration loading and validation for Nenegana.

This module loads YAML configuration, applies defaults, and validates
the quiz selection so the CLI always gets a usable kana pool.
"""

import sys
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..kana.kana import SCRIPTS
from ..kana.table import list_groups


DEFAULT_QUESTIONS = 5
DEFAULT_SCRIPTS = ["hiragana"]
DEFAULT_GROUPS = ["a", "ka", "sa", "ta", "na"]


def _load_yaml(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except FileNotFoundError:
        print(f"ERROR: Config file not found: {path}", file=sys.stderr)
        sys.exit(1)


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration from YAML or defaults.

    Args:
        path: Optional path to a YAML config. If None, use package defaults.

    Returns:
        A dictionary with configuration values.
    """
    if path:
        return _load_yaml(Path(path))
    return _load_yaml(Path(__file__).with_name("defaults.yml"))


def validate_config(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Apply defaults and validate configuration values.

    Unknown scripts and groups are dropped with a warning; a selection left
    empty falls back to the defaults.

    Args:
        cfg: The raw configuration dictionary.

    Returns:
        The validated and merged configuration dictionary.
    """
    cfg.setdefault("quiz", {})
    cfg.setdefault("practice", {})
    cfg.setdefault("speech", {})
    cfg.setdefault("stats", {})

    quiz = cfg["quiz"]
    practice = cfg["practice"]
    speech = cfg["speech"]
    stats = cfg["stats"]

    quiz.setdefault("questions", DEFAULT_QUESTIONS)
    quiz.setdefault("scripts", list(DEFAULT_SCRIPTS))
    quiz.setdefault("groups", list(DEFAULT_GROUPS))

    practice.setdefault("show_romaji", True)
    practice.setdefault("columns", 5)

    speech.setdefault("lang", "ja-JP")
    speech.setdefault("timeout_ms", 3000)

    stats.setdefault("output_path", "./last_quiz.json")
    stats.setdefault("history_dir", "./history")
    stats.setdefault("persist", True)

    try:
        questions = int(quiz.get("questions"))
    except (TypeError, ValueError):
        questions = -1
    if questions < 0:
        print(f"WARNING: Invalid quiz.questions '{quiz.get('questions')}', using {DEFAULT_QUESTIONS}.")
        questions = DEFAULT_QUESTIONS
    quiz["questions"] = questions

    scripts = [str(s).lower() for s in (quiz.get("scripts") or [])]
    for s in scripts:
        if s not in SCRIPTS:
            print(f"WARNING: Unsupported kana script '{s}', ignoring.")
    scripts = [s for s in scripts if s in SCRIPTS]
    if not scripts:
        print("WARNING: No valid kana scripts selected, using 'hiragana'.")
        scripts = list(DEFAULT_SCRIPTS)
    quiz["scripts"] = scripts

    known = set(list_groups())
    groups = [str(g).lower() for g in (quiz.get("groups") or [])]
    for g in groups:
        if g not in known:
            print(f"WARNING: Unknown kana group '{g}', ignoring.")
    groups = [g for g in groups if g in known]
    if not groups:
        print(f"WARNING: No valid kana groups selected, using {DEFAULT_GROUPS}.")
        groups = list(DEFAULT_GROUPS)
    quiz["groups"] = groups

    try:
        columns = int(practice.get("columns"))
    except (TypeError, ValueError):
        columns = 0
    practice["columns"] = columns if columns > 0 else 5
    practice["show_romaji"] = bool(practice.get("show_romaji"))

    try:
        speech["timeout_ms"] = max(0, int(speech.get("timeout_ms")))
    except (TypeError, ValueError):
        print(f"WARNING: Invalid speech.timeout_ms '{speech.get('timeout_ms')}', using 3000.")
        speech["timeout_ms"] = 3000

    stats["persist"] = bool(stats.get("persist"))

    return cfg
