from __future__ import annotations

"""Explain Mode tracing.

Off by default; `--explain` turns it on and milestones (session start,
question shown, grading, speech status) are printed as one-line JSON.
"""

import json
import sys
from typing import Any, Dict, Optional, TextIO

_ENABLED = False
_STREAM: Optional[TextIO] = None


def enable(flag: bool = True, stream: Optional[TextIO] = None) -> None:
    global _ENABLED, _STREAM
    _ENABLED = bool(flag)
    _STREAM = stream


def enabled() -> bool:
    return _ENABLED


def trace(event: str, payload: Dict[str, Any] | None = None) -> None:
    if not _ENABLED:
        return
    out = _STREAM or sys.stdout
    try:
        line = json.dumps(payload or {}, separators=(",", ":"), ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        print(f"[EXPLAIN] {event}", file=out)
        return
    print(f"[EXPLAIN] {event} :: {line}", file=out)
