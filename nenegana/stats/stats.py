from __future__ import annotations

"""Quiz summaries: JSON-friendly aggregation, formatting and writing."""

import json
from pathlib import Path
from typing import Any, Dict

from ..quiz.session import QuizSession


def summarize(session: QuizSession) -> Dict[str, Any]:
    """Build the summary dict for a (usually finished) session."""
    score = session.get_score()
    return {
        **score.as_dict(),
        "questions": session.get_total_questions(),
        "missed": [k.to_json() for k in session.get_missed_kana()],
        "results": [
            {
                "kana": r.kana.to_json(),
                "correct": r.is_correct,
                "answer": r.user_answer,
            }
            for r in session.get_results()
        ],
    }


def write_stats(summary: Dict[str, Any], path: str) -> None:
    """Write a summary as JSON to path."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("w", encoding="utf-8") as f:
        json.dump(summary, f, indent=2, ensure_ascii=False)


def format_summary(summary: Dict[str, Any]) -> str:
    """Return a human-readable summary."""
    total = int(summary.get("total", 0))
    correct = int(summary.get("correct", 0))
    pct = int(summary.get("percentage", 0))
    lines = [f"Score: {correct}/{total} ({pct}%)"]
    missed = summary.get("missed") or []
    if missed:
        lines.append("Missed: " + ", ".join(f"{m['char']} ({m['romaji']})" for m in missed))
    elif total > 0:
        lines.append("Perfect run!")
    return "\n".join(lines)
