from __future__ import annotations

"""Quiz runner: orchestrates kana selection, the quiz loop, and persistence.

Front-end agnostic: the loop talks to the user only through `ask` and
`inform` callbacks (plus an optional `listen` for spoken answers), so the
CLI and tests drive it the same way.
"""

import random
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional
from uuid import uuid4

from .. import __version__
from ..kana.table import select_kana
from ..matching.normalize import answers_match
from ..quiz.session import QuizSession
from ..speech.state import SpeechBackend, SpeechInput, SpeechStatus
from ..stats.stats import summarize, write_stats
from ..storage.schema import AnswerRow, SessionMeta
from ..storage.store import append_answers, upsert_session_meta, validate_records
from ..util.randomness import make_rng
from .explain import trace as xtrace


@dataclass(frozen=True)
class SessionContext:
    session_id: str
    started_at: datetime
    scripts: List[str]
    groups: List[str]
    questions: int
    params: Dict[str, Any] = field(default_factory=dict)


@dataclass
class RuntimeState:
    ended_at: Optional[datetime] = None


class QuizRunner:
    def __init__(
        self,
        cfg: Dict[str, Any],
        rng: Optional[random.Random] = None,
        speech_backend: Optional[SpeechBackend] = None,
    ) -> None:
        self.cfg = cfg
        self.rng = rng if rng is not None else make_rng()
        self.speech: Optional[SpeechInput] = None
        if speech_backend is not None:
            self.speech = SpeechInput.from_config(cfg.get("speech", {}), speech_backend)
        self.ctx: Optional[SessionContext] = None
        self.state = RuntimeState()
        self.session: Optional[QuizSession] = None

    def start_session(self, overrides: Optional[Dict[str, Any]] = None) -> QuizSession:
        # Resolve params: config quiz section → overrides
        quiz_cfg = dict(self.cfg.get("quiz", {}))
        params = {**quiz_cfg, **{k: v for k, v in (overrides or {}).items() if v is not None}}

        scripts = list(params.get("scripts") or ["hiragana"])
        groups = list(params.get("groups") or [])
        count = int(params.get("questions", 5))

        pool = select_kana(scripts, groups)
        self.session = QuizSession(pool, count, rng=self.rng)
        self.state = RuntimeState()
        self.ctx = SessionContext(
            session_id=str(uuid4()),
            started_at=datetime.now(timezone.utc),
            scripts=scripts,
            groups=groups,
            questions=count,
            params=params,
        )
        xtrace(
            "session_started",
            {"pool": len(pool), "questions": self.session.get_total_questions(), "scripts": scripts, "groups": groups},
        )
        return self.session

    def run(self, ui: Dict[str, Callable[..., Any]]) -> Dict[str, Any]:
        assert self.ctx is not None and self.session is not None
        inform = ui["inform"]
        session = self.session
        total = session.get_total_questions()

        if total == 0:
            inform("No kana selected; nothing to quiz.")

        while not session.is_finished():
            kana = session.current()
            assert kana is not None
            n = session.get_current_question_number()
            xtrace("question_shown", {"index": n, "char": kana.char})
            answer = self._collect_answer(ui, f"Q{n}/{total}: {kana.char}  romaji? ")
            is_correct = answers_match(answer, kana.romaji)
            xtrace("graded", {"index": n, "answer": answer, "truth": kana.romaji, "correct": is_correct})
            session.record_result(is_correct, answer)
            if is_correct:
                inform("Correct!\n")
            else:
                inform(f"Incorrect. Answer was {kana.romaji}.\n")
            session.next()

        self.state.ended_at = datetime.now(timezone.utc)
        summary = {
            **summarize(session),
            "session_id": self.ctx.session_id,
            "started_at": self.ctx.started_at.isoformat(),
            "ended_at": self.state.ended_at.isoformat(),
        }
        xtrace("session_ended", {"total": summary["total"], "correct": summary["correct"]})
        self._persist(summary)
        return summary

    def _collect_answer(self, ui: Dict[str, Callable[..., Any]], prompt: str) -> str:
        """Spoken answer when a recognizer and a `listen` callback exist, else typed.

        `listen(speech, prompt)` forwards recognizer callbacks until the status
        settles and returns it; anything but SUCCESS falls back to `ask`.
        """
        speech = self.speech
        listen = ui.get("listen")
        if speech is not None and listen is not None and speech.start():
            status = listen(speech, prompt)
            xtrace("speech_answer", {"status": getattr(status, "value", status), "transcript": speech.transcript})
            if status is SpeechStatus.SUCCESS:
                ui["inform"](f"Heard: {speech.transcript}")
                return speech.transcript
            if status is SpeechStatus.TIMEOUT:
                ui["inform"]("No speech heard; type your answer.")
            elif speech.last_error:
                ui["inform"](speech.last_error)
        return ui["ask"](prompt)

    def _persist(self, summary: Dict[str, Any]) -> None:
        assert self.ctx is not None and self.session is not None
        stats_cfg = self.cfg.get("stats", {})
        if not bool(stats_cfg.get("persist", False)):
            return
        out_path = stats_cfg.get("output_path")
        if out_path:
            write_stats(summary, str(out_path))
        history_dir = stats_cfg.get("history_dir")
        results = self.session.get_results()
        if not history_dir or not results:
            return
        rows = [
            AnswerRow(
                session_id=self.ctx.session_id,
                session_start=self.ctx.started_at,
                position=i,
                char=r.kana.char,
                romaji=r.kana.romaji,
                script=r.kana.script,
                group=r.kana.group,
                correct=r.is_correct,
                answer=r.user_answer,
            )
            for i, r in enumerate(results, start=1)
        ]
        append_answers(validate_records(rows), Path(history_dir))
        upsert_session_meta(
            SessionMeta(
                session_id=self.ctx.session_id,
                session_start=self.ctx.started_at,
                app_version=__version__,
                questions=summary["total"],
                correct=summary["correct"],
                percentage=summary["percentage"],
            ),
            Path(history_dir),
        )
