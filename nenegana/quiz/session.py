from __future__ import annotations

"""Quiz session: a randomized, fixed-length run over a kana pool.

The session only does bookkeeping. Callers show `current()`, decide whether
the answer was right, then call `record_result` followed by `next`.
"""

import random
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from ..kana.kana import Kana


class QuizError(Exception):
    """Base class for quiz contract violations."""


class NoCurrentQuestion(QuizError):
    pass


class InvalidInput(QuizError, ValueError):
    pass


class DuplicateResult(QuizError):
    pass


@dataclass(frozen=True)
class QuizResult:
    kana: Kana
    is_correct: bool
    user_answer: Optional[str] = None


@dataclass(frozen=True)
class Score:
    correct: int
    total: int
    percentage: int

    def as_dict(self) -> Dict[str, int]:
        return {"correct": self.correct, "total": self.total, "percentage": self.percentage}


def _percent(correct: int, total: int) -> int:
    """Round 100 * correct / total half-up, in integers."""
    if total <= 0:
        return 0
    return (200 * correct + total) // (2 * total)


class QuizSession:
    def __init__(
        self,
        pool: Sequence[Kana],
        requested_count: int = 5,
        rng: Optional[random.Random] = None,
    ) -> None:
        if requested_count < 0:
            raise InvalidInput(f"requested_count must be >= 0, got {requested_count}")
        self._rng = rng if rng is not None else random.Random()
        shuffled = list(pool)
        self._rng.shuffle(shuffled)
        self._questions: tuple[Kana, ...] = tuple(shuffled[:requested_count])
        self._index = 0
        self._results: List[QuizResult] = []

    @property
    def questions(self) -> tuple[Kana, ...]:
        return self._questions

    @property
    def current_index(self) -> int:
        return self._index

    def current(self) -> Optional[Kana]:
        if self._index >= len(self._questions):
            return None
        return self._questions[self._index]

    def record_result(self, is_correct: bool, user_answer: Optional[str] = None) -> None:
        kana = self.current()
        if kana is None:
            raise NoCurrentQuestion("No current question to record result for")
        if len(self._results) > self._index:
            raise DuplicateResult(f"Result already recorded for question {self._index + 1}")
        self._results.append(QuizResult(kana=kana, is_correct=bool(is_correct), user_answer=user_answer))

    def next(self) -> bool:
        """Advance one question; return True while a question remains."""
        if self._index < len(self._questions):
            self._index += 1
        return not self.is_finished()

    def is_finished(self) -> bool:
        return self._index >= len(self._questions)

    def get_results(self) -> List[QuizResult]:
        return list(self._results)

    def get_score(self) -> Score:
        correct = sum(1 for r in self._results if r.is_correct)
        total = len(self._results)
        return Score(correct=correct, total=total, percentage=_percent(correct, total))

    def get_current_question_number(self) -> int:
        return self._index + 1

    def get_total_questions(self) -> int:
        return len(self._questions)

    def get_missed_kana(self) -> List[Kana]:
        return [r.kana for r in self._results if not r.is_correct]
