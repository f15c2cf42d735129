from .session import (
    DuplicateResult,
    InvalidInput,
    NoCurrentQuestion,
    QuizError,
    QuizResult,
    QuizSession,
    Score,
)

__all__ = [
    "DuplicateResult",
    "InvalidInput",
    "NoCurrentQuestion",
    "QuizError",
    "QuizResult",
    "QuizSession",
    "Score",
]
