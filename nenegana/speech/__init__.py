from .state import (
    ERROR_MESSAGES,
    TRANSITIONS,
    InvalidTransition,
    SpeechBackend,
    SpeechInput,
    SpeechResult,
    SpeechStatus,
    describe_error,
    next_status,
)

__all__ = [
    "ERROR_MESSAGES",
    "TRANSITIONS",
    "InvalidTransition",
    "SpeechBackend",
    "SpeechInput",
    "SpeechResult",
    "SpeechStatus",
    "describe_error",
    "next_status",
]
