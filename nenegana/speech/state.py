from __future__ import annotations

"""Speech input state machine.

The platform recognizer is reached through a small `SpeechBackend` protocol;
its callbacks are forwarded to `SpeechInput.on_*` by the owner. Timeouts are
driven by `poll()` against an injectable clock, so tests can step time
without threads or a real recognizer.
"""

import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Protocol, Tuple

from ..app.explain import trace as xtrace
from ..matching.normalize import answers_match


class SpeechStatus(str, Enum):
    IDLE = "idle"
    LISTENING = "listening"
    PROCESSING = "processing"
    SUCCESS = "success"
    ERROR = "error"
    TIMEOUT = "timeout"
    UNSUPPORTED = "unsupported"


class InvalidTransition(Exception):
    pass


S = SpeechStatus

# (status, event) -> next status. Anything absent is an illegal transition.
TRANSITIONS: Dict[Tuple[SpeechStatus, str], SpeechStatus] = {
    (S.IDLE, "start"): S.IDLE,
    (S.IDLE, "audio_start"): S.LISTENING,
    (S.IDLE, "stop"): S.IDLE,
    (S.IDLE, "end"): S.IDLE,
    (S.IDLE, "reset"): S.IDLE,
    # results may still arrive after stop() or a timeout
    (S.IDLE, "result"): S.PROCESSING,
    (S.LISTENING, "result"): S.PROCESSING,
    (S.LISTENING, "error"): S.ERROR,
    (S.LISTENING, "timeout"): S.TIMEOUT,
    (S.LISTENING, "end"): S.TIMEOUT,
    (S.LISTENING, "stop"): S.IDLE,
    (S.LISTENING, "audio_start"): S.LISTENING,
    (S.PROCESSING, "success"): S.SUCCESS,
    (S.PROCESSING, "error"): S.ERROR,
    (S.PROCESSING, "stop"): S.IDLE,
    (S.PROCESSING, "end"): S.PROCESSING,
    (S.SUCCESS, "stop"): S.SUCCESS,
    (S.SUCCESS, "end"): S.SUCCESS,
    (S.SUCCESS, "reset"): S.IDLE,
    (S.ERROR, "stop"): S.ERROR,
    (S.ERROR, "end"): S.ERROR,
    (S.ERROR, "reset"): S.IDLE,
    (S.TIMEOUT, "stop"): S.TIMEOUT,
    (S.TIMEOUT, "end"): S.TIMEOUT,
    (S.TIMEOUT, "reset"): S.IDLE,
    (S.TIMEOUT, "result"): S.PROCESSING,
}
# Any state may drop to unsupported (missing API, unsupported language)
for _s in SpeechStatus:
    TRANSITIONS[(_s, "unsupported")] = S.UNSUPPORTED
    TRANSITIONS.setdefault((_s, "error"), S.ERROR)
TRANSITIONS[(S.UNSUPPORTED, "error")] = S.UNSUPPORTED
TRANSITIONS[(S.UNSUPPORTED, "stop")] = S.UNSUPPORTED
TRANSITIONS[(S.UNSUPPORTED, "end")] = S.UNSUPPORTED


def next_status(status: SpeechStatus, event: str) -> SpeechStatus:
    try:
        return TRANSITIONS[(status, event)]
    except KeyError:
        raise InvalidTransition(f"No transition from {status.value!r} on {event!r}") from None


# Recognizer error code -> (user message, resulting status)
ERROR_MESSAGES: Dict[str, Tuple[str, SpeechStatus]] = {
    "not-allowed": ("Microphone access denied. Please allow microphone access and try again.", S.ERROR),
    "no-speech": ("No speech detected. Try speaking more clearly.", S.ERROR),
    "audio-capture": ("No microphone found. Please check your microphone and try again.", S.ERROR),
    "network": ("Network error. Please try again.", S.ERROR),
    "service-not-allowed": ("Speech service unavailable. Please try again.", S.ERROR),
    "bad-grammar": ("Language not supported. Use text input instead.", S.UNSUPPORTED),
    "language-not-supported": ("Language not supported. Use text input instead.", S.UNSUPPORTED),
}

ERROR_DISPLAY_S = 2.0


def describe_error(code: str) -> Tuple[str, SpeechStatus]:
    if code in ERROR_MESSAGES:
        return ERROR_MESSAGES[code]
    return f"Speech error: {code}. Please try again.", S.ERROR


@dataclass(frozen=True)
class SpeechResult:
    transcript: str
    confidence: float


class SpeechBackend(Protocol):
    def start(self, lang: str) -> None: ...

    def stop(self) -> None: ...


class SpeechInput:
    """Drives one recognizer through the status table."""

    def __init__(
        self,
        backend: Optional[SpeechBackend],
        *,
        lang: str = "ja-JP",
        timeout_ms: int = 3000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.backend = backend
        self.lang = lang
        self.timeout_ms = int(timeout_ms)
        self._clock = clock
        self._status = S.IDLE
        self._listeners: List[Callable[[SpeechStatus], None]] = []
        self._started_at: Optional[float] = None
        self._error_at: Optional[float] = None
        self.transcript = ""
        self.confidence = 0.0
        self.last_error: Optional[str] = None
        self.last_result: Optional[SpeechResult] = None
        if backend is None:
            self._fire("unsupported")
            self.last_error = "Speech recognition not supported in this environment"

    @classmethod
    def from_config(
        cls,
        speech_cfg: Dict[str, Any],
        backend: Optional[SpeechBackend],
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> "SpeechInput":
        """Build from the `speech` config section (`lang`, `timeout_ms`)."""
        return cls(
            backend,
            lang=str(speech_cfg.get("lang", "ja-JP")),
            timeout_ms=int(speech_cfg.get("timeout_ms", 3000)),
            clock=clock,
        )

    # --- observers ---
    def on_status_change(self, callback: Callable[[SpeechStatus], None]) -> None:
        self._listeners.append(callback)

    def _fire(self, event: str) -> SpeechStatus:
        new = next_status(self._status, event)
        changed = new is not self._status
        self._status = new
        if changed:
            xtrace("speech_status", {"event": event, "status": new.value})
            for cb in list(self._listeners):
                cb(new)
        return new

    # --- properties ---
    @property
    def status(self) -> SpeechStatus:
        return self._status

    @property
    def is_listening(self) -> bool:
        return self._status is S.LISTENING

    @property
    def is_supported(self) -> bool:
        return self.backend is not None and self._status is not S.UNSUPPORTED

    # --- commands ---
    def start(self) -> bool:
        if not self.is_supported:
            return False
        if self._status is S.LISTENING:
            return True
        if self._status is not S.IDLE:
            self.stop()
            self._fire("reset")
        self._started_at = self._clock()
        self._error_at = None
        self.transcript = ""
        self.confidence = 0.0
        assert self.backend is not None
        try:
            self.backend.start(self.lang)
        except Exception as e:
            self._started_at = None
            self.last_error = str(e) or "Failed to start speech recognition"
            self._fire("error")
            self._error_at = self._clock()
            return False
        self._fire("start")
        return True

    def stop(self) -> None:
        was_active = self._status in (S.LISTENING, S.PROCESSING)
        self._started_at = None
        if was_active:
            self._stop_backend()
        self._fire("stop")

    def _stop_backend(self) -> None:
        if self.backend is None:
            return
        try:
            self.backend.stop()
        except Exception:
            # recognizer may already be stopped
            pass

    # --- recognizer callbacks ---
    def on_audio_start(self) -> None:
        self._fire("audio_start")

    def on_result(self, transcript: str, confidence: float = 0.0) -> None:
        self._fire("result")
        text = (transcript or "").strip()
        if not text:
            return
        self.transcript = text
        self.confidence = float(confidence or 0.0)
        self.last_result = SpeechResult(transcript=text, confidence=self.confidence)
        self._fire("success")
        self._stop_backend()
        self._started_at = None

    def on_error(self, code: str) -> None:
        message, status = describe_error(code)
        self.last_error = message
        self._started_at = None
        if status is S.UNSUPPORTED:
            self._fire("unsupported")
            return
        self._fire("error")
        self._error_at = self._clock()
        self._stop_backend()

    def on_end(self) -> None:
        self._started_at = None
        self._fire("end")

    def poll(self) -> SpeechStatus:
        """Apply clock-driven transitions and return the current status."""
        now = self._clock()
        if self._status is S.LISTENING and self._started_at is not None:
            if (now - self._started_at) * 1000.0 >= self.timeout_ms:
                self._started_at = None
                self._fire("timeout")
                self._stop_backend()
        elif self._status is S.ERROR and self._error_at is not None:
            if now - self._error_at >= ERROR_DISPLAY_S:
                self._error_at = None
                self._fire("reset")
        return self._status

    def compare_with_answer(self, expected: str) -> bool:
        return answers_match(self.transcript, expected)
