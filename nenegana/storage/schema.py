from __future__ import annotations

"""Schema constants and Pydantic models for the Parquet answer history."""

from datetime import datetime, timezone
from typing import Literal, Optional

import pandas as pd
from pandas.api.types import CategoricalDtype
from pydantic import BaseModel, Field, ValidationInfo, field_validator

# --- Constants ---

SCRIPTS = {"hiragana", "katakana"}


def _cat_dtype(categories: set[str]) -> CategoricalDtype:
    return CategoricalDtype(categories=sorted(categories), ordered=False)


DTYPES = {
    "session_id": "string",
    # timezone-aware UTC timestamps
    "session_start": pd.DatetimeTZDtype(tz="UTC"),
    "position": "UInt16",
    "char": "string",
    "romaji": "string",
    "script": _cat_dtype(SCRIPTS),
    "group": "string",
    "correct": "boolean",
    "answer": "string",
}

META_DTYPES = {
    "session_id": "string",
    "session_start": pd.DatetimeTZDtype(tz="UTC"),
    "app_version": "string",
    "questions": "UInt16",
    "correct": "UInt16",
    "percentage": "UInt8",
}


def _utc(v: datetime) -> datetime:
    if v.tzinfo is None:
        return v.replace(tzinfo=timezone.utc)
    return v.astimezone(timezone.utc)


# --- Pydantic models ---

class AnswerRow(BaseModel):
    session_id: str
    session_start: datetime
    position: int = Field(ge=1, le=65535)
    char: str = Field(min_length=1)
    romaji: str = Field(min_length=1)
    script: Literal["hiragana", "katakana"]
    group: str = Field(min_length=1)
    correct: bool
    answer: Optional[str] = None

    @field_validator("session_start")
    @classmethod
    def _ensure_utc(cls, v: datetime) -> datetime:
        return _utc(v)


class SessionMeta(BaseModel):
    session_id: str
    session_start: datetime
    app_version: Optional[str] = None
    questions: int = Field(ge=0, le=65535)
    correct: int = Field(ge=0, le=65535)
    percentage: int = Field(ge=0, le=100)

    @field_validator("correct")
    @classmethod
    def _c_le_q(cls, v: int, info: ValidationInfo) -> int:
        q = int(info.data.get("questions", 0))
        if v > q:
            raise ValueError("correct must be <= questions")
        return v

    @field_validator("session_start")
    @classmethod
    def _ensure_utc(cls, v: datetime) -> datetime:
        return _utc(v)
