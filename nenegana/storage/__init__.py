from .schema import SCRIPTS, DTYPES, META_DTYPES, AnswerRow, SessionMeta
from .store import (
    init_store,
    validate_records,
    append_answers,
    upsert_session_meta,
    load_all,
    load_sessions,
    kana_accuracy,
    export_ndjson,
)

__all__ = [
    "SCRIPTS",
    "DTYPES",
    "META_DTYPES",
    "AnswerRow",
    "SessionMeta",
    "init_store",
    "validate_records",
    "append_answers",
    "upsert_session_meta",
    "load_all",
    "load_sessions",
    "kana_accuracy",
    "export_ndjson",
]
