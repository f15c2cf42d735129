from __future__ import annotations

"""Parquet-backed answer history using pandas + pyarrow.

Unit of data: one row per answered question (session x position).
"""

from pathlib import Path

import pandas as pd

from .schema import DTYPES, META_DTYPES, AnswerRow, SessionMeta


DATA_FILE = "answers.parquet"
META_FILE = "sessions.parquet"


def _empty_df(dtypes: dict) -> pd.DataFrame:
    return pd.DataFrame({k: pd.Series(dtype=v) for k, v in dtypes.items()})


def _fix_dtypes(df: pd.DataFrame, dtypes: dict) -> pd.DataFrame:
    for col, dt in dtypes.items():
        if col not in df.columns:
            df[col] = pd.NA
        df[col] = df[col].astype(dt)
    return df[list(dtypes.keys())]


def init_store(data_dir: Path) -> None:
    """Ensure data directory and empty Parquet files with correct schema exist."""
    data_dir = Path(data_dir)
    data_dir.mkdir(parents=True, exist_ok=True)
    if not (data_dir / DATA_FILE).exists():
        _empty_df(DTYPES).to_parquet(data_dir / DATA_FILE, engine="pyarrow", compression="zstd", index=False)
    if not (data_dir / META_FILE).exists():
        _empty_df(META_DTYPES).to_parquet(data_dir / META_FILE, engine="pyarrow", compression="zstd", index=False)


def validate_records(records: list[AnswerRow]) -> pd.DataFrame:
    """Validate AnswerRows (or plain dicts) and return a DataFrame with proper dtypes."""
    if not isinstance(records, list):
        raise TypeError("records must be a list[AnswerRow]")
    rows = [r if isinstance(r, AnswerRow) else AnswerRow.model_validate(r) for r in records]
    df = pd.DataFrame([r.model_dump() for r in rows])
    return _fix_dtypes(df, DTYPES)


def append_answers(df_new: pd.DataFrame, data_dir: Path) -> None:
    """Append rows to the answers table.

    Reads existing, concatenates, fixes dtypes, drops exact duplicates, and
    writes back.
    """
    f = Path(data_dir) / DATA_FILE
    if f.exists():
        df_old = _fix_dtypes(pd.read_parquet(f, engine="pyarrow"), DTYPES)
    else:
        Path(data_dir).mkdir(parents=True, exist_ok=True)
        df_old = _empty_df(DTYPES)
    df_new = _fix_dtypes(df_new.copy(), DTYPES)
    frames = [d for d in (df_old, df_new) if not d.empty]
    if not frames:
        return
    combined = _fix_dtypes(pd.concat(frames, ignore_index=True), DTYPES)
    combined = combined.drop_duplicates()
    combined.to_parquet(f, engine="pyarrow", compression="zstd", index=False)


def upsert_session_meta(meta: SessionMeta, data_dir: Path) -> None:
    """Insert or update a single session metadata row keyed by session_id."""
    f = Path(data_dir) / META_FILE
    row = SessionMeta.model_validate(meta.model_dump() if isinstance(meta, SessionMeta) else meta).model_dump()
    df_new = _fix_dtypes(pd.DataFrame([row]), META_DTYPES)
    if f.exists():
        df = _fix_dtypes(pd.read_parquet(f, engine="pyarrow"), META_DTYPES)
        df = df[df["session_id"] != row["session_id"]]
        df = pd.concat([d for d in (df, df_new) if not d.empty], ignore_index=True)
    else:
        Path(data_dir).mkdir(parents=True, exist_ok=True)
        df = df_new
    _fix_dtypes(df, META_DTYPES).to_parquet(f, engine="pyarrow", compression="zstd", index=False)


def load_all(data_dir: Path) -> pd.DataFrame:
    """Load the full answer history with consistent dtypes."""
    f = Path(data_dir) / DATA_FILE
    if not f.exists():
        return _empty_df(DTYPES)
    return _fix_dtypes(pd.read_parquet(f, engine="pyarrow"), DTYPES)


def load_sessions(data_dir: Path) -> pd.DataFrame:
    f = Path(data_dir) / META_FILE
    if not f.exists():
        return _empty_df(META_DTYPES)
    df = _fix_dtypes(pd.read_parquet(f, engine="pyarrow"), META_DTYPES)
    return df.sort_values("session_start", kind="stable").reset_index(drop=True)


def kana_accuracy(df: pd.DataFrame) -> pd.DataFrame:
    """Per-kana asked/correct/acc, weakest first (ties: most asked first)."""
    if df.empty:
        return pd.DataFrame(
            {
                "char": pd.Series(dtype="string"),
                "romaji": pd.Series(dtype="string"),
                "script": pd.Series(dtype="string"),
                "asked": pd.Series(dtype="int64"),
                "correct": pd.Series(dtype="int64"),
                "acc": pd.Series(dtype="float32"),
            }
        )
    work = df.assign(
        script=df["script"].astype("string"),
        correct=df["correct"].fillna(False).astype("int64"),
    )
    out = (
        work.groupby(["char", "romaji", "script"], sort=False)
        .agg(asked=("correct", "size"), correct=("correct", "sum"))
        .reset_index()
    )
    out["acc"] = (out["correct"] / out["asked"]).astype("float32")
    return out.sort_values(["acc", "asked"], ascending=[True, False], kind="stable").reset_index(drop=True)


def export_ndjson(df: pd.DataFrame, out_path: Path) -> None:
    """Export a DataFrame to line-delimited JSON (NDJSON) for quick inspection."""
    Path(out_path).parent.mkdir(parents=True, exist_ok=True)
    df.to_json(out_path, orient="records", lines=True, date_format="iso", force_ascii=False)
