import tempfile
import unittest
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pandas as pd
from pydantic import ValidationError

from nenegana.storage import (
    AnswerRow,
    SessionMeta,
    append_answers,
    export_ndjson,
    init_store,
    kana_accuracy,
    load_all,
    load_sessions,
    upsert_session_meta,
    validate_records,
)


T0 = datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)


def _row(position, char, romaji, correct, session_id="s1", answer=None):
    return AnswerRow(
        session_id=session_id,
        session_start=T0,
        position=position,
        char=char,
        romaji=romaji,
        script="hiragana",
        group="a",
        correct=correct,
        answer=answer,
    )


class StoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.dir = Path(self.tmp.name) / "history"

    def test_init_store_creates_empty_tables(self) -> None:
        init_store(self.dir)
        self.assertTrue(load_all(self.dir).empty)
        self.assertTrue(load_sessions(self.dir).empty)
        self.assertEqual(list(load_all(self.dir).columns)[:3], ["session_id", "session_start", "position"])

    def test_validate_records_dtypes(self) -> None:
        df = validate_records([_row(1, "あ", "a", True), {"session_id": "s1", "session_start": T0, "position": 2,
                                                        "char": "い", "romaji": "i", "script": "hiragana",
                                                        "group": "a", "correct": False}])
        self.assertEqual(str(df["position"].dtype), "UInt16")
        self.assertEqual(str(df["correct"].dtype), "boolean")
        self.assertTrue(pd.isna(df.loc[1, "answer"]))

    def test_validate_records_rejects_bad_rows(self) -> None:
        with self.assertRaises(TypeError):
            validate_records(_row(1, "あ", "a", True))
        with self.assertRaises(ValidationError):
            validate_records([{"session_id": "s1", "session_start": T0, "position": 0, "char": "あ",
                               "romaji": "a", "script": "hiragana", "group": "a", "correct": True}])
        with self.assertRaises(ValidationError):
            validate_records([{"session_id": "s1", "session_start": T0, "position": 1, "char": "あ",
                               "romaji": "a", "script": "romaji", "group": "a", "correct": True}])

    def test_naive_timestamps_become_utc(self) -> None:
        row = AnswerRow(session_id="s", session_start=datetime(2024, 1, 1, 12), position=1, char="あ",
                        romaji="a", script="hiragana", group="a", correct=True)
        self.assertEqual(row.session_start.tzinfo, timezone.utc)

    def test_append_and_dedupe(self) -> None:
        rows = [_row(1, "あ", "a", True, answer="a"), _row(2, "い", "i", False, answer="e")]
        append_answers(validate_records(rows), self.dir)
        append_answers(validate_records(rows), self.dir)
        df = load_all(self.dir)
        self.assertEqual(len(df), 2)
        self.assertEqual(list(df["char"]), ["あ", "い"])

    def test_kana_accuracy_weakest_first(self) -> None:
        rows = [
            _row(1, "あ", "a", True),
            _row(2, "い", "i", False),
            _row(3, "あ", "a", True),
            _row(1, "う", "u", False, session_id="s2"),
            _row(2, "う", "u", False, session_id="s2"),
            _row(3, "い", "i", True, session_id="s2"),
        ]
        append_answers(validate_records(rows), self.dir)
        acc = kana_accuracy(load_all(self.dir))
        self.assertEqual(list(acc["char"]), ["う", "い", "あ"])
        self.assertEqual(list(acc["asked"]), [2, 2, 2])
        self.assertAlmostEqual(float(acc.loc[1, "acc"]), 0.5)

    def test_kana_accuracy_empty(self) -> None:
        acc = kana_accuracy(load_all(self.dir))
        self.assertTrue(acc.empty)
        self.assertIn("acc", acc.columns)

    def test_upsert_session_meta(self) -> None:
        upsert_session_meta(SessionMeta(session_id="s1", session_start=T0, questions=5, correct=2, percentage=40),
                            self.dir)
        upsert_session_meta(SessionMeta(session_id="s0", session_start=T0 - timedelta(days=1), questions=3,
                                        correct=3, percentage=100), self.dir)
        upsert_session_meta(SessionMeta(session_id="s1", session_start=T0, questions=5, correct=4, percentage=80),
                            self.dir)
        meta = load_sessions(self.dir)
        self.assertEqual(list(meta["session_id"]), ["s0", "s1"])
        self.assertEqual(int(meta.loc[1, "correct"]), 4)

    def test_meta_correct_cannot_exceed_questions(self) -> None:
        with self.assertRaises(ValidationError):
            SessionMeta(session_id="s", session_start=T0, questions=2, correct=3, percentage=100)

    def test_export_ndjson(self) -> None:
        append_answers(validate_records([_row(1, "あ", "a", True)]), self.dir)
        out = Path(self.tmp.name) / "export" / "answers.ndjson"
        export_ndjson(load_all(self.dir), out)
        lines = out.read_text(encoding="utf-8").splitlines()
        self.assertEqual(len(lines), 1)
        self.assertIn("あ", lines[0])


if __name__ == "__main__":
    unittest.main()
