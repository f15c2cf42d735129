import io
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path

from nenegana.config.config import load_config, validate_config


class ConfigTests(unittest.TestCase):
    def test_package_defaults(self) -> None:
        cfg = validate_config(load_config())
        self.assertEqual(cfg["quiz"]["questions"], 5)
        self.assertEqual(cfg["quiz"]["scripts"], ["hiragana"])
        self.assertEqual(cfg["quiz"]["groups"], ["a", "ka", "sa", "ta", "na"])
        self.assertTrue(cfg["practice"]["show_romaji"])
        self.assertEqual(cfg["speech"]["lang"], "ja-JP")
        self.assertEqual(cfg["speech"]["timeout_ms"], 3000)

    def test_empty_config_gets_defaults(self) -> None:
        cfg = validate_config({})
        self.assertEqual(cfg["quiz"]["questions"], 5)
        self.assertEqual(cfg["practice"]["columns"], 5)
        self.assertTrue(cfg["stats"]["persist"])

    def test_yaml_file(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "cfg.yml"
            p.write_text("quiz:\n  questions: 10\n  scripts: [katakana]\n  groups: [ha, ma]\n", encoding="utf-8")
            cfg = validate_config(load_config(str(p)))
        self.assertEqual(cfg["quiz"]["questions"], 10)
        self.assertEqual(cfg["quiz"]["scripts"], ["katakana"])
        self.assertEqual(cfg["quiz"]["groups"], ["ha", "ma"])

    def test_missing_file_exits(self) -> None:
        err = io.StringIO()
        with redirect_stderr(err), self.assertRaises(SystemExit) as cm:
            load_config("/nonexistent/nenegana.yml")
        self.assertEqual(cm.exception.code, 1)
        self.assertIn("Config file not found", err.getvalue())

    def test_invalid_values_fall_back_with_warning(self) -> None:
        out = io.StringIO()
        with redirect_stdout(out):
            cfg = validate_config(
                {"quiz": {"questions": -2, "scripts": ["cyrillic"], "groups": ["zz", "ka"]}}
            )
        self.assertEqual(cfg["quiz"]["questions"], 5)
        self.assertEqual(cfg["quiz"]["scripts"], ["hiragana"])
        self.assertEqual(cfg["quiz"]["groups"], ["ka"])
        text = out.getvalue()
        self.assertIn("WARNING: Unsupported kana script 'cyrillic'", text)
        self.assertIn("WARNING: Unknown kana group 'zz'", text)

    def test_zero_questions_kept(self) -> None:
        cfg = validate_config({"quiz": {"questions": 0}})
        self.assertEqual(cfg["quiz"]["questions"], 0)


if __name__ == "__main__":
    unittest.main()
