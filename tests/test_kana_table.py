import unittest

from nenegana.kana import Kana, all_kana, find_kana, list_groups, load_table, select_kana
from nenegana.kana import table as kana_table


class KanaTableTests(unittest.TestCase):
    def test_default_selection_is_hiragana(self) -> None:
        groups = ["a", "ka", "sa", "ta", "na"]
        kana = select_kana(["hiragana"], groups)
        self.assertEqual(len(kana), 25)
        self.assertTrue(all(k.script == "hiragana" for k in kana))
        self.assertTrue(all(k.group in groups for k in kana))

    def test_filter_by_group(self) -> None:
        kana = select_kana(["hiragana"], ["a"])
        self.assertEqual([k.romaji for k in kana], ["a", "i", "u", "e", "o"])

    def test_both_scripts(self) -> None:
        kana = select_kana(["hiragana", "katakana"], ["a"])
        self.assertEqual(len(kana), 10)
        self.assertTrue(any(k.script == "katakana" for k in kana))
        self.assertIn(Kana(char="ア", romaji="a", script="katakana", group="a"), kana)

    def test_romaji_are_strings(self) -> None:
        # "no" and "n" must not come back as YAML booleans
        self.assertEqual(find_kana("の").romaji, "no")
        self.assertEqual(find_kana("ん").romaji, "n")
        self.assertTrue(all(isinstance(k.romaji, str) for k in all_kana()))

    def test_hepburn_spellings(self) -> None:
        self.assertEqual(find_kana("し").romaji, "shi")
        self.assertEqual(find_kana("チ").romaji, "chi")
        self.assertEqual(find_kana("つ").romaji, "tsu")
        self.assertEqual(find_kana("ふ").romaji, "fu")

    def test_groups_in_table_order(self) -> None:
        groups = list_groups()
        self.assertEqual(groups[:5], ["a", "ka", "sa", "ta", "na"])
        self.assertIn("pa", groups)

    def test_basic_table_size(self) -> None:
        basic = ["a", "ka", "sa", "ta", "na", "ha", "ma", "ya", "ra", "wa", "n"]
        self.assertEqual(len(select_kana(["hiragana"], basic)), 46)
        self.assertEqual(len(select_kana(["katakana"], basic)), 46)

    def test_unknown_names_raise(self) -> None:
        with self.assertRaises(KeyError):
            select_kana(["romaji"], ["a"])
        with self.assertRaises(KeyError):
            select_kana(["hiragana"], ["xa"])
        with self.assertRaises(KeyError):
            find_kana("x")

    def test_empty_selection(self) -> None:
        self.assertEqual(select_kana([], []), [])

    def test_table_file_parsed_once(self) -> None:
        kana_table._read_table.cache_clear()
        kana_table._all_kana.cache_clear()
        list_groups()
        select_kana(["hiragana"], ["a"])
        load_table()
        self.assertEqual(kana_table._read_table.cache_info().misses, 1)

    def test_load_table_returns_fresh_copy(self) -> None:
        table = load_table()
        table["a"].clear()
        table["zz"] = []
        self.assertEqual(len(load_table()["a"]), 5)
        self.assertNotIn("zz", list_groups())

    def test_json_round_trip(self) -> None:
        k = find_kana("か")
        self.assertEqual(Kana.from_json(k.to_json()), k)


if __name__ == "__main__":
    unittest.main()
