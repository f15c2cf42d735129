from .kana import Kana, SCRIPTS
from .table import all_kana, find_kana, list_groups, load_table, select_kana

__all__ = [
    "Kana",
    "SCRIPTS",
    "all_kana",
    "find_kana",
    "list_groups",
    "load_table",
    "select_kana",
]
