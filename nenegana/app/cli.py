from __future__ import annotations

"""CLI for Nenegana using QuizRunner and the kana table."""

import argparse
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from .. import __version__
from ..config.config import load_config, validate_config
from ..kana.kana import SCRIPTS, Kana
from ..kana.table import find_kana, list_groups, load_table, select_kana
from ..quiz.session import QuizError
from ..stats.stats import format_summary
from ..storage.store import kana_accuracy, load_all
from .events import Navigator, Route
from .session_manager import QuizRunner


def _build_ui(
    input_fn: Optional[Callable[[str], str]] = None,
    print_fn: Optional[Callable[[str], None]] = None,
) -> Dict[str, Any]:
    def ask(prompt: str) -> str:
        try:
            return (input_fn or input)(prompt)
        except EOFError:
            return ""

    def inform(msg: str) -> None:
        (print_fn or print)(msg)

    return {"ask": ask, "inform": inform}


def _format_grid(kana: List[Kana], columns: int, show_romaji: bool) -> str:
    lines: List[str] = []
    for start in range(0, len(kana), columns):
        row = kana[start:start + columns]
        if show_romaji:
            lines.append("  ".join(f"{k.char} {k.romaji:<3}" for k in row).rstrip())
        else:
            lines.append("  ".join(k.char for k in row))
    return "\n".join(lines)


def _format_card(k: Kana) -> str:
    return "\n".join(
        [
            f"  {k.char}",
            f"  Romaji: {k.romaji}",
            f"  Type:   {k.script.capitalize()}",
            f"  Group:  {k.group}",
        ]
    )


def _cfg(path: Optional[str]) -> Dict[str, Any]:
    return validate_config(load_config(path))


def _run_practice(cfg: Dict[str, Any], *, show_romaji: Optional[bool] = None,
                  columns: Optional[int] = None, detail: Optional[str] = None,
                  print_fn: Callable[[str], None] = print) -> int:
    practice = cfg.get("practice", {})
    quiz = cfg.get("quiz", {})
    if detail:
        try:
            k = find_kana(detail)
        except KeyError as e:
            print_fn(f"ERROR: {e.args[0]}")
            return 2
        print_fn(_format_card(k))
        return 0
    kana = select_kana(quiz.get("scripts", []), quiz.get("groups", []))
    romaji = practice.get("show_romaji", True) if show_romaji is None else show_romaji
    cols = columns if columns and columns > 0 else int(practice.get("columns", 5))
    print_fn(f"Practice: {len(kana)} characters")
    print_fn(_format_grid(kana, cols, bool(romaji)))
    return 0


def _run_quiz(cfg: Dict[str, Any], overrides: Dict[str, Any], ui: Dict[str, Any]) -> int:
    runner = QuizRunner(cfg)
    try:
        runner.start_session(overrides)
    except (QuizError, KeyError) as e:
        ui["inform"](f"ERROR: {e.args[0] if e.args else e}")
        return 2
    summary = runner.run(ui)
    ui["inform"]("\nQuiz Summary:")
    ui["inform"](format_summary(summary))
    return 0


def _run_menu(cfg: Dict[str, Any], ui: Dict[str, Any]) -> int:
    nav = Navigator()

    def show(route: Route) -> None:
        if route is Route.PRACTICE:
            _run_practice(cfg, print_fn=ui["inform"])
        elif route is Route.QUIZ:
            _run_quiz(cfg, {}, ui)

    nav.on_route_change(show)
    while True:
        ui["inform"](f"\nNenegana {__version__}: [p]ractice, [q]uiz, e[x]it")
        choice = ui["ask"]("> ").strip().lower()
        if choice in ("p", "practice"):
            nav.navigate(Route.PRACTICE)
        elif choice in ("q", "quiz"):
            nav.navigate(Route.QUIZ)
        elif choice in ("x", "exit", ""):
            return 0
        nav.navigate(Route.HOME)


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(prog="nenegana")
    p.add_argument("--version", action="version", version=f"nenegana {__version__}")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("list-groups")

    pp = sub.add_parser("practice")
    pp.add_argument("--config", default=None)
    pp.add_argument("--romaji", dest="show_romaji", action="store_true", help="Show romaji under each kana")
    pp.add_argument("--no-romaji", dest="show_romaji", action="store_false", help="Hide romaji")
    pp.set_defaults(show_romaji=None)
    pp.add_argument("--columns", type=int, default=None)
    pp.add_argument("--detail", default=None, help="Show the card for one kana character")

    qp = sub.add_parser("quiz")
    qp.add_argument("--config", default=None)
    qp.add_argument("--questions", type=int, default=None)
    qp.add_argument("--scripts", nargs="+", choices=list(SCRIPTS), default=None)
    qp.add_argument("--groups", nargs="+", default=None)
    qp.add_argument("--explain", action="store_true")
    qp.add_argument("--no-history", action="store_true", help="Do not write results or history")

    hp = sub.add_parser("history")
    hp.add_argument("--config", default=None)
    hp.add_argument("--limit", type=int, default=10)

    mp = sub.add_parser("menu")
    mp.add_argument("--config", default=None)

    args = p.parse_args(argv)

    if args.cmd == "list-groups":
        table = load_table()
        for group in list_groups():
            rows = table[group]
            print(f"{group}: " + " ".join(r[1] for r in rows) + " | " + " ".join(r[2] for r in rows))
        return 0

    if args.cmd == "practice":
        return _run_practice(
            _cfg(args.config), show_romaji=args.show_romaji, columns=args.columns, detail=args.detail
        )

    if args.cmd == "quiz":
        if args.explain:
            from .explain import enable as explain_enable
            explain_enable(True)
        cfg = _cfg(args.config)
        if args.no_history:
            cfg["stats"]["persist"] = False
        overrides = {"questions": args.questions, "scripts": args.scripts, "groups": args.groups}
        return _run_quiz(cfg, overrides, _build_ui())

    if args.cmd == "history":
        cfg = _cfg(args.config)
        df = load_all(Path(cfg["stats"]["history_dir"]))
        acc = kana_accuracy(df)
        if acc.empty:
            print("No quiz history yet.")
            return 0
        print(f"Answers recorded: {len(df)}")
        for row in acc.head(max(1, args.limit)).itertuples(index=False):
            print(f"{row.char} ({row.romaji}): {row.correct}/{row.asked} ({row.acc:.0%})")
        return 0

    if args.cmd == "menu":
        return _run_menu(_cfg(args.config), _build_ui())

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
