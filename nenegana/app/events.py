from __future__ import annotations

"""Screen navigation: an explicit navigator with route-change observers."""

from enum import Enum
from typing import Callable, List


class Route(str, Enum):
    HOME = "home"
    PRACTICE = "practice"
    QUIZ = "quiz"


def parse_route(text: str | None) -> Route:
    """Map 'quiz', '#/quiz' or '/quiz' to a Route; anything else is HOME."""
    key = (text or "").strip().lower().lstrip("#").strip("/")
    for r in Route:
        if r.value == key:
            return r
    return Route.HOME


class Navigator:
    def __init__(self, initial: Route = Route.HOME) -> None:
        self.current = initial
        self._subs: List[Callable[[Route], None]] = []

    def on_route_change(self, handler: Callable[[Route], None]) -> None:
        self._subs.append(handler)

    def navigate(self, route: Route | str) -> Route:
        target = route if isinstance(route, Route) else parse_route(route)
        self.current = target
        for h in list(self._subs):
            h(target)
        return target
