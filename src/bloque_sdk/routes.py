"""Public route matching."""

from __future__ import annotations

import re
from typing import Iterable, Pattern, Tuple

from .constants import PUBLIC_ROUTES


def compile_route(route: str) -> Pattern[str]:
    pattern = "/".join("[^/]+" if segment == "*" else re.escape(segment) for segment in route.split("/"))
    return re.compile(f"^{pattern}$")


class RouteMatcher:
    def __init__(self, routes: Iterable[str] = PUBLIC_ROUTES) -> None:
        self._patterns: Tuple[Pattern[str], ...] = tuple(compile_route(route) for route in routes)

    def is_public(self, path: str) -> bool:
        path_without_query = path.split("?", 1)[0]
        return any(pattern.match(path_without_query) for pattern in self._patterns)


__all__ = ["RouteMatcher", "compile_route"]
