"""Cached route matcher.

Owns the three caches that sit in front of the pattern compiler:

- compiled patterns, keyed by full path (group + path), so routes that
  share a full path share one compiled regex,
- matches of static routes (no parameter or optional syntax), keyed by
  ``(method, path)``,
- the method index, routes grouped by method in registration order.

All three are dropped together by ``clear_cache()``, which the owner
must call whenever the route set changes.
"""

import logging
from collections.abc import Callable, Sequence

from waypost.config import RouterConfig
from waypost.routing.compiler import CompiledPattern, compile_pattern
from waypost.routing.route import Route, RouteMatch

logger = logging.getLogger("waypost.routing")

Compiler = Callable[[str, str], CompiledPattern]


class RouteMatcher:
    """Finds the first route matching a method and path.

    Usage::

        matcher = RouteMatcher()
        match = matcher.match(routes, "GET", "/users/42")
        ...
        routes.append(new_route)
        matcher.clear_cache()
    """

    __slots__ = ("_compiled", "_compiler", "_config", "_method_index", "_static")

    def __init__(
        self,
        config: RouterConfig | None = None,
        compiler: Compiler = compile_pattern,
    ) -> None:
        self._config = config or RouterConfig()
        self._compiler = compiler
        self._compiled: dict[str, CompiledPattern] = {}
        self._static: dict[tuple[str, str], Route] = {}
        self._method_index: dict[str, list[Route]] | None = None

    def match(self, routes: Sequence[Route], method: str, path: str) -> RouteMatch | None:
        """Return the first route in *routes* matching *method* and *path*.

        Registration order breaks ties between overlapping templates.
        Returns ``None`` when nothing matches.
        """
        method = method.upper()

        cached = self._static.get((method, path))
        if cached is not None:
            return RouteMatch(route=cached, params={})

        if self._method_index is None:
            self._method_index = self._build_index(routes)

        for route in self._method_index.get(method, ()):
            params = self.compiled(route.full_path).match(path)
            if params is None:
                continue
            if not params and route.is_static and self._config.cache_static:
                self._static[(method, path)] = route
            return RouteMatch(route=route, params=params)

        return None

    def compiled(self, full_path: str) -> CompiledPattern:
        """Return the compiled pattern for *full_path*, compiling on first use."""
        pattern = self._compiled.get(full_path)
        if pattern is None:
            pattern = self._compiler(full_path, self._config.default_pattern)
            self._compiled[full_path] = pattern
            logger.debug("Compiled %r -> %s", full_path, pattern.regex.pattern)
        return pattern

    def clear_cache(self) -> None:
        """Drop compiled patterns, memoized static matches, and the method index."""
        self._compiled.clear()
        self._static.clear()
        self._method_index = None
        logger.debug("Route matcher caches cleared")

    @staticmethod
    def _build_index(routes: Sequence[Route]) -> dict[str, list[Route]]:
        index: dict[str, list[Route]] = {}
        for route in routes:
            index.setdefault(route.method, []).append(route)
        return index
