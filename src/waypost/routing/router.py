"""Route registry with lazy, cached matching.

Routes are kept in registration order. Templates are compiled the first
time a request reaches them and stay cached until the route set changes.
"""

import logging
import threading
from collections.abc import Iterable
from dataclasses import replace
from typing import Any

from waypost.config import RouterConfig
from waypost.errors import DuplicateRouteNameError, UnsupportedMethodError
from waypost.routing.matcher import RouteMatcher
from waypost.routing.route import Route, RouteMatch

logger = logging.getLogger("waypost.routing")


class Router:
    """Route registry and request matcher.

    Usage::

        router = Router()
        router.add_route("GET", "/users/{id:[0-9]+}", show_user, name="users.show")
        match = router.match("GET", "/users/42")
        if match is not None:
            match.handler, match.params  # show_user, {"id": "42"}

    Registration and matching are serialized by a single lock, so a
    reader never sees a route without its index and cache entries.
    """

    __slots__ = ("_config", "_lock", "_matcher", "_names", "_routes")

    def __init__(
        self,
        routes: Iterable[Route] = (),
        *,
        config: RouterConfig | None = None,
    ) -> None:
        self._config = config or RouterConfig()
        self._lock = threading.Lock()
        self._matcher = RouteMatcher(self._config)
        self._routes: list[Route] = []
        self._names: dict[str, Route] = {}

        for route in routes:
            self.add(route)

    @property
    def config(self) -> RouterConfig:
        return self._config

    @property
    def routes(self) -> tuple[Route, ...]:
        """All registered routes, in registration order."""
        return tuple(self._routes)

    def add_route(
        self,
        method: str,
        path: str,
        handler: Any,
        *,
        group: str = "",
        middlewares: Iterable[Any] = (),
        name: str | None = None,
    ) -> Route:
        """Register a route and return it.

        Raises ``UnsupportedMethodError`` for a method outside
        ``config.methods`` and ``DuplicateRouteNameError`` when *name* is
        already taken. In both cases nothing is registered.
        """
        route = Route(
            method=method.upper(),
            path=path,
            handler=handler,
            group=group,
            middlewares=tuple(middlewares),
            name=name,
        )
        self.add(route)
        return route

    def add(self, route: Route) -> None:
        """Register a prebuilt route. Validates like ``add_route``."""
        method = route.method.upper()
        if method not in self._config.methods:
            raise UnsupportedMethodError(route.method)
        if method != route.method:
            route = replace(route, method=method)

        with self._lock:
            if route.name and route.name in self._names:
                raise DuplicateRouteNameError(route.name)

            self._routes.append(route)
            if route.name:
                self._names[route.name] = route
            self._matcher.clear_cache()

        logger.debug("Registered %s %s", route.method, route.full_path)

    def match(self, method: str, uri: str) -> RouteMatch | None:
        """Match a request against the registered routes.

        The method is compared case-insensitively. Returns ``None`` when
        no route matches. A template with unbalanced brackets raises
        ``PatternError`` the first time a request reaches it.
        """
        with self._lock:
            return self._matcher.match(self._routes, method, uri)

    def get_route_by_name(self, name: str) -> Route | None:
        return self._names.get(name)

    def clear_cache(self) -> None:
        """Drop all compiled and memoized state. Rebuilt lazily on next match."""
        with self._lock:
            self._matcher.clear_cache()
