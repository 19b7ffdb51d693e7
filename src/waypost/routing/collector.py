"""Route collector — per-verb helpers and prefix/middleware groups."""

from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import Any, Self

from waypost.config import RouterConfig
from waypost.routing.route import Route
from waypost.routing.router import Router


class RouteCollector(Router):
    """Router with ``get``/``post``/... helpers and nested groups.

    Usage::

        routes = RouteCollector()
        routes.get("/", index)
        with routes.group("/api", middlewares=[auth]):
            routes.get("/users/{id}", show_user, name="users.show")
            with routes.group("/v2"):
                routes.post("/users", create_user)

    Group prefixes are concatenated as-is, with no separator. Route
    middlewares run before group middlewares, and an inner group's
    middlewares before those of the groups around it.

    The current group is per-collector state and is not guarded by the
    router lock: build groups from one thread during setup. Matching
    stays safe to call from many threads afterwards.
    """

    __slots__ = ("_group", "_group_middlewares")

    def __init__(
        self,
        routes: Iterable[Route] = (),
        *,
        config: RouterConfig | None = None,
    ) -> None:
        self._group = ""
        self._group_middlewares: tuple[Any, ...] = ()
        super().__init__(routes, config=config)

    def get(self, path: str, handler: Any, middlewares: Iterable[Any] = (), name: str | None = None) -> Self:
        return self._add_http_route("GET", path, handler, middlewares, name)

    def post(self, path: str, handler: Any, middlewares: Iterable[Any] = (), name: str | None = None) -> Self:
        return self._add_http_route("POST", path, handler, middlewares, name)

    def put(self, path: str, handler: Any, middlewares: Iterable[Any] = (), name: str | None = None) -> Self:
        return self._add_http_route("PUT", path, handler, middlewares, name)

    def patch(self, path: str, handler: Any, middlewares: Iterable[Any] = (), name: str | None = None) -> Self:
        return self._add_http_route("PATCH", path, handler, middlewares, name)

    def delete(self, path: str, handler: Any, middlewares: Iterable[Any] = (), name: str | None = None) -> Self:
        return self._add_http_route("DELETE", path, handler, middlewares, name)

    @contextmanager
    def group(self, prefix: str, middlewares: Iterable[Any] = ()) -> Iterator[Self]:
        """Register the routes added inside the block under *prefix*.

        The previous prefix and middlewares are restored on exit, even
        when the block raises.
        """
        previous_group = self._group
        previous_middlewares = self._group_middlewares

        self._group = previous_group + prefix
        self._group_middlewares = (*middlewares, *previous_middlewares)
        try:
            yield self
        finally:
            self._group = previous_group
            self._group_middlewares = previous_middlewares

    def _add_http_route(
        self,
        method: str,
        path: str,
        handler: Any,
        middlewares: Iterable[Any],
        name: str | None,
    ) -> Self:
        self.add_route(
            method,
            path,
            handler,
            group=self._group,
            middlewares=(*middlewares, *self._group_middlewares),
            name=name,
        )
        return self
