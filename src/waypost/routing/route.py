"""Route and RouteMatch frozen dataclasses."""

from dataclasses import dataclass
from typing import Any

HTTP_METHODS: frozenset[str] = frozenset({"GET", "POST", "PUT", "PATCH", "DELETE"})


def is_static_path(path: str) -> bool:
    """Return True if *path* has no parameter or optional-segment syntax."""
    return "{" not in path and "[" not in path


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route definition.

    ``handler`` and ``middlewares`` are opaque: the router stores and
    returns them but never calls or inspects them.
    """

    method: str
    path: str
    handler: Any
    group: str = ""
    middlewares: tuple[Any, ...] = ()
    name: str | None = None

    @property
    def full_path(self) -> str:
        """Group prefix + route path. The unit of compilation and caching."""
        return self.group + self.path

    @property
    def is_static(self) -> bool:
        return is_static_path(self.full_path)


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match.

    ``params`` only holds parameters that captured a non-empty value;
    an optional parameter that did not take part in the match is absent.
    """

    route: Route
    params: dict[str, str]

    @property
    def handler(self) -> Any:
        return self.route.handler

    @property
    def middlewares(self) -> tuple[Any, ...]:
        return self.route.middlewares
