"""Waypost — URL template routing for server-side request dispatch.

Matches an HTTP method and path against registered route templates and
returns the handler, extracted parameters, and middlewares of the first
route that fits. Handlers and middlewares are opaque: waypost never
calls them.

Basic usage::

    from waypost import RouteCollector

    routes = RouteCollector()
    routes.get("/posts[/{page:[0-9]+}]", list_posts)

    match = routes.match("GET", "/posts/2")
    match.handler, match.params  # list_posts, {"page": "2"}
"""

__version__ = "0.1.0-dev"
__all__ = [
    "ConfigurationError",
    "DuplicateRouteNameError",
    "PatternError",
    "Route",
    "RouteCollector",
    "RouteMatch",
    "Router",
    "RouterConfig",
    "TemplateMarkerError",
    "UnmatchedClosingBracketError",
    "UnmatchedOpeningBracketError",
    "UnsupportedMethodError",
    "WaypostError",
    "compile_pattern",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import waypost`` fast while providing a clean top-level API.
    """
    if name == "Router":
        from waypost.routing.router import Router

        return Router

    if name == "RouteCollector":
        from waypost.routing.collector import RouteCollector

        return RouteCollector

    if name == "RouterConfig":
        from waypost.config import RouterConfig

        return RouterConfig

    if name in ("Route", "RouteMatch"):
        from waypost.routing import route as _route

        return getattr(_route, name)

    if name == "compile_pattern":
        from waypost.routing.compiler import compile_pattern

        return compile_pattern

    if name in (
        "ConfigurationError",
        "DuplicateRouteNameError",
        "PatternError",
        "TemplateMarkerError",
        "UnmatchedClosingBracketError",
        "UnmatchedOpeningBracketError",
        "UnsupportedMethodError",
        "WaypostError",
    ):
        from waypost import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
