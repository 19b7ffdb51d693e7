"""Router configuration.

RouterConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass

from waypost.routing.route import HTTP_METHODS


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Router configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = RouterConfig(default_pattern=r"[^/.]+", cache_static=False)
    """

    # Verbs accepted by add_route(); anything else is rejected at registration
    methods: frozenset[str] = HTTP_METHODS

    # Subpattern for a bare {name} parameter
    default_pattern: str = r"[^/]+"

    # Memoize matches of static routes by (method, path)
    cache_static: bool = True
