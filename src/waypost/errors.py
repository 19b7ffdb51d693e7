"""Waypost exception hierarchy.

Shared across the compiler, matcher, and router so every module
raises and catches the same types.
"""


class WaypostError(Exception):
    """Base for all waypost-specific errors."""


class ConfigurationError(WaypostError):
    """Raised when a route set is configured incorrectly.

    Registration errors are raised synchronously from ``add_route`` and
    leave the route set untouched.
    """


class UnsupportedMethodError(ConfigurationError):
    """A route was registered with an HTTP method outside the allowed set."""

    def __init__(self, method: str) -> None:
        self.method = method
        super().__init__(f"Unsupported HTTP method: {method}")


class DuplicateRouteNameError(ConfigurationError):
    """A route name was registered twice."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Route with name '{name}' already exists")


class PatternError(ConfigurationError):
    """A route template could not be compiled.

    Raised lazily, the first time the template is compiled, which is
    usually the first match attempt that reaches the route.
    """

    def __init__(self, message: str, template: str, position: int | None) -> None:
        self.template = template
        self.position = position
        super().__init__(message)


class UnmatchedOpeningBracketError(PatternError):
    """A ``[`` in the template is never closed."""

    def __init__(self, template: str, position: int) -> None:
        super().__init__(
            f"Unmatched opening bracket at position {position} in: {template}",
            template,
            position,
        )


class UnmatchedClosingBracketError(PatternError):
    """A ``]`` in the template has no opening ``[`` before it."""

    def __init__(self, template: str, position: int) -> None:
        super().__init__(
            f"Unmatched closing bracket at position {position} in: {template}",
            template,
            position,
        )


class TemplateMarkerError(PatternError):
    """The template uses every private-use character the compiler could mark it with."""

    def __init__(self, template: str) -> None:
        super().__init__(
            f"Template uses every private-use character; cannot compile: {template[:80]!r}",
            template,
            None,
        )
