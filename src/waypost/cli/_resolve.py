"""Router import resolution — resolves ``"module:attribute"`` strings to Router instances.

Shared utility used by ``waypost routes`` and ``waypost match``.
"""

import argparse
import importlib
import logging
import sys

from waypost.routing.router import Router

logger = logging.getLogger("waypost.cli")


def resolve_router(import_string: str) -> Router:
    """Resolve an import string to a waypost Router instance.

    Accepts ``"module:attribute"`` format.  When the attribute portion
    is omitted, defaults to ``"router"`` (e.g. ``"myapp.urls"`` resolves
    to ``myapp.urls.router``).

    Supports factory functions: if the resolved object is callable and
    not a Router instance, it is called with no arguments.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
        TypeError: If the resolved object is not a ``Router`` or callable.

    """
    module_path, _, attr_name = import_string.partition(":")
    if not attr_name:
        attr_name = "router"

    module = importlib.import_module(module_path)
    obj = getattr(module, attr_name)

    if callable(obj) and not isinstance(obj, Router):
        try:
            obj = obj()
        except Exception as exc:
            msg = f"Factory function {import_string!r} raised an error: {exc}"
            raise TypeError(msg) from exc

    if not isinstance(obj, Router):
        msg = f"{import_string!r} resolved to {type(obj).__name__}, not a waypost.Router instance"
        raise TypeError(msg)

    logger.debug("Resolved %s with %d routes", import_string, len(obj.routes))
    return obj


def resolve_or_exit(args: argparse.Namespace) -> Router:
    """``resolve_router`` for CLI commands: report failures and exit 1."""
    try:
        return resolve_router(args.router)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc


def describe_handler(handler: object) -> str:
    """Short printable name for an opaque handler reference."""
    return getattr(handler, "__qualname__", None) or getattr(handler, "__name__", None) or repr(handler)
