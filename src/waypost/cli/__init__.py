"""Waypost CLI — inspect and exercise a route table.

Entry point registered as ``waypost`` in ``pyproject.toml``::

    [project.scripts]
    waypost = "waypost.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``waypost`` command."""
    parser = argparse.ArgumentParser(
        prog="waypost",
        description="Waypost — URL template routing for server-side request dispatch.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- waypost routes ---------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List registered routes")
    routes_parser.add_argument(
        "router",
        help="Import string (e.g. myapp.urls:router)",
    )

    # -- waypost match ----------------------------------------------------
    match_parser = subparsers.add_parser("match", help="Match a request against the routes")
    match_parser.add_argument(
        "router",
        help="Import string (e.g. myapp.urls:router)",
    )
    match_parser.add_argument("method", help="HTTP method (case-insensitive)")
    match_parser.add_argument("path", help="Request path, e.g. /users/42")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "routes":
        from waypost.cli._routes import run_routes

        run_routes(args)
    elif args.command == "match":
        from waypost.cli._match import run_match

        run_match(args)
