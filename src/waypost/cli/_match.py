"""``waypost match`` — show which route a request would reach."""

import argparse
import sys

from waypost.cli._resolve import describe_handler, resolve_or_exit
from waypost.errors import PatternError


def run_match(args: argparse.Namespace) -> None:
    """Print the matched handler and params, or exit 1 when nothing matches."""
    router = resolve_or_exit(args)

    try:
        match = router.match(args.method, args.path)
    except PatternError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    if match is None:
        print(f"No route matches {args.method.upper()} {args.path}", file=sys.stderr)
        raise SystemExit(1)

    route = match.route
    print(f"route:   {route.method} {route.full_path}" + (f" ({route.name})" if route.name else ""))
    print(f"handler: {describe_handler(match.handler)}")
    for name, value in match.params.items():
        print(f"param:   {name}={value}")
    for middleware in match.middlewares:
        print(f"middleware: {describe_handler(middleware)}")
