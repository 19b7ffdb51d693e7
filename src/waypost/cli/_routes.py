"""``waypost routes`` — list registered routes.

Resolves an import string to a waypost Router and prints all registered
routes with method, full path, and handler info.
"""

import argparse

from waypost.cli._resolve import describe_handler, resolve_or_exit


def run_routes(args: argparse.Namespace) -> None:
    """Print a table of METHOD, PATH, and handler name in registration order."""
    router = resolve_or_exit(args)

    routes = router.routes
    if not routes:
        print("No routes registered.")
        return

    # Build rows: (method, full_path, handler_name)
    rows: list[tuple[str, str, str]] = []
    for route in routes:
        handler_name = describe_handler(route.handler)
        if route.name:
            handler_name = f"{handler_name} ({route.name})"
        rows.append((route.method, route.full_path, handler_name))

    # Column widths
    max_method = max(max(len(r[0]) for r in rows), 6)  # "METHOD" header
    max_path = max(max(len(r[1]) for r in rows), 4)  # "PATH" header

    fmt = f"{{:<{max_method}}}  {{:<{max_path}}}  {{}}"
    print(fmt.format("METHOD", "PATH", "HANDLER"))
    sep_len = max_method + max_path + 4 + max(len(r[2]) for r in rows)
    print("-" * min(sep_len, 80))
    for method, path, handler_name in rows:
        print(fmt.format(method, path, handler_name))
