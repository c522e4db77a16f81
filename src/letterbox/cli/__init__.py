"""Letterbox CLI: serve an app from the command line.

Entry point registered as ``letterbox`` in ``pyproject.toml``::

    [project.scripts]
    letterbox = "letterbox.cli:main"
"""

import argparse
import sys

DEFAULT_APP = "letterbox.application:create_app"


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``letterbox`` command."""
    parser = argparse.ArgumentParser(
        prog="letterbox",
        description="Letterbox: the HTTP API backend of an email newsletter.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- letterbox run ----------------------------------------------------
    run_parser = subparsers.add_parser("run", help="Start the server")
    run_parser.add_argument(
        "app",
        nargs="?",
        default=DEFAULT_APP,
        help=f"Import string (default: {DEFAULT_APP})",
    )
    run_parser.add_argument("--host", default=None, help="Bind host address")
    run_parser.add_argument("--port", type=int, default=None, help="Bind port number (0 = any free port)")
    run_parser.add_argument("--uds", default=None, help="Bind a Unix domain socket instead of TCP")
    run_parser.add_argument(
        "--max-connections",
        type=int,
        default=None,
        help="Concurrent connection ceiling; connections past it get 503",
    )
    run_parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error", "critical"],
        default=None,
        help="Logging level for the letterbox loggers",
    )
    run_parser.add_argument(
        "--debug",
        action="store_true",
        help="Show error details and tracebacks in responses",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "run":
        from letterbox.cli._run import run_server

        run_server(args)
