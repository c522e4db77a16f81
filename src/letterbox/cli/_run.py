"""``letterbox run``: resolve an app and serve it until interrupted."""

import argparse
import sys
from dataclasses import replace
from typing import Any

from letterbox.cli._resolve import resolve_app
from letterbox.config import AppConfig
from letterbox.errors import BindError


def build_config(args: argparse.Namespace, base: AppConfig | None = None) -> AppConfig:
    """Apply command-line flags on top of *base*. Unset flags keep the base value."""
    overrides: dict[str, Any] = {}
    if args.host is not None:
        overrides["host"] = args.host
    if args.port is not None:
        overrides["port"] = args.port
    if args.uds is not None:
        overrides["uds"] = args.uds
    if args.max_connections is not None:
        overrides["max_connections"] = args.max_connections
    if args.log_level is not None:
        overrides["log_level"] = args.log_level
    if args.debug:
        overrides["debug"] = True
    return replace(base or AppConfig(), **overrides)


def run_server(args: argparse.Namespace) -> None:
    """Start the letterbox server.

    Exits with status 1 when the app cannot be resolved or the address
    cannot be bound.
    """
    config = build_config(args)
    try:
        app = resolve_app(args.app, config)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    # Flags win over whatever config the app was built with
    config = build_config(args, app.config)

    from letterbox.server.runner import run

    try:
        run(app, config)
    except BindError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
