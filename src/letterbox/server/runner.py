"""Process-level server bootstrap.

``run()`` is the synchronous entry point: it sets up logging, starts the
event loop via ``anyio.run()``, and blocks until the server's root task
finishes. uvicorn turns SIGINT and SIGTERM into a graceful stop.
"""

import logging

import anyio

from letterbox._internal.asgi import ASGIApp
from letterbox.app import App
from letterbox.config import AppConfig
from letterbox.server.listener import Server

_LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

# uvicorn.error carries startup, shutdown and protocol errors
_LOGGERS = ("letterbox", "uvicorn.error", "uvicorn.access")


def configure_logging(level: str = "info") -> None:
    """Attach a stderr handler to the ``letterbox`` and ``uvicorn`` loggers.

    Idempotent: a second call only adjusts the level.
    """
    formatter = logging.Formatter(_LOG_FORMAT)
    for name in _LOGGERS:
        target = logging.getLogger(name)
        target.setLevel(level.upper())
        if target.handlers:
            continue
        handler = logging.StreamHandler()
        handler.setFormatter(formatter)
        target.addHandler(handler)


async def serve(app: ASGIApp, config: AppConfig) -> None:
    """Bind, then serve until a termination signal arrives."""
    server = await Server.bind(app, config)
    await server.serve()


def run(app: ASGIApp, config: AppConfig | None = None) -> None:
    """Serve *app* until interrupted. Blocks the calling thread.

    Raises:
        BindError: The listening address could not be bound.
    """
    if config is None:
        config = app.config if isinstance(app, App) else AppConfig()
    configure_logging(config.log_level)
    anyio.run(serve, app, config)
