"""Listening socket and uvicorn server for one app.

The socket is bound here, before uvicorn starts, so bind failures surface
as ``BindError`` to the caller and an ephemeral port is known before the
first request. uvicorn then serves the already-listening socket; until it
starts accepting, clients queue in the backlog.
"""

from __future__ import annotations

import logging
import socket
from pathlib import Path

import anyio
import uvicorn

from letterbox._internal.asgi import ASGIApp
from letterbox.app import App
from letterbox.config import AppConfig
from letterbox.errors import BindError

logger = logging.getLogger("letterbox.server")


def bind_socket(config: AppConfig) -> socket.socket:
    """Create a listening TCP or Unix socket for *config*.

    Raises:
        BindError: The address is in use, not permitted, or invalid.
    """
    address = config.uds or f"{config.host}:{config.port}"
    try:
        if config.uds:
            sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
            try:
                sock.bind(config.uds)
                sock.listen(config.backlog)
            except OSError:
                sock.close()
                raise
            return sock
        family = socket.AF_INET6 if ":" in config.host else socket.AF_INET
        return socket.create_server(
            (config.host, config.port), family=family, backlog=config.backlog
        )
    except OSError as exc:
        msg = f"Could not bind {address}: {exc.strerror or exc}"
        raise BindError(msg) from exc


def uvicorn_config(app: ASGIApp, config: AppConfig) -> uvicorn.Config:
    """Translate an AppConfig into uvicorn settings."""
    return uvicorn.Config(
        app,
        http="h11",
        loop="asyncio",
        lifespan="on",
        # uvicorn counts the connection being checked, hence the + 1
        limit_concurrency=config.max_connections + 1,
        backlog=config.backlog,
        timeout_keep_alive=config.keep_alive_timeout,
        timeout_graceful_shutdown=config.shutdown_timeout,
        proxy_headers=False,
        # heads between the two limits get 431 from the dispatcher, larger ones 400
        h11_max_incomplete_event_size=max(2 * config.max_header_bytes, 16 * 1024),
        server_header=False,
        headers=[("server", config.server_header)] if config.server_header else None,
        access_log=config.access_log,
        log_config=None,
        log_level=config.log_level,
    )


class Server:
    """A bound HTTP server for one app.

    Created with ``await Server.bind(app, config)``; binding happens before
    ``serve()`` so the caller learns the actual port (port 0 asks the OS
    for an ephemeral one) and bind failures surface immediately.

    Past ``config.max_connections`` open connections, requests get
    ``503 Service Unavailable`` and their connection is closed.
    """

    __slots__ = (
        "_serving",
        "_shutdown_requested",
        "_socket",
        "_started",
        "_uvicorn",
        "app",
        "config",
    )

    def __init__(self, app: ASGIApp, sock: socket.socket, config: AppConfig) -> None:
        self.app = app
        self.config = config
        self._socket = sock
        self._uvicorn = uvicorn.Server(uvicorn_config(app, config))
        self._started = anyio.Event()
        self._serving = False
        self._shutdown_requested = False

    @classmethod
    async def bind(cls, app: ASGIApp, config: AppConfig | None = None) -> Server:
        """Bind a listening socket for *app*.

        Freezes a letterbox ``App`` first so route table errors show up
        before any client connects.

        Raises:
            BindError: The address is in use, not permitted, or invalid.
        """
        if config is None:
            config = app.config if isinstance(app, App) else AppConfig()
        if isinstance(app, App):
            app._ensure_frozen()

        server = cls(app, bind_socket(config), config)
        logger.info("Listening on %s", server.url)
        return server

    @property
    def port(self) -> int | None:
        """The bound TCP port, or None on a Unix socket."""
        if self.config.uds:
            return None
        return int(self._socket.getsockname()[1])

    @property
    def url(self) -> str:
        """Base URL of the bound listener, e.g. ``http://127.0.0.1:49152``."""
        if self.config.uds:
            return f"unix:{self.config.uds}"
        host = self._socket.getsockname()[0]
        if ":" in host:
            host = f"[{host}]"
        return f"http://{host}:{self.port}"

    @property
    def serving(self) -> bool:
        return self._serving

    async def wait_started(self) -> None:
        """Return once ``serve()`` has taken ownership of the socket."""
        await self._started.wait()

    async def serve(self) -> None:
        """Serve requests until ``shutdown()`` is called or a signal arrives.

        The socket is closed on the way out.
        """
        if self._serving:
            msg = "Server.serve() can only be called once."
            raise RuntimeError(msg)
        self._serving = True
        self._started.set()
        if self._shutdown_requested:
            # shutdown() already closed the socket
            return

        url = self.url
        try:
            await self._uvicorn.serve(sockets=[self._socket])
        finally:
            # uvicorn skips its own shutdown when asked to exit during startup
            for listener in getattr(self._uvicorn, "servers", ()):
                listener.close()
            self._close_socket()
            logger.info("Stopped serving on %s", url)

    async def shutdown(self) -> None:
        """Ask ``serve()`` to stop. Safe to call more than once.

        Idle keep-alive connections are closed; in-flight requests get up to
        ``config.shutdown_timeout`` seconds to finish.
        """
        self._shutdown_requested = True
        self._uvicorn.should_exit = True
        if not self._serving:
            self._close_socket()

    def _close_socket(self) -> None:
        self._socket.close()
        if self.config.uds:
            Path(self.config.uds).unlink(missing_ok=True)
