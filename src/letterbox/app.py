"""Letterbox application class.

Mutable during setup (route registration, error handlers).
Frozen when the server binds it or when ``__call__()`` is first invoked;
from then on the route table is a read-only tuple shared by every request.
"""

import logging
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace
from typing import Any, Literal

from letterbox._internal.asgi import Receive, Scope, Send
from letterbox._internal.types import ErrorHandler, Handler
from letterbox.config import AppConfig
from letterbox.routing.guards import Guard, Method
from letterbox.routing.router import Router, parse_path
from letterbox.server.handler import handle_request

logger = logging.getLogger("letterbox.app")


@dataclass(frozen=True, slots=True)
class _PendingRoute:
    """A route waiting to be compiled."""

    path: str
    handler: Handler
    guards: tuple[Guard, ...]
    name: str | None


class App:
    """The letterbox application.

    Mutable during setup, frozen at runtime.

    Thread safety:
        The setup phase is single-threaded (decorators at import time).
        The freeze transition uses a Lock + double-check so exactly one
        caller compiles the route table, even if two servers share the app.
    """

    __slots__ = (
        "_error_handlers",
        "_freeze_lock",
        "_frozen",
        "_pending_routes",
        # Compiled state (populated by _freeze)
        "_router",
        "config",
    )

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config: AppConfig = config or AppConfig()
        self._pending_routes: list[_PendingRoute] = []
        self._error_handlers: dict[int | type, ErrorHandler] = {}
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()
        self._router: Router | None = None

    # -- Route registration --

    def route(
        self,
        path: str,
        *,
        methods: Iterable[str] | Literal["*"] | None = None,
        guards: Iterable[Guard] = (),
        name: str | None = None,
    ) -> Callable[[Handler], Handler]:
        """Register a route handler via decorator.

        Args:
            path: URL path pattern. Use ``{param}`` for path parameters.
            methods: HTTP methods. Defaults to ``["GET"]``; ``"*"`` accepts
                any method (leave method checks to *guards*).
            guards: Extra guard predicates, evaluated after the method guard.
            name: Optional route name, kept for introspection.
        """

        def decorator(func: Handler) -> Handler:
            self.add_route(path, func, methods=methods, guards=guards, name=name)
            return func

        return decorator

    def add_route(
        self,
        path: str,
        handler: Handler,
        *,
        methods: Iterable[str] | Literal["*"] | None = None,
        guards: Iterable[Guard] = (),
        name: str | None = None,
    ) -> None:
        """Register a route handler without decorator syntax.

        Entries are matched in the order they are added; the first one whose
        path and guards all match handles the request.
        """
        self._check_not_frozen()
        # Reject malformed patterns now, not when the app freezes
        parse_path(path)
        all_guards: list[Guard] = []
        if methods != "*":
            all_guards.append(Method(*(methods or ("GET",))))
        all_guards.extend(guards)
        self._pending_routes.append(_PendingRoute(path, handler, tuple(all_guards), name))

    # -- Error handlers --

    def error(
        self,
        code_or_exception: int | type[Exception],
    ) -> Callable[[ErrorHandler], ErrorHandler]:
        """Register an error handler via decorator."""

        def decorator(func: ErrorHandler) -> ErrorHandler:
            self._check_not_frozen()
            self._error_handlers[code_or_exception] = func
            return func

        return decorator

    # -- Server --

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Serve the app until interrupted. Blocks the calling thread.

        Synchronous on purpose: it creates the event loop and drives the
        server's single root task to completion.
        """
        from letterbox.server.runner import run

        overrides: dict[str, Any] = {}
        if host is not None:
            overrides["host"] = host
        if port is not None:
            overrides["port"] = port
        run(self, replace(self.config, **overrides))

    @property
    def router(self) -> Router:
        """The compiled route table. Freezes the app on first access."""
        self._ensure_frozen()
        assert self._router is not None
        return self._router

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        await handle_request(
            scope,
            receive,
            send,
            router=self.router,
            error_handlers=self._error_handlers,
            config=self.config,
        )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Answer the ASGI lifespan protocol for servers that speak it.

        Freezing here surfaces route configuration errors at startup
        rather than on the first request.
        """
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                try:
                    self._ensure_frozen()
                except Exception as exc:
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Compile the app into its frozen runtime state.

        MUST only be called while holding _freeze_lock.
        """
        router = Router()
        for pending in self._pending_routes:
            router.register(pending.path, pending.guards, pending.handler, name=pending.name)
        router.compile()
        self._router = router
        self._frozen = True
        logger.debug("Route table frozen with %d entries", len(router.routes))

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register routes and error handlers before calling app.run()."
            )
            raise RuntimeError(msg)
