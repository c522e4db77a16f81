"""Error handling pipeline for letterbox requests.

Maps HTTPError exceptions and unexpected handler failures to Response
objects, using registered error handlers or fixed defaults. Nothing raised
by a handler escapes this module, so the server always has a
response to write.
"""

import inspect
import logging
import traceback
from collections.abc import Callable
from typing import Any

from letterbox.errors import HTTPError
from letterbox.http.request import Request
from letterbox.http.response import Response
from letterbox.server.negotiation import negotiate

logger = logging.getLogger("letterbox.server")


async def call_error_handler(
    handler: Callable[..., Any],
    request: Request,
    exc: Exception,
) -> Response:
    """Invoke a user-registered error handler with introspected arguments.

    Error handlers may accept zero, one (request), or two (request, exc) args.
    Supports both sync and async error handlers.
    """
    sig = inspect.signature(handler)
    params = list(sig.parameters.values())

    if len(params) >= 2:
        result = handler(request, exc)
    elif len(params) == 1:
        result = handler(request)
    else:
        result = handler()

    if inspect.isawaitable(result):
        result = await result

    return negotiate(result)


async def handle_http_error(
    exc: HTTPError,
    request: Request,
    error_handlers: dict[int | type, Callable[..., Any]],
    debug: bool,
) -> Response:
    """Map an HTTPError to a Response using registered error handlers.

    Without a registered handler the response carries the status and the
    exception's headers and an empty body (the detail in debug mode).
    """
    logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)

    # Try exact exception type, then status code
    handler = error_handlers.get(type(exc)) or error_handlers.get(exc.status)
    if handler is not None:
        try:
            response = await call_error_handler(handler, request, exc)
        except Exception as handler_exc:
            return await handle_internal_error(handler_exc, request, {}, debug)
        # Preserve the HTTP status from the exception unless the handler
        # explicitly returned a Response with its own status
        if response.status == 200:
            response = response.with_status(exc.status)
        return response

    resp = Response(status=exc.status)
    if debug and exc.detail:
        resp = Response(body=str(exc), status=exc.status, content_type="text/plain; charset=utf-8")
    for name, value in exc.headers:
        resp = resp.with_header(name, value)
    return resp


async def handle_internal_error(
    exc: Exception,
    request: Request,
    error_handlers: dict[int | type, Callable[..., Any]],
    debug: bool,
) -> Response:
    """Handle unexpected exceptions as 500 errors."""
    logger.exception("500 %s %s", request.method, request.path)

    handler = error_handlers.get(500) or error_handlers.get(type(exc))
    if handler is not None:
        try:
            response = await call_error_handler(handler, request, exc)
        except Exception:
            logger.exception("error handler for %s %s failed", request.method, request.path)
        else:
            return response.with_status(500) if response.status == 200 else response

    if debug:
        body = "".join(traceback.format_exception(exc))
        return Response(body=body, status=500, content_type="text/plain; charset=utf-8")

    return Response(
        body="Internal Server Error",
        status=500,
        content_type="text/plain; charset=utf-8",
    )
