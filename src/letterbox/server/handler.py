"""ASGI handler: translates ASGI scope/messages to letterbox types.

Converts the scope to a typed Request, dispatches through the route
table, converts the handler's return value, and sends the Response back
through ASGI send(). Route matching and guard evaluation are synchronous;
the only suspension points are the handler itself and send().
"""

import inspect
from collections.abc import Callable
from dataclasses import replace
from typing import Any

from letterbox._internal.asgi import Receive, Scope, Send
from letterbox._internal.invoke import invoke
from letterbox.config import AppConfig
from letterbox.errors import HTTPError
from letterbox.http.request import Request
from letterbox.http.response import Response
from letterbox.routing.route import RouteMatch
from letterbox.routing.router import Router
from letterbox.server.errors import handle_http_error, handle_internal_error
from letterbox.server.negotiation import negotiate
from letterbox.server.sender import encode_response


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    error_handlers: dict[int | type, Callable[..., Any]],
    config: AppConfig,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive, max_body=config.max_content_length)

    try:
        check_limits(request, config)
        match = router.match(request)
        response = await _invoke_handler(match, request)
    except HTTPError as exc:
        response = await handle_http_error(exc, request, error_handlers, config.debug)
    except Exception as exc:
        response = await handle_internal_error(exc, request, error_handlers, config.debug)

    try:
        start, body = encode_response(response)
    except Exception as exc:
        # e.g. a header value outside latin-1
        response = await handle_internal_error(exc, request, {}, config.debug)
        start, body = encode_response(response)

    await send(start)
    await send(body)


def check_limits(request: Request, config: AppConfig) -> None:
    """Reject requests whose head or declared body exceeds the configured limits.

    Raises:
        HTTPError: 431 for an oversized header block, 413 for a declared
            Content-Length above ``max_content_length``.
    """
    head_size = sum(len(name) + len(value) + 4 for name, value in request.headers.raw)
    if head_size > config.max_header_bytes:
        raise HTTPError(
            status=431,
            detail=f"Header block is {head_size} bytes (limit {config.max_header_bytes})",
            headers=(("connection", "close"),),
        )

    length = request.content_length
    if length is not None and length > config.max_content_length:
        raise HTTPError(
            status=413,
            detail=f"Content-Length {length} exceeds {config.max_content_length}",
            headers=(("connection", "close"),),
        )


async def _invoke_handler(match: RouteMatch, request: Request) -> Response:
    """Call the matched route handler, binding path params and converting the result."""
    handler = match.route.handler

    # replace() keeps _cache, so a body read earlier stays available
    request = replace(request, path_params=match.path_params)

    kwargs = _build_handler_kwargs(handler, request, match.path_params)

    # Sync or async; invoke() handles both
    result = await invoke(handler, **kwargs)

    return negotiate(result)


def _build_handler_kwargs(
    handler: Callable[..., Any],
    request: Request,
    path_params: dict[str, Any],
) -> dict[str, Any]:
    """Inspect handler signature and build kwargs from request + path params.

    Resolution order:
    1. ``request`` parameter (by name or ``Request`` annotation)
    2. Path parameters (by name, converted to a plain-type annotation)
    """
    sig = inspect.signature(handler, eval_str=True)
    kwargs: dict[str, Any] = {}

    for name, param in sig.parameters.items():
        if name == "request" or param.annotation is Request:
            kwargs[name] = request
        elif name in path_params:
            value = path_params[name]
            annotation = param.annotation
            if (
                annotation is not inspect.Parameter.empty
                and isinstance(annotation, type)
                and not isinstance(value, annotation)
            ):
                try:
                    kwargs[name] = annotation(value)
                except (ValueError, TypeError):
                    kwargs[name] = value
            else:
                kwargs[name] = value

    return kwargs
