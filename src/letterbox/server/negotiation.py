"""Content negotiation: maps handler return values to Response objects.

Dispatch is by type, checked in a fixed order.
"""

import json as json_module
from typing import Any

from letterbox.errors import ConfigurationError
from letterbox.http.response import IntoResponse, Response


def negotiate(value: Any) -> Response:
    """Convert a route handler's return value to a Response.

    Dispatch order:

    1. ``Response``            -> pass through
    2. ``IntoResponse``        -> ``value.into_response()``, negotiated again
    3. ``None``                -> 200, empty body, no content type
    4. ``str``                 -> 200, text/plain
    5. ``bytes``               -> 200, application/octet-stream
    6. ``dict`` / ``list``     -> 200, application/json
    7. ``(value, int)``        -> negotiate value, override status
    8. ``(value, int, dict)``  -> negotiate value, override status + headers
    """
    match value:
        case Response():
            return value
        case IntoResponse():
            return negotiate(value.into_response())
        case None:
            return Response()
        case str():
            return Response(body=value, content_type="text/plain; charset=utf-8")
        case bytes():
            return Response(body=value, content_type="application/octet-stream")
        case dict() | list():
            return Response(
                body=json_module.dumps(value, default=str),
                content_type="application/json",
            )
        case (body, int() as status):
            return negotiate(body).with_status(status)
        case (body, int() as status, dict() as headers):
            return negotiate(body).with_status(status).with_headers(headers)
        case _:
            msg = (
                f"Cannot convert {type(value).__name__} to a response. "
                "Return a Response, str, bytes, dict, list, None, a (value, status) "
                "tuple, or an object with an into_response() method."
            )
            raise ConfigurationError(msg)
