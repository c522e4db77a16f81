"""ASGI response sending: translates letterbox Responses to ASGI messages."""

from typing import Any

from letterbox._internal.asgi import Send
from letterbox.http.response import Response


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


def encode_response(response: Response) -> tuple[dict[str, Any], dict[str, Any]]:
    """Build the ``http.response.start`` and ``http.response.body`` messages.

    Always emits an explicit content-length so the transport never has to
    fall back to chunked encoding for a complete response.

    Raises:
        UnicodeEncodeError: A header name or value is not latin-1.
    """
    raw_headers: list[tuple[bytes, bytes]] = []
    if response.content_type is not None:
        raw_headers.append((b"content-type", response.content_type.encode("latin-1")))
    for name, value in response.headers:
        raw_headers.append((name.lower().encode("latin-1"), value.encode("latin-1")))

    body = response.body_bytes if _body_allowed(response.status) else b""

    raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))

    start = {
        "type": "http.response.start",
        "status": response.status,
        "headers": raw_headers,
    }
    return start, {"type": "http.response.body", "body": body}


async def send_response(response: Response, send: Send) -> None:
    """Translate a Response into ASGI send() calls."""
    start, body = encode_response(response)
    await send(start)
    await send(body)
