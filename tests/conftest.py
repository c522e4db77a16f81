"""Shared fixtures for letterbox tests."""

from collections.abc import AsyncIterator, Callable
from typing import Any

import httpx
import pytest

from letterbox.http.request import Request
from letterbox.testing import TestInstance


def make_request(
    method: str = "GET",
    path: str = "/",
    headers: tuple[tuple[bytes, bytes], ...] = (),
    query_string: bytes = b"",
    body: bytes = b"",
) -> Request:
    """Build a Request the way the transport would, without a socket."""
    sent = False

    async def receive() -> dict[str, Any]:
        nonlocal sent
        if not sent:
            sent = True
            return {"type": "http.request", "body": body, "more_body": False}
        return {"type": "http.disconnect"}

    scope = {
        "type": "http",
        "method": method,
        "path": path,
        "headers": list(headers),
        "query_string": query_string,
        "http_version": "1.1",
    }
    return Request.from_asgi(scope, receive)


@pytest.fixture
def request_factory() -> Callable[..., Request]:
    return make_request


@pytest.fixture
async def instance() -> AsyncIterator[TestInstance]:
    """A running newsletter API on an ephemeral port."""
    async with TestInstance() as running:
        yield running


@pytest.fixture
async def client() -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient(timeout=5.0) as http_client:
        yield http_client
