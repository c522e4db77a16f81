"""Tests for letterbox.http: headers, query params, request, response."""

import json
from typing import Any

import pytest

from letterbox.errors import HTTPError
from letterbox.http.headers import Headers
from letterbox.http.query import QueryParams
from letterbox.http.request import Request
from letterbox.http.response import Response


class TestHeaders:
    def test_case_insensitive_lookup(self) -> None:
        headers = Headers(((b"Content-Type", b"text/plain"),))
        assert headers["content-type"] == "text/plain"
        assert "CONTENT-TYPE" in headers

    def test_repeated_values(self) -> None:
        headers = Headers(((b"accept", b"a"), (b"Accept", b"b")))
        assert headers["accept"] == "a"
        assert headers.get_list("accept") == ["a", "b"]
        assert len(headers) == 1

    def test_missing(self) -> None:
        assert Headers().get("x-missing") is None
        with pytest.raises(KeyError):
            Headers()["x-missing"]

    def test_immutable(self) -> None:
        with pytest.raises(AttributeError):
            Headers().foo = "bar"  # type: ignore[attr-defined]


class TestQueryParams:
    def test_first_value_and_list(self) -> None:
        query = QueryParams(b"tag=a&tag=b&page=2")
        assert query["tag"] == "a"
        assert query.get_list("tag") == ["a", "b"]
        assert query.get("page") == "2"
        assert list(query) == ["tag", "page"]
        assert len(query) == 2

    def test_defaults(self) -> None:
        query = QueryParams(b"page=two")
        assert query.get("missing", "x") == "x"
        assert query.get_list("missing") == []
        assert "missing" not in query
        with pytest.raises(KeyError):
            query["missing"]

    def test_percent_decoding_and_raw_string(self) -> None:
        query = QueryParams(b"email=ursula%40example.com&name=le+guin")
        assert query["email"] == "ursula@example.com"
        assert query["name"] == "le guin"
        assert query.string == "email=ursula%40example.com&name=le+guin"

    def test_empty(self) -> None:
        query = QueryParams()
        assert not query
        assert query.items() == ()

    def test_blank_values_kept(self) -> None:
        assert QueryParams(b"flag=")["flag"] == ""


class TestRequest:
    def test_metadata(self, request_factory) -> None:
        request = request_factory(
            "POST",
            "/subscriptions",
            headers=((b"content-type", b"application/json"), (b"content-length", b"17")),
            query_string=b"source=web",
        )
        assert request.content_type == "application/json"
        assert request.content_length == 17
        assert request.query["source"] == "web"
        assert request.url == "/subscriptions?source=web"

    @pytest.mark.parametrize(
        ("header", "expected"),
        [
            (b"example.com", "example.com"),
            (b"example.com:8000", "example.com"),
            (b"[::1]:8000", "[::1]"),
        ],
    )
    def test_host_strips_port(self, request_factory, header: bytes, expected: str) -> None:
        assert request_factory(headers=((b"host", header),)).host == expected

    async def test_body_is_cached(self, request_factory) -> None:
        request = request_factory("POST", body=b'{"email": "a@b.c"}')
        assert await request.body() == b'{"email": "a@b.c"}'
        assert await request.json() == {"email": "a@b.c"}
        assert await request.text() == '{"email": "a@b.c"}'

    def test_frozen(self, request_factory) -> None:
        request = request_factory()
        with pytest.raises(AttributeError):
            request.path = "/other"  # type: ignore[misc]


class TestResponse:
    def test_defaults(self) -> None:
        response = Response()
        assert response.status == 200
        assert response.body_bytes == b""
        assert response.content_type is None
        assert response.headers == ()

    def test_transformations_return_new_objects(self) -> None:
        base = Response(body="x")
        changed = base.with_status(201).with_header("X-A", "1").with_headers({"X-B": "2"})
        assert base.status == 200
        assert base.headers == ()
        assert changed.status == 201
        assert changed.headers == (("X-A", "1"), ("X-B", "2"))

    def test_content_type(self) -> None:
        response = Response(body=json.dumps([1])).with_content_type("application/json")
        assert response.content_type == "application/json"
        assert response.text == "[1]"


class TestBodyLimit:
    async def test_body_over_limit_raises_413(self) -> None:
        chunks = [
            {"type": "http.request", "body": b"x" * 10, "more_body": True},
            {"type": "http.request", "body": b"x" * 10, "more_body": False},
        ]

        async def receive() -> dict[str, Any]:
            return chunks.pop(0)

        scope = {"type": "http", "method": "POST", "path": "/subscriptions", "headers": []}
        request = Request.from_asgi(scope, receive, max_body=15)
        with pytest.raises(HTTPError) as exc_info:
            await request.body()
        assert exc_info.value.status == 413

    async def test_body_at_limit_is_read(self) -> None:
        async def receive() -> dict[str, Any]:
            return {"type": "http.request", "body": b"x" * 15, "more_body": False}

        scope = {"type": "http", "method": "POST", "path": "/subscriptions", "headers": []}
        request = Request.from_asgi(scope, receive, max_body=15)
        assert await request.body() == b"x" * 15
