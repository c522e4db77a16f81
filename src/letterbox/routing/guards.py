"""Route guards: pure predicates over an incoming request.

A guard is any callable ``(Request) -> bool``. The router evaluates a
route's guards only after its path matched; if one returns false the
router moves on to the next entry, so guards must not have side effects.

The built-in guards are frozen dataclasses: hashable, comparable, and
readable in ``repr()`` when debugging a route table::

    from letterbox.routing import guards

    app.add_route(
        "/webhooks/{provider}",
        handle_webhook,
        methods="*",
        guards=(guards.post(), guards.Header("content-type", "application/json")),
    )
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeAlias

if TYPE_CHECKING:
    from letterbox.http.request import Request

Guard: TypeAlias = Callable[["Request"], bool]


@dataclass(frozen=True, slots=True)
class Method:
    """Passes when the request method is one of *methods*."""

    methods: frozenset[str]

    def __init__(self, *methods: str) -> None:
        object.__setattr__(self, "methods", frozenset(m.upper() for m in methods))

    def __call__(self, request: "Request") -> bool:
        return request.method in self.methods


@dataclass(frozen=True, slots=True)
class Header:
    """Passes when header *name* is present and equals *value*.

    Header names are case-insensitive; values are compared exactly.
    """

    name: str
    value: str

    def __call__(self, request: "Request") -> bool:
        return request.headers.get(self.name) == self.value


@dataclass(frozen=True, slots=True)
class Host:
    """Passes when the Host header (port stripped) equals *host*."""

    host: str

    def __call__(self, request: "Request") -> bool:
        actual = request.host
        return actual is not None and actual.lower() == self.host.lower()


@dataclass(frozen=True, slots=True)
class AllOf:
    """Passes when every inner guard passes (short-circuits)."""

    guards: tuple[Guard, ...]

    def __call__(self, request: "Request") -> bool:
        return all(guard(request) for guard in self.guards)


@dataclass(frozen=True, slots=True)
class AnyOf:
    """Passes when at least one inner guard passes (short-circuits)."""

    guards: tuple[Guard, ...]

    def __call__(self, request: "Request") -> bool:
        return any(guard(request) for guard in self.guards)


@dataclass(frozen=True, slots=True)
class Not:
    """Inverts a guard."""

    guard: Guard

    def __call__(self, request: "Request") -> bool:
        return not self.guard(request)


def get() -> Method:
    return Method("GET")


def post() -> Method:
    return Method("POST")


def put() -> Method:
    return Method("PUT")


def patch() -> Method:
    return Method("PATCH")


def delete() -> Method:
    return Method("DELETE")


def head() -> Method:
    return Method("HEAD")


def options() -> Method:
    return Method("OPTIONS")
