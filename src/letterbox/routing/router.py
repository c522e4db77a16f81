"""Ordered route table with first-match-wins dispatch.

Routes are registered during setup and frozen into a tuple when the app
freezes. Matching walks the entries in registration order; the first
entry whose path matches and whose guards all pass is selected. There is
no specificity ranking: a ``/{name}`` registered before ``/health_check``
shadows it.
"""

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from letterbox.errors import ConfigurationError, NotFound
from letterbox.routing.guards import Guard
from letterbox.routing.route import PathSegment, Route, RouteMatch

if TYPE_CHECKING:
    from letterbox.http.request import Request

# (regex_pattern, python_type) for each supported converter
CONVERTERS: dict[str, tuple[str, type]] = {
    "str": (r"[^/]+", str),
    "int": (r"\d+", int),
    "float": (r"\d+(?:\.\d+)?", float),
    "path": (r".+", str),
}


def parse_path(path: str) -> tuple[PathSegment, ...]:
    """Parse a route path string into segments.

    Examples::

        "/"               -> (PathSegment(""),)
        "/users"          -> (PathSegment("users"),)
        "/users/{id}"     -> (PathSegment("users"), PathSegment("{id}", is_param=True, ...))
        "/users/{id:int}" -> (..., PathSegment("{id:int}", is_param=True, param_type="int"))
        "/files/{path:path}" -> (..., PathSegment("{path:path}", is_param=True, param_type="path"))

    Raises ``ConfigurationError`` for paths without a leading slash,
    ``<param>`` placeholders, unknown converters, and ``{x:path}``
    anywhere but the last segment.
    """
    if "<" in path and ">" in path:
        msg = (
            f"Route path {path!r} uses <param> placeholders. "
            "Path parameters are written as {param} (or {param:int})."
        )
        raise ConfigurationError(msg)

    if not path.startswith("/"):
        msg = f"Route path {path!r} must start with '/'."
        raise ConfigurationError(msg)

    # Empty parts are literal segments: "/a/" and "/a" are different routes
    parts = path.split("/")[1:]
    segments: list[PathSegment] = []
    for index, part in enumerate(parts):
        if not (part.startswith("{") and part.endswith("}")):
            segments.append(PathSegment(value=part))
            continue

        inner = part[1:-1]
        param_name, _, param_type = inner.partition(":")
        param_type = param_type or "str"
        if not param_name.isidentifier():
            msg = f"Invalid parameter name {param_name!r} in route path {path!r}."
            raise ConfigurationError(msg)
        if param_type not in CONVERTERS:
            known = ", ".join(sorted(CONVERTERS))
            msg = f"Unknown converter {param_type!r} in route path {path!r} (known: {known})."
            raise ConfigurationError(msg)
        if param_type == "path" and index != len(parts) - 1:
            msg = f"{{{param_name}:path}} must be the last segment of {path!r}."
            raise ConfigurationError(msg)
        segments.append(
            PathSegment(
                value=part,
                is_param=True,
                param_name=param_name,
                param_type=param_type,
            )
        )
    return tuple(segments)


@dataclass(frozen=True, slots=True)
class _Entry:
    """A route with its path pattern compiled at registration time."""

    route: Route
    segments: tuple[PathSegment, ...]
    patterns: tuple[re.Pattern[str] | None, ...]

    def match_path(self, parts: list[str]) -> dict[str, Any] | None:
        """Bind *parts* against this entry's segments, or return None."""
        params: dict[str, Any] = {}
        for index, (segment, pattern) in enumerate(zip(self.segments, self.patterns, strict=True)):
            if segment.is_param and segment.param_type == "path":
                rest = "/".join(parts[index:])
                if not rest:
                    return None
                params[segment.param_name or "path"] = rest
                return params
            if index >= len(parts):
                return None
            part = parts[index]
            if pattern is None:
                if part != segment.value:
                    return None
                continue
            if not pattern.fullmatch(part):
                return None
            _, target_type = CONVERTERS[segment.param_type]
            params[segment.param_name or ""] = target_type(part)
        if len(parts) != len(self.segments):
            return None
        return params


def _compile(route: Route) -> _Entry:
    segments = parse_path(route.path)
    patterns = tuple(
        re.compile(CONVERTERS[seg.param_type][0]) if seg.is_param else None for seg in segments
    )
    return _Entry(route=route, segments=segments, patterns=patterns)


class Router:
    """Ordered route table.

    Usage::

        router = Router()
        router.register("/health_check", (guards.get(),), health_check)
        router.register("/users/{id:int}", (guards.get(),), show_user)
        router.compile()
        match = router.match(request)
    """

    __slots__ = ("_compiled", "_entries", "_table")

    def __init__(self) -> None:
        self._entries: list[_Entry] = []
        self._table: tuple[_Entry, ...] = ()
        self._compiled = False

    def add(self, route: Route) -> None:
        """Append a route. Must be called before compile()."""
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)
        self._entries.append(_compile(route))

    def register(
        self,
        path: str,
        guards: Iterable[Guard],
        handler: Callable[..., Any],
        *,
        name: str | None = None,
    ) -> Route:
        """Build a Route from its parts, append it, and return it."""
        route = Route(path=path, handler=handler, guards=tuple(guards), name=name)
        self.add(route)
        return route

    @property
    def routes(self) -> tuple[Route, ...]:
        """All registered routes, in registration order."""
        return tuple(entry.route for entry in self._entries)

    @property
    def compiled(self) -> bool:
        return self._compiled

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._table = tuple(self._entries)
        self._compiled = True

    def match(self, request: "Request") -> RouteMatch:
        """Return the first entry matching the request path and guards.

        Raises ``NotFound`` if no entry matches; a path match whose guards
        reject the request counts as no match.
        """
        parts = request.path.split("/")[1:]
        for entry in self._table:
            params = entry.match_path(parts)
            if params is None:
                continue
            if all(guard(request) for guard in entry.route.guards):
                return RouteMatch(route=entry.route, path_params=params)

        raise NotFound(f"No route matches {request.method} {request.path!r}")
