"""Letterbox exception hierarchy.

Shared across Router, App, dispatcher, and transport so every module
raises and catches the same types.
"""

from dataclasses import dataclass


class LetterboxError(Exception):
    """Base for all letterbox-specific errors."""


class ConfigurationError(LetterboxError):
    """Raised when app configuration is invalid.

    Typically raised while registering routes or freezing the app.
    """


class BindError(LetterboxError):
    """Raised when the server cannot bind its listening address.

    Always raised from ``Server.bind()``, before any connection is accepted.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(LetterboxError):
    """An error that maps directly to an HTTP status code.

    Raised by the router or by handlers. The request pipeline catches
    these and dispatches to the matching ``@app.error()`` handler.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404: no route entry matched the request."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)
