"""Letterbox: the HTTP API backend of an email newsletter service.

A small async framework (ordered route table, guards, typed request and
response values) plus the service built on it.

Basic usage::

    from letterbox import App

    app = App()

    @app.route("/health_check")
    def health_check():
        return None

    app.run()
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "BindError",
    "ConfigurationError",
    "HTTPError",
    "IntoResponse",
    "LetterboxError",
    "NotFound",
    "Request",
    "Response",
    "create_app",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import letterbox`` from pulling in the transport.
    """
    if name == "App":
        from letterbox.app import App

        return App

    if name == "AppConfig":
        from letterbox.config import AppConfig

        return AppConfig

    if name == "Request":
        from letterbox.http.request import Request

        return Request

    if name in ("Response", "IntoResponse"):
        from letterbox.http import response as _resp

        return getattr(_resp, name)

    if name in ("BindError", "ConfigurationError", "HTTPError", "LetterboxError", "NotFound"):
        from letterbox import errors as _errors

        return getattr(_errors, name)

    if name == "create_app":
        from letterbox.application import create_app

        return create_app

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
