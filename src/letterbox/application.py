"""The newsletter API application: its route table and how it is built."""

from letterbox.app import App
from letterbox.config import AppConfig
from letterbox.handlers.health import health_check


def create_app(config: AppConfig | None = None) -> App:
    """Build the newsletter API app.

    Route table, in match order:

    ==========  ==================  ================
    Method      Path                Handler
    ==========  ==================  ================
    GET         /health_check       ``health_check``
    ==========  ==================  ================
    """
    app = App(config)
    app.add_route("/health_check", health_check, methods=["GET"], name="health_check")
    return app
