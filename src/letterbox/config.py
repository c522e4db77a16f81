"""Application configuration.

AppConfig is a frozen dataclass: immutable after creation, IDE-autocompletable,
no string-key dict lookups. Built once at startup and shared read-only by
the app and the server.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(port=0, max_connections=50)
    """

    # Bind address (uds takes precedence over host/port when set)
    host: str = "127.0.0.1"
    port: int = 8000
    uds: str | None = None
    backlog: int = 2048

    debug: bool = False

    # Connection handling
    max_connections: int = 1000
    keep_alive_timeout: int = 5
    shutdown_timeout: int | None = 10

    # Request limits, enforced by the dispatcher
    max_content_length: int = 16 * 1024 * 1024  # 16 MB
    max_header_bytes: int = 64 * 1024

    # Logging
    log_level: str = "info"
    access_log: bool = True
    server_header: str = "letterbox"
