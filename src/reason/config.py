"""Application configuration.

AppConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(port=3000, redirect_trailing_slash=False)
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False  # Single worker with auto-reload
    workers: int = 0  # 0 = auto-detect from CPU count

    # Routing
    redirect_trailing_slash: bool = True  # "/books/" -> "/books" (301 GET/HEAD, 307 otherwise)

    # Logging (handed to the server, reason itself only emits records)
    log_level: str = "info"
    log_format: str = "json"

    # Timeouts
    keep_alive_timeout: float = 5.0
    request_timeout: float = 30.0
