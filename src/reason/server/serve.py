"""Serving a reason App with pounce.

Pounce's ``run()`` takes an import string (e.g., ``"myapp:app"``), but
reason has a live ``App`` object, so ``pounce.Server`` is used directly
with the ASGI callable.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from reason.config import AppConfig


def run_server(app: object, config: AppConfig, host: str, port: int) -> None:
    """Start a pounce server for *app*.

    In debug mode a single worker runs with auto-reload; otherwise
    ``config.workers`` workers serve (0 lets pounce pick from CPU count).

    Args:
        app: ASGI callable (a reason App instance).
        config: The app's configuration.
        host: Bind host address.
        port: Bind port number.
    """
    try:
        from pounce.config import ServerConfig
        from pounce.server import Server
    except ImportError:
        from reason.errors import ConfigurationError

        msg = (
            "Serving requires the 'bengal-pounce' package. "
            "Install it with: pip install reason[server]"
        )
        raise ConfigurationError(msg) from None

    server_config = ServerConfig(
        host=host,
        port=port,
        workers=1 if config.debug else config.workers,
        reload=config.debug,
        log_level=config.log_level,
        log_format=config.log_format,
        keep_alive_timeout=config.keep_alive_timeout,
        request_timeout=config.request_timeout,
    )
    Server(server_config, app).run()
