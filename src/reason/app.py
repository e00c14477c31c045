"""Reason application class.

Mutable during setup (resource registration).
Frozen at runtime when app.run() or __call__() is first invoked.
"""

import logging
import threading

from reason._internal.asgi import Receive, Scope, Send
from reason.config import AppConfig
from reason.dispatch import resource_routes
from reason.errors import ConfigurationError
from reason.resource import ResourceHandler, capabilities_of
from reason.routing.route import Route
from reason.routing.router import Router
from reason.schema import FieldCache
from reason.server.handler import handle_request

logger = logging.getLogger("reason.app")


class App:
    """The reason application.

    Add resources with ``app.add(schema, handler)``; each handler's
    capabilities become routes. The app is an ASGI callable.

    Usage::

        app = App()
        app.add(Book, BookHandler())
        app.run()

    Thread safety:
        Setup is single-threaded. The freeze transition uses a Lock +
        double-check so exactly one thread compiles the router, even when
        several ASGI workers call ``__call__()`` concurrently on first
        request. After the freeze the router is read-only.
    """

    __slots__ = (
        "_field_cache",
        "_freeze_lock",
        "_frozen",
        "_router",
        "config",
    )

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config: AppConfig = config or AppConfig()
        self._field_cache: FieldCache = FieldCache()
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

        # Routes are added as resources are; compiled by _freeze()
        self._router: Router = Router()

    # -- Resource registration --

    def add(self, schema: object, handler: object) -> list[Route]:
        """Register a resource handler.

        Args:
            schema: The resource's dataclass, or an instance of it. Form
                input on create and update is decoded into this type.
            handler: An object with ``path()`` and any of
                ``get_resource``, ``list_resource``, ``create_resource``,
                ``update_resource``, ``delete_resource``.

        Returns:
            The routes registered for the handler (possibly none).

        Raises:
            ConfigurationError: If *schema* is not a dataclass, *handler*
                has no ``path()`` method, or a route clashes with one
                already registered.
            RuntimeError: If the app is already serving.
        """
        self._check_not_frozen()

        schema_type = schema if isinstance(schema, type) else type(schema)
        # Reflect eagerly so a bad schema fails at setup, not on first request
        self._field_cache.fields(schema_type)

        if not isinstance(handler, ResourceHandler):
            msg = f"Resource handler {handler!r} must define a path() method."
            raise ConfigurationError(msg)
        resource_path = handler.path()
        if not isinstance(resource_path, str):
            msg = f"{type(handler).__name__}.path() must return a str, got {resource_path!r}."
            raise ConfigurationError(msg)

        capabilities = capabilities_of(handler)
        routes = resource_routes(
            schema_type,
            handler,
            resource_path,
            self._field_cache,
            capabilities=capabilities,
        )
        if not capabilities:
            logger.warning(
                "%s implements no resource capabilities; /%s has no routes",
                type(handler).__name__,
                resource_path.strip("/"),
            )
        else:
            logger.debug(
                "Added %s at /%s (%s)",
                type(handler).__name__,
                resource_path.strip("/"),
                ", ".join(capabilities.names),
            )

        for route in routes:
            self._router.add(route)
        return routes

    @property
    def routes(self) -> list[Route]:
        """Every route registered so far."""
        return self._router.routes

    # -- Server --

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Start the server.

        Compiles the app (freezing routes) and serves requests with
        pounce. ``config.debug`` selects single-worker auto-reload.

        Args:
            host: Override bind host.
            port: Override bind port.
        """
        from reason.server.serve import run_server

        self._ensure_frozen()
        run_server(self, self.config, host or self.config.host, port or self.config.port)

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point.

        Handles lifespan directly, then delegates HTTP scopes to the
        request handler pipeline.
        """
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        self._ensure_frozen()

        await handle_request(
            scope,
            receive,
            send,
            router=self._router,
            redirect_trailing_slash=self.config.redirect_trailing_slash,
        )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol.

        Freezes the app at startup (before the first HTTP request), so
        registration errors surface as a failed startup.
        """
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    self._ensure_frozen()
                except Exception as exc:
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Compile the route table.

        MUST only be called while holding _freeze_lock.
        """
        self._router.compile()
        self._frozen = True

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Add resources before calling app.run()."
            )
            raise RuntimeError(msg)
