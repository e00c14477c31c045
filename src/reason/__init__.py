"""Reason — REST resources over ASGI.

Give it a dataclass schema and a handler object; it registers routes for
whichever capabilities the handler implements, decodes form input into
the schema, and answers in JSON.

Basic usage::

    from dataclasses import dataclass

    from reason import App, ResourceNotFound

    @dataclass(frozen=True, slots=True)
    class Book:
        id: int = 0
        title: str = ""

    class BookHandler:
        def path(self) -> str:
            return "books"

        def get_resource(self, resource_id: str) -> Book:
            if resource_id != "1":
                raise ResourceNotFound
            return Book(id=1, title="Dune")

    app = App()
    app.add(Book, BookHandler())
    app.run()
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "ConfigurationError",
    "Creator",
    "DecodeError",
    "Deleter",
    "Getter",
    "HTTPError",
    "Lister",
    "MarshalError",
    "NotFound",
    "ReasonError",
    "Request",
    "ResourceHandler",
    "ResourceNotFound",
    "Response",
    "Unsigned",
    "Updater",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import reason`` fast while providing a clean top-level API.
    """
    if name == "App":
        from reason.app import App

        return App

    if name == "AppConfig":
        from reason.config import AppConfig

        return AppConfig

    if name == "Request":
        from reason.http.request import Request

        return Request

    if name == "Response":
        from reason.http.response import Response

        return Response

    if name == "Unsigned":
        from reason.schema import Unsigned

        return Unsigned

    if name in ("Creator", "Deleter", "Getter", "Lister", "ResourceHandler", "Updater"):
        from reason import resource as _resource

        return getattr(_resource, name)

    if name in (
        "ConfigurationError",
        "DecodeError",
        "HTTPError",
        "MarshalError",
        "NotFound",
        "ReasonError",
        "ResourceNotFound",
    ):
        from reason import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
