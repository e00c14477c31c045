"""Resource handler capability protocols.

A resource handler is any object with a ``path()`` method plus some
subset of the capability methods below. There is no base class: the
app probes the handler's shape once, when the resource is added, and
registers a route for each capability it finds.

Capability methods may be plain ``def`` or ``async def``. Any of them
may raise ``ResourceNotFound`` to answer 404.

Usage::

    class BookHandler:
        def path(self) -> str:
            return "books"

        def get_resource(self, resource_id: str) -> Book: ...
        def list_resource(self) -> list[Book]: ...
"""

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ResourceHandler(Protocol):
    """Anything that names the path segment its resource lives under."""

    def path(self) -> str: ...


@runtime_checkable
class Getter(Protocol):
    """Exposes ``GET /{path}/{id}`` to fetch a single resource."""

    def get_resource(self, resource_id: str) -> Any: ...


@runtime_checkable
class Lister(Protocol):
    """Exposes ``GET /{path}`` to fetch every resource."""

    def list_resource(self) -> Any: ...


@runtime_checkable
class Creator(Protocol):
    """Exposes ``POST /{path}`` and ``PUT /{path}`` to create a resource.

    Receives a schema instance decoded from the request form.
    """

    def create_resource(self, resource: Any) -> Any: ...


@runtime_checkable
class Updater(Protocol):
    """Exposes ``POST /{path}/{id}`` to update a single resource.

    The existing resource is fetched with ``get_resource`` first, then
    passed alongside the decoded form.
    """

    def get_resource(self, resource_id: str) -> Any: ...
    def update_resource(self, resource: Any, data: Any) -> Any: ...


@runtime_checkable
class Deleter(Protocol):
    """Exposes ``DELETE /{path}/{id}`` to delete a single resource.

    The resource is fetched with ``get_resource`` first.
    """

    def get_resource(self, resource_id: str) -> Any: ...
    def delete_resource(self, resource: Any) -> Any: ...


@dataclass(frozen=True, slots=True)
class Capabilities:
    """Which capability slots a handler fills.

    Each slot holds the handler itself when it satisfies that protocol,
    or ``None`` when it doesn't.
    """

    getter: Getter | None = None
    lister: Lister | None = None
    creator: Creator | None = None
    updater: Updater | None = None
    deleter: Deleter | None = None

    def __bool__(self) -> bool:
        return any(
            slot is not None
            for slot in (self.getter, self.lister, self.creator, self.updater, self.deleter)
        )

    @property
    def names(self) -> tuple[str, ...]:
        """Names of the filled slots, in registration order."""
        slots = (
            ("get", self.getter),
            ("list", self.lister),
            ("create", self.creator),
            ("update", self.updater),
            ("delete", self.deleter),
        )
        return tuple(name for name, slot in slots if slot is not None)


def capabilities_of(handler: object) -> Capabilities:
    """Probe *handler* once and record the capabilities it implements."""
    return Capabilities(
        getter=handler if isinstance(handler, Getter) else None,
        lister=handler if isinstance(handler, Lister) else None,
        creator=handler if isinstance(handler, Creator) else None,
        updater=handler if isinstance(handler, Updater) else None,
        deleter=handler if isinstance(handler, Deleter) else None,
    )
