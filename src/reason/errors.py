"""Reason exception hierarchy.

Shared across Router, App, dispatcher, and writer so every module
raises and catches the same types.
"""

from dataclasses import dataclass


class ReasonError(Exception):
    """Base for all reason-specific errors."""


class ConfigurationError(ReasonError):
    """Raised when a resource or the app is set up incorrectly.

    Typically raised by ``App.add()`` or the router while routes are
    being registered, never while serving.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(ReasonError):
    """An error that maps directly to an HTTP status code.

    Raised by the router or deliberately by handler code. The ASGI
    handler catches these and answers with the status and an empty body.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404 — no route matched the request method and path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class ResourceNotFound(NotFound):  # noqa: N818
    """404 — raised by a resource handler when the resource does not exist.

    Any capability method may raise it::

        def get_resource(self, resource_id: str) -> Book:
            try:
                return self.books[resource_id]
            except KeyError:
                raise ResourceNotFound(resource_id) from None
    """

    def __init__(self, detail: str = "Resource not found") -> None:
        super().__init__(detail)


class DecodeError(ReasonError):
    """Raised when a form value cannot be converted to its field's kind.

    Attributes:
        field: Wire name of the first field that failed.
        value: The raw form value.
    """

    def __init__(self, field: str, value: str, reason: str) -> None:
        self.field = field
        self.value = value
        super().__init__(f"cannot decode {field!r} from {value!r}: {reason}")


class MarshalError(ReasonError):
    """Raised when a handler result cannot be encoded as JSON."""
