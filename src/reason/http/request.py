"""Immutable HTTP request.

Frozen metadata with async body access. The request is honest about
what it is: received data that doesn't change.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from dataclasses import dataclass, field, replace
from typing import Any

from reason._internal.asgi import Receive
from reason.http.forms import FORM_URLENCODED, FormData, parse_form_data
from reason.http.query import QueryParams

# Methods whose body is parsed as a form
_FORM_METHODS = frozenset({"POST", "PUT", "PATCH"})


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    Metadata (method, path, headers, query) is frozen at creation.
    Body is accessed asynchronously via ``.body()``, ``.form()`` and
    ``.form_values()``.
    """

    method: str
    path: str
    headers: tuple[tuple[bytes, bytes], ...]
    query: QueryParams
    path_params: dict[str, str]

    # Private: ASGI receive callable for body streaming
    _receive: Receive

    # Private: mutable cache for body and parsed form data
    # (dict contents are mutable even though the field reference is frozen)
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    def header(self, name: str, default: str | None = None) -> str | None:
        """First value of the header *name* (case-insensitive), or *default*."""
        key = name.lower().encode("latin-1")
        for raw_name, value in self.headers:
            if raw_name.lower() == key:
                return value.decode("latin-1")
        return default

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.header("content-type")

    # -- Async body access --

    async def body(self) -> bytes:
        """Read the full request body.

        Result is cached — the ASGI receive is consumed once, then
        the same bytes are returned on subsequent calls.
        """
        if "_body" in self._cache:
            return self._cache["_body"]
        chunks = [chunk async for chunk in self.stream()]
        result = b"".join(chunks)
        self._cache["_body"] = result
        return result

    async def stream(self) -> AsyncGenerator[bytes]:
        """Stream the request body in chunks."""
        while True:
            message = await self._receive()
            body = message.get("body", b"")
            if body:
                yield body
            if not message.get("more_body", False):
                break

    async def form(self) -> FormData:
        """Parse the body as form data (URL-encoded or multipart).

        Only POST, PUT and PATCH bodies are parsed; other methods, and
        bodies with a non-form content type, give an empty ``FormData``.
        A missing Content-Type is treated as URL-encoded.

        Result is cached.
        """
        if "_form" in self._cache:
            return self._cache["_form"]

        if self.method in _FORM_METHODS:
            ct = self.content_type or FORM_URLENCODED
            raw = await self.body()
            result = await parse_form_data(raw, ct)
        else:
            result = FormData()

        self._cache["_form"] = result
        return result

    async def form_values(self) -> FormData:
        """Body form values followed by query string values.

        ``get(name)`` on the result prefers a body value and falls back
        to the query string, so a field can be supplied either way.
        """
        if "_form_values" in self._cache:
            return self._cache["_form_values"]
        body_form = await self.form()
        result = body_form.merged(self.query)
        self._cache["_form_values"] = result
        return result

    def with_path_params(self, path_params: dict[str, str]) -> Request:
        """Return a copy carrying the router's path parameters.

        The body cache is shared, so data already read isn't lost.
        """
        return replace(self, path_params=path_params)

    # -- Factory --

    @classmethod
    def from_asgi(
        cls,
        scope: dict[str, Any],
        receive: Receive,
        path_params: dict[str, str] | None = None,
    ) -> Request:
        """Create a Request from an ASGI scope and receive callable."""
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=tuple(scope.get("headers", ())),
            query=QueryParams(scope.get("query_string", b"")),
            path_params=path_params or {},
            _receive=receive,
        )
