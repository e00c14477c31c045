"""Response and error writing — the single place results become HTTP.

Resources are encoded as compact JSON through their schema's field
descriptors. Failures never carry a body: the client sees only the
status code, and anything unexpected is logged here with its
traceback.
"""

import dataclasses
import json as json_module
import logging
from collections.abc import Iterable, Mapping
from typing import Any

from reason.errors import HTTPError, MarshalError
from reason.http.request import Request
from reason.http.response import JSON_CONTENT_TYPE, Response
from reason.schema import FieldCache

logger = logging.getLogger("reason.server")


def _is_empty(value: Any) -> bool:
    """Whether an ``omitempty`` field should be dropped."""
    if value is None or value is False:
        return True
    if isinstance(value, (str, bytes, list, tuple, dict)):
        return len(value) == 0
    return isinstance(value, (int, float)) and value == 0


def to_wire(value: Any, cache: FieldCache) -> Any:
    """Convert a handler result to plain JSON-compatible values.

    Dataclass instances become objects keyed by wire name. Raises
    ``MarshalError`` for values JSON has no encoding for.
    """
    if value is None or isinstance(value, (str, bool, int, float)):
        return value

    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        out: dict[str, Any] = {}
        for f in cache.fields(type(value)):
            if f.name == "-":
                continue
            attr = getattr(value, f.attr)
            if f.omit_empty and _is_empty(attr):
                continue
            out[f.name] = to_wire(attr, cache)
        return out

    if isinstance(value, (list, tuple)):
        return [to_wire(item, cache) for item in value]

    if isinstance(value, Mapping):
        obj: dict[str, Any] = {}
        for key, item in value.items():
            if not isinstance(key, (str, int)) or isinstance(key, bool):
                msg = f"unsupported mapping key type: {type(key).__name__}"
                raise MarshalError(msg)
            obj[str(key)] = to_wire(item, cache)
        return obj

    msg = f"unsupported type: {type(value).__name__}"
    raise MarshalError(msg)


def marshal(value: Any, cache: FieldCache) -> bytes:
    """Encode *value* as compact UTF-8 JSON.

    Raises:
        MarshalError: If *value* (or anything inside it) can't be encoded,
            including NaN and infinite floats.
    """
    wire = to_wire(value, cache)
    try:
        text = json_module.dumps(wire, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise MarshalError(str(exc)) from exc
    return text.encode("utf-8")


def write_resource(value: Any, cache: FieldCache, *, status: int = 200) -> Response:
    """A JSON response for a single resource."""
    return Response(body=marshal(value, cache), status=status, content_type=JSON_CONTENT_TYPE)


def write_resource_list(values: Iterable[Any] | None, cache: FieldCache) -> Response:
    """A 200 JSON array response. ``None`` encodes as ``[]``."""
    return write_resource(list(values or ()), cache)


def write_empty(status: int = 200) -> Response:
    """A status-only response."""
    return Response(status=status)


def write_http_error(exc: HTTPError, request: Request) -> Response:
    """Map an HTTPError to an empty-bodied response with its status."""
    if exc.status == 404:
        logger.debug("404 %s %s: %s", request.method, request.path, exc.detail)
    else:
        logger.info("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)

    response = write_empty(exc.status)
    for name, value in exc.headers:
        response = response.with_header(name, value)
    return response


def write_internal_error(exc: Exception, request: Request) -> Response:
    """Log an unexpected failure and answer 500 without echoing it."""
    logger.error(
        "500 %s %s: unhandled error: %s",
        request.method,
        request.path,
        exc,
        exc_info=exc,
    )
    return write_empty(500)
