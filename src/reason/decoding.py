"""Form decoding — build a schema instance from request form values.

Each schema field is looked up by its wire name in the merged form
(body values first, then query string). Strings are converted to the
field's kind:

- ``str``: verbatim
- ``int``: base-10 with optional sign, signed 64-bit range
- ``Unsigned``: base-10 digits only, unsigned 64-bit range
- ``float``: ASCII base-10 float syntax, no surrounding whitespace
- ``bool``: ``True`` only for ``"true"`` and ``"1"``, anything else is ``False``

A missing or empty value leaves the field at its default (or the kind's
zero value); there is no required-field check. Fields of any other type
and fields declared with ``init=False`` are skipped. The first value
that fails to convert aborts the decode with ``DecodeError``.
"""

import math
import re
from collections.abc import Callable
from typing import Any, TypeVar

from reason._internal.multimap import MultiValueMapping
from reason.errors import DecodeError
from reason.http.request import Request
from reason.schema import FieldCache, FieldKind

T = TypeVar("T")

_SIGNED = re.compile(r"[+-]?[0-9]+")
_UNSIGNED = re.compile(r"[0-9]+")

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_UINT64_MAX = 2**64 - 1


def _parse_int(raw: str) -> int:
    if not _SIGNED.fullmatch(raw):
        msg = "invalid syntax"
        raise ValueError(msg)
    value = int(raw)
    if not _INT64_MIN <= value <= _INT64_MAX:
        msg = "value out of range"
        raise ValueError(msg)
    return value


def _parse_uint(raw: str) -> int:
    if not _UNSIGNED.fullmatch(raw):
        msg = "invalid syntax"
        raise ValueError(msg)
    value = int(raw)
    if value > _UINT64_MAX:
        msg = "value out of range"
        raise ValueError(msg)
    return value


def _parse_float(raw: str) -> float:
    if not raw.isascii() or raw != raw.strip() or "_" in raw:
        msg = "invalid syntax"
        raise ValueError(msg)
    value = float(raw)
    if math.isinf(value) and "inf" not in raw.lower():
        msg = "value out of range"
        raise ValueError(msg)
    return value


def _parse_bool(raw: str) -> bool:
    # Anything else is False, never an error
    return raw in ("true", "1")


_COERCIONS: dict[FieldKind, Callable[[str], Any]] = {
    FieldKind.STRING: str,
    FieldKind.INT: _parse_int,
    FieldKind.UINT: _parse_uint,
    FieldKind.FLOAT: _parse_float,
    FieldKind.BOOL: _parse_bool,
}


def decode_values(values: MultiValueMapping, schema: type[T], cache: FieldCache) -> T:
    """Create a *schema* instance from a multi-valued string mapping.

    Args:
        values: Form values keyed by wire name. The first value wins.
        schema: The dataclass type to instantiate.
        cache: Field descriptor cache used to reflect over *schema*.

    Returns:
        A new instance of *schema*.

    Raises:
        DecodeError: If a value can't be converted to its field's kind.
    """
    kwargs: dict[str, Any] = {}

    for f in cache.fields(schema):
        if not f.init:
            continue
        raw = values.get(f.name)
        coerce = _COERCIONS.get(f.kind)

        if not raw or coerce is None:
            # Leave at the dataclass default, or fill the kind's zero
            if not f.has_default:
                kwargs[f.attr] = f.zero
            continue

        try:
            kwargs[f.attr] = coerce(raw)
        except ValueError as exc:
            raise DecodeError(f.name, raw, str(exc)) from exc

    return schema(**kwargs)


async def decode_form(request: Request, schema: type[T], cache: FieldCache) -> T:
    """Decode the request's form values into a new *schema* instance.

    Reads the body form (POST/PUT/PATCH) merged with the query string.
    """
    values = await request.form_values()
    return decode_values(values, schema, cache)
