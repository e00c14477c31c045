"""Form body parsing — URL-encoded and multipart.

``FormData`` implements ``MultiValueMapping`` so the decoder reads a
parsed body, a query string, or both merged through the same interface.

URL-encoded bodies use stdlib ``urllib.parse``. Multipart bodies need
``python-multipart`` (``pip install reason[forms]``). File parts carry
no form value and are skipped.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any

from reason.errors import ConfigurationError

FORM_URLENCODED = "application/x-www-form-urlencoded"
FORM_MULTIPART = "multipart/form-data"


class FormData(Mapping[str, str]):
    """Immutable parsed form data.

    ``__getitem__`` returns the first value for a key.
    ``get_list`` returns all values for a key.

    Usage::

        form = await request.form()
        name = form.get("name", "")
    """

    __slots__ = ("_data",)

    def __init__(self, data: dict[str, list[str]] | None = None) -> None:
        object.__setattr__(self, "_data", data or {})

    def __getitem__(self, key: str) -> str:
        return self._data[key][0]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the first value for *key*, or *default* if missing."""
        values = self._data.get(key)
        if values:
            return values[0]
        return default

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key* (checkboxes, multi-selects)."""
        return list(self._data.get(key, []))

    def merged(self, other: Any) -> FormData:
        """Return a new FormData with *other*'s values after this one's.

        *other* is any ``MultiValueMapping``. For keys present in both,
        this form's values come first, so ``get()`` prefers them.
        """
        data = {key: list(values) for key, values in self._data.items()}
        for key in other:
            data.setdefault(key, []).extend(other.get_list(key))
        return FormData(data)


async def parse_form_data(body: bytes, content_type: str) -> FormData:
    """Parse a form body into FormData.

    Supports:
    - ``application/x-www-form-urlencoded`` (stdlib, no extra dependency)
    - ``multipart/form-data`` (requires ``python-multipart``)

    Any other content type carries no form values and yields an empty
    ``FormData``.

    Raises:
        ConfigurationError: If multipart parsing is needed but
            ``python-multipart`` is not installed.
        ValueError: If a multipart body has no boundary.
    """
    ct_lower = content_type.lower().split(";")[0].strip()

    if ct_lower == FORM_URLENCODED:
        return _parse_urlencoded(body)

    if ct_lower == FORM_MULTIPART:
        return await _parse_multipart(body, content_type)

    return FormData()


def _parse_urlencoded(body: bytes) -> FormData:
    """Parse URL-encoded form data using stdlib."""
    from urllib.parse import parse_qs

    parsed = parse_qs(body.decode("utf-8"), keep_blank_values=True)
    return FormData(parsed)


async def _parse_multipart(body: bytes, content_type: str) -> FormData:
    """Parse multipart form data using python-multipart.

    Raises ``ConfigurationError`` if ``python-multipart`` is not installed.
    """
    try:
        from python_multipart.multipart import MultipartParser, parse_options_header
    except ImportError:
        msg = (
            "Multipart form parsing requires the 'python-multipart' package. "
            "Install it with: pip install reason[forms]"
        )
        raise ConfigurationError(msg) from None

    _, options = parse_options_header(content_type.encode("latin-1"))
    boundary = options.get(b"boundary")
    if boundary is None:
        msg = "Multipart form data missing boundary parameter"
        raise ValueError(msg)

    data: dict[str, list[str]] = {}

    # Current part state
    current_data = bytearray()
    current_field_name: str | None = None
    current_is_file = False
    pending_header = ""

    def on_part_begin() -> None:
        nonlocal current_data, current_field_name, current_is_file
        current_data = bytearray()
        current_field_name = None
        current_is_file = False

    def on_part_data(chunk: bytes, start: int, end: int) -> None:
        current_data.extend(chunk[start:end])

    def on_part_end() -> None:
        if current_field_name is None or current_is_file:
            return
        value = current_data.decode("utf-8", errors="replace")
        data.setdefault(current_field_name, []).append(value)

    def on_header_field(hdata: bytes, start: int, end: int) -> None:
        nonlocal pending_header
        pending_header = hdata[start:end].decode("latin-1").lower()

    def on_header_value(hdata: bytes, start: int, end: int) -> None:
        nonlocal current_field_name, current_is_file
        if pending_header != "content-disposition":
            return
        _, params = parse_options_header(hdata[start:end])
        name = params.get(b"name")
        if name is not None:
            current_field_name = name.decode("utf-8")
        current_is_file = b"filename" in params

    callbacks: dict[str, Any] = {
        "on_part_begin": on_part_begin,
        "on_part_data": on_part_data,
        "on_part_end": on_part_end,
        "on_header_field": on_header_field,
        "on_header_value": on_header_value,
    }

    parser = MultipartParser(boundary, callbacks)
    parser.write(body)
    parser.finalize()

    return FormData(data)
