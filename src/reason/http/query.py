"""Query string parameters.

Parsed once into the same multi-valued shape as a form body, so the
decoder can read either, or both merged, through ``FormData``.
"""

from urllib.parse import parse_qs

from reason.http.forms import FormData


class QueryParams(FormData):
    """Immutable query string parameters, keeping the undecoded bytes."""

    __slots__ = ("_raw",)

    def __init__(self, query_string: bytes = b"") -> None:
        super().__init__(parse_qs(query_string.decode("latin-1"), keep_blank_values=True))
        object.__setattr__(self, "_raw", query_string)

    @property
    def raw(self) -> bytes:
        """The query string as received."""
        return self._raw
