"""Schema field descriptors and their per-type cache.

A resource schema is a dataclass. Each field has a wire name — the
attribute name unless the field's metadata carries a ``"json"`` entry —
and a kind derived from its annotation::

    @dataclass(frozen=True, slots=True)
    class Book:
        id: int = field(default=0, metadata={"json": "id"})
        title: str = ""
        pages: Unsigned = Unsigned(0)
        isbn: str = field(default="", metadata={"json": "isbn,omitempty"})

The part of the ``"json"`` entry before the first comma is the name;
``omitempty`` after it drops zero values when the resource is encoded.

Reflection runs once per schema type. ``FieldCache`` memoizes the
result; reads take no lock, and the write of a freshly computed entry
is guarded by a plain lock. Two threads racing on the first read of a
type both compute the same tuple, so the last write wins harmlessly.
"""

import dataclasses
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, NewType, get_type_hints

from reason.errors import ConfigurationError

# Metadata key holding a field's wire name and modifiers
WIRE_NAME_KEY = "json"

# Marks an int field as unsigned: negative or signed input fails to decode
Unsigned = NewType("Unsigned", int)


class FieldKind(Enum):
    """Primitive kinds the form decoder knows how to coerce."""

    STRING = "string"
    INT = "int"
    UINT = "uint"
    FLOAT = "float"
    BOOL = "bool"
    UNSUPPORTED = "unsupported"


_KINDS: dict[Any, FieldKind] = {
    str: FieldKind.STRING,
    int: FieldKind.INT,
    Unsigned: FieldKind.UINT,
    float: FieldKind.FLOAT,
    bool: FieldKind.BOOL,
}

_ZERO: dict[FieldKind, Any] = {
    FieldKind.STRING: "",
    FieldKind.INT: 0,
    FieldKind.UINT: 0,
    FieldKind.FLOAT: 0.0,
    FieldKind.BOOL: False,
}


@dataclass(frozen=True, slots=True)
class FieldDescriptor:
    """How one schema field is named on the wire and reached on an instance."""

    name: str
    attr: str
    kind: FieldKind
    has_default: bool = False
    omit_empty: bool = False
    init: bool = True

    @property
    def zero(self) -> Any:
        """The kind's zero value (``None`` for unsupported kinds)."""
        return _ZERO.get(self.kind)


def parse_wire_tag(tag: str, attr: str) -> tuple[str, frozenset[str]]:
    """Split a ``"name,modifier,..."`` tag into a name and its modifiers.

    An empty name (``",omitempty"``) falls back to *attr*.
    """
    name, _, rest = tag.partition(",")
    modifiers = frozenset(m.strip() for m in rest.split(",") if m.strip())
    return name or attr, modifiers


def describe(schema: type) -> tuple[FieldDescriptor, ...]:
    """Reflect over a dataclass type and return its field descriptors.

    Fields keep declaration order. Fields declared with ``init=False``
    are described with ``init`` unset: they are encoded, never decoded.

    Raises:
        ConfigurationError: If *schema* is not a dataclass type.
    """
    if not isinstance(schema, type) or not dataclasses.is_dataclass(schema):
        msg = f"Resource schema must be a dataclass type, got {schema!r}."
        raise ConfigurationError(msg)

    hints = get_type_hints(schema)
    descriptors: list[FieldDescriptor] = []
    for f in dataclasses.fields(schema):
        tag = f.metadata.get(WIRE_NAME_KEY)
        if tag:
            name, modifiers = parse_wire_tag(tag, f.name)
        else:
            name, modifiers = f.name, frozenset()
        descriptors.append(
            FieldDescriptor(
                name=name,
                attr=f.name,
                kind=_KINDS.get(hints.get(f.name), FieldKind.UNSUPPORTED),
                has_default=(
                    f.default is not dataclasses.MISSING
                    or f.default_factory is not dataclasses.MISSING
                ),
                omit_empty="omitempty" in modifiers,
                init=f.init,
            )
        )
    return tuple(descriptors)


class FieldCache:
    """Memoized ``describe()`` results keyed by schema type.

    Thread safety:
        Reads are lock-free dict lookups. A miss computes descriptors
        outside the lock, then stores them under ``_lock``. The value is
        a pure function of the type, so concurrent first reads agree.
    """

    __slots__ = ("_entries", "_lock")

    def __init__(self) -> None:
        self._entries: dict[type, tuple[FieldDescriptor, ...]] = {}
        self._lock = threading.Lock()

    def fields(self, schema: type) -> tuple[FieldDescriptor, ...]:
        """Return the descriptors for *schema*, computing them on first use."""
        cached = self._entries.get(schema)
        if cached is not None:
            return cached

        computed = describe(schema)
        with self._lock:
            self._entries[schema] = computed
        return computed

    def __contains__(self, schema: object) -> bool:
        return schema in self._entries

    def __len__(self) -> int:
        return len(self._entries)
