"""Tests for reason.schema — field descriptors and the field cache."""

import threading
from dataclasses import dataclass, field

import pytest

from reason.errors import ConfigurationError
from reason.schema import (
    FieldCache,
    FieldKind,
    Unsigned,
    describe,
    parse_wire_tag,
)


@dataclass
class Book:
    id: int = field(default=0, metadata={"json": "id"})
    title: str = field(default="", metadata={"json": "name"})
    pages: Unsigned = Unsigned(0)
    price: float = 0.0
    in_print: bool = False
    isbn: str = field(default="", metadata={"json": "isbn,omitempty"})
    tags: list[str] = field(default_factory=list)


@dataclass
class Computed:
    title: str
    slug: str = field(init=False, default="")


class TestParseWireTag:
    def test_name_only(self) -> None:
        assert parse_wire_tag("name", "title") == ("name", frozenset())

    def test_name_with_modifier(self) -> None:
        assert parse_wire_tag("isbn,omitempty", "isbn") == ("isbn", frozenset({"omitempty"}))

    def test_empty_name_falls_back_to_attribute(self) -> None:
        assert parse_wire_tag(",omitempty", "isbn") == ("isbn", frozenset({"omitempty"}))


class TestDescribe:
    def test_wire_names(self) -> None:
        names = [f.name for f in describe(Book)]
        assert names == ["id", "name", "pages", "price", "in_print", "isbn", "tags"]

    def test_attribute_names(self) -> None:
        assert describe(Book)[1].attr == "title"

    def test_kinds(self) -> None:
        kinds = {f.attr: f.kind for f in describe(Book)}
        assert kinds == {
            "id": FieldKind.INT,
            "title": FieldKind.STRING,
            "pages": FieldKind.UINT,
            "price": FieldKind.FLOAT,
            "in_print": FieldKind.BOOL,
            "isbn": FieldKind.STRING,
            "tags": FieldKind.UNSUPPORTED,
        }

    def test_omit_empty(self) -> None:
        flags = {f.attr: f.omit_empty for f in describe(Book)}
        assert flags["isbn"] is True
        assert flags["title"] is False

    def test_defaults(self) -> None:
        title, slug = describe(Computed)
        assert title.has_default is False
        assert slug.has_default is True
        assert all(f.has_default for f in describe(Book))

    def test_init_false_fields_described(self) -> None:
        assert [(f.attr, f.init) for f in describe(Computed)] == [("title", True), ("slug", False)]

    def test_zero_values(self) -> None:
        zeros = {f.attr: f.zero for f in describe(Book)}
        assert zeros["id"] == 0
        assert zeros["title"] == ""
        assert zeros["price"] == 0.0
        assert zeros["in_print"] is False
        assert zeros["tags"] is None

    def test_rejects_non_dataclass(self) -> None:
        class NotASchema:
            title: str = ""

        with pytest.raises(ConfigurationError, match="dataclass"):
            describe(NotASchema)

    def test_rejects_instance(self) -> None:
        with pytest.raises(ConfigurationError):
            describe(Book())  # type: ignore[arg-type]


class TestFieldCache:
    def test_computes_once(self) -> None:
        cache = FieldCache()
        first = cache.fields(Book)
        assert Book in cache
        assert cache.fields(Book) is first
        assert len(cache) == 1

    def test_error_not_cached(self) -> None:
        cache = FieldCache()
        with pytest.raises(ConfigurationError):
            cache.fields(int)
        assert len(cache) == 0

    def test_concurrent_first_reads_agree(self) -> None:
        cache = FieldCache()
        results: list[tuple] = []
        barrier = threading.Barrier(8)

        def read() -> None:
            barrier.wait()
            results.append(cache.fields(Book))

        threads = [threading.Thread(target=read) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(results) == 8
        assert all(r == results[0] for r in results)
        assert len(cache) == 1
