"""Tests for reason.errors — the exception hierarchy."""

import pytest

from reason.errors import (
    DecodeError,
    HTTPError,
    NotFound,
    ReasonError,
    ResourceNotFound,
)


class TestHTTPErrors:
    def test_not_found(self) -> None:
        exc = NotFound()
        assert exc.status == 404
        assert str(exc) == "404: Not Found"

    def test_resource_not_found_is_not_found(self) -> None:
        exc = ResourceNotFound("book 9")
        assert isinstance(exc, NotFound)
        assert isinstance(exc, ReasonError)
        assert exc.status == 404
        assert exc.detail == "book 9"

    def test_raise_bare_class(self) -> None:
        with pytest.raises(ResourceNotFound) as exc_info:
            raise ResourceNotFound
        assert exc_info.value.detail == "Resource not found"

    def test_status_only_str(self) -> None:
        assert str(HTTPError(status=503)) == "503"


class TestDecodeError:
    def test_attributes(self) -> None:
        exc = DecodeError("id", "abc", "invalid syntax")
        assert exc.field == "id"
        assert exc.value == "abc"
        assert "'id'" in str(exc)
        assert "'abc'" in str(exc)
