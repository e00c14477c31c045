"""Tests for reason.http.request — the immutable request."""

from reason.http.request import Request


def _make_request(
    method: str = "GET",
    path: str = "/",
    query: bytes = b"",
    headers: tuple[tuple[bytes, bytes], ...] = (),
    chunks: tuple[bytes, ...] = (b"",),
) -> tuple[Request, list[int]]:
    calls: list[int] = []
    pending = list(chunks)

    async def receive() -> dict:
        calls.append(1)
        if not pending:
            return {"type": "http.disconnect"}
        chunk = pending.pop(0)
        return {"type": "http.request", "body": chunk, "more_body": bool(pending)}

    scope = {
        "type": "http",
        "method": method,
        "path": path,
        "headers": list(headers),
        "query_string": query,
        "http_version": "1.1",
        "server": ("localhost", 8000),
        "client": ("127.0.0.1", 5555),
    }
    return Request.from_asgi(scope, receive), calls


class TestRequestMetadata:
    def test_from_asgi(self) -> None:
        request, _ = _make_request(
            method="POST",
            path="/books",
            query=b"page=2",
            headers=((b"Content-Type", b"application/x-www-form-urlencoded"),),
        )
        assert request.method == "POST"
        assert request.path == "/books"
        assert request.query.get("page") == "2"
        assert request.content_type == "application/x-www-form-urlencoded"
        assert request.path_params == {}

    def test_header_lookup_is_case_insensitive(self) -> None:
        request, _ = _make_request(headers=((b"X-Request-Id", b"abc"), (b"x-request-id", b"def")))
        assert request.header("x-request-id") == "abc"
        assert request.header("X-REQUEST-ID") == "abc"

    def test_missing_header(self) -> None:
        request, _ = _make_request()
        assert request.content_type is None
        assert request.header("accept", "*/*") == "*/*"

    def test_query_keeps_raw_bytes(self) -> None:
        request, _ = _make_request(query=b"a=1&a=2&b=")
        assert request.query.raw == b"a=1&a=2&b="
        assert request.query.get_list("a") == ["1", "2"]
        assert request.query["b"] == ""

    def test_with_path_params(self) -> None:
        request, _ = _make_request(path="/books/1")
        routed = request.with_path_params({"id": "1"})
        assert routed.path_params == {"id": "1"}
        assert request.path_params == {}
        assert routed.path == "/books/1"


class TestRequestBody:
    async def test_body_joins_chunks(self) -> None:
        request, _ = _make_request(method="POST", chunks=(b"name=", b"Dune"))
        assert await request.body() == b"name=Dune"

    async def test_body_cached(self) -> None:
        request, calls = _make_request(method="POST", chunks=(b"name=Dune",))
        await request.body()
        await request.body()
        assert len(calls) == 1

    async def test_cache_shared_with_routed_copy(self) -> None:
        request, calls = _make_request(method="POST", chunks=(b"name=Dune",))
        await request.body()
        routed = request.with_path_params({"id": "1"})
        assert await routed.body() == b"name=Dune"
        assert len(calls) == 1

    async def test_form_for_post(self) -> None:
        request, _ = _make_request(
            method="POST",
            headers=((b"content-type", b"application/x-www-form-urlencoded"),),
            chunks=(b"name=Dune",),
        )
        form = await request.form()
        assert form["name"] == "Dune"

    async def test_form_ignored_for_get(self) -> None:
        request, calls = _make_request(method="GET", chunks=(b"name=Dune",))
        form = await request.form()
        assert len(form) == 0
        assert calls == []

    async def test_form_values_merge_query(self) -> None:
        request, _ = _make_request(
            method="POST",
            query=b"id=4&name=Query",
            headers=((b"content-type", b"application/x-www-form-urlencoded"),),
            chunks=(b"name=Body",),
        )
        values = await request.form_values()
        assert values.get("name") == "Body"
        assert values.get("id") == "4"
        assert await request.form_values() is values
