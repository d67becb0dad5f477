"""Request Body Decoding: tests for lenient and strict JSON body handling.

Tests cover:
    - Valid bodies decode into the model and fn's return value is passed through
    - Lenient: empty body -> fn(None); unknown fields ignored
    - Strict: empty body -> 400 "a body is required"; unknown fields -> 400,
      including fields of nested models, lists, optionals and mappings
    - Malformed JSON and validation failures -> 400 decode errors; fn not called
    - Read failures -> ErrorReadingRequestBodyError
    - The body can be re-read by the endpoint after decoding
"""

import pytest
from pydantic import BaseModel, Field
from starlette.requests import Request

from endware.api.request_body import handle_request, strict_request
from endware.core.error import Error
from endware.core.errors import (
    BodyRequiredError,
    ErrorReadingRequestBodyError,
    RequestDecodeError,
    UnexpectedFieldError,
)


class Payload(BaseModel):
    name: str
    size: int = 0
    display: str = Field(default="", alias="displayName")


@pytest.fixture
def body_request():
    """Factory: POST request whose receive channel delivers body."""
    def _make(body: bytes) -> Request:
        sent = False

        async def receive():
            nonlocal sent
            if sent:
                return {"type": "http.disconnect"}
            sent = True
            return {"type": "http.request", "body": body, "more_body": False}

        scope = {
            "type": "http",
            "method": "POST",
            "path": "/api/v1/test",
            "query_string": b"",
            "headers": [],
        }
        return Request(scope, receive)
    return _make


def _recorder():
    calls = []

    def fn(value):
        calls.append(value)
        return "handled"

    return fn, calls


async def test_valid_body_decodes_into_model(body_request):
    fn, calls = _recorder()
    result = await handle_request(body_request(b'{"name":"a","size":2}'), Payload, fn)
    assert result == "handled"
    assert calls == [Payload(name="a", size=2)]


async def test_async_fn_is_awaited(body_request):
    async def fn(value):
        return value.name

    assert await strict_request(body_request(b'{"name":"a"}'), Payload, fn) == "a"


async def test_lenient_empty_body_calls_fn_with_none(body_request):
    fn, calls = _recorder()
    assert await handle_request(body_request(b""), Payload, fn) == "handled"
    assert calls == [None]


async def test_lenient_ignores_unknown_fields(body_request):
    fn, calls = _recorder()
    await handle_request(body_request(b'{"name":"a","extra":1}'), Payload, fn)
    assert calls == [Payload(name="a")]


async def test_strict_empty_body_is_bad_request(body_request):
    fn, calls = _recorder()
    result = await strict_request(body_request(b""), Payload, fn)
    assert isinstance(result, Error)
    assert result.status_code == 400
    assert isinstance(result.cause, BodyRequiredError)
    assert str(result) == "400 Bad Request: a body is required"
    assert calls == []


async def test_strict_rejects_unknown_fields(body_request):
    fn, calls = _recorder()
    result = await strict_request(
        body_request(b'{"name":"a","zeta":1,"alpha":2}'), Payload, fn,
    )
    assert result.status_code == 400
    assert isinstance(result.cause, UnexpectedFieldError)
    assert result.cause.fields == ["alpha", "zeta"]
    assert calls == []


async def test_strict_accepts_aliases(body_request):
    fn, calls = _recorder()
    await strict_request(body_request(b'{"name":"a","displayName":"A"}'), Payload, fn)
    assert calls[0].display == "A"


async def test_malformed_json_is_bad_request(body_request):
    fn, calls = _recorder()
    result = await handle_request(body_request(b"{not json"), Payload, fn)
    assert result.status_code == 400
    assert isinstance(result.cause, RequestDecodeError)
    assert calls == []


async def test_validation_failure_is_bad_request(body_request):
    fn, calls = _recorder()
    result = await strict_request(body_request(b'{"name":"a","size":"big"}'), Payload, fn)
    assert result.status_code == 400
    assert isinstance(result.cause, RequestDecodeError)
    assert str(result.cause).startswith("decode request body: ")
    assert calls == []


async def test_read_failure_is_returned():
    async def receive():
        raise OSError("stream broken")

    request = Request({"type": "http", "method": "POST", "headers": []}, receive)
    fn, calls = _recorder()
    result = await handle_request(request, Payload, fn)
    assert isinstance(result, ErrorReadingRequestBodyError)
    assert isinstance(result.__cause__, OSError)
    assert calls == []


async def test_body_can_be_reread_after_decode(body_request):
    request = body_request(b'{"name":"a"}')

    async def fn(value):
        return await request.body()

    assert await handle_request(request, Payload, fn) == b'{"name":"a"}'


# ─── nested models ───────────────────────────────────────────────

class Inner(BaseModel):
    x: int


class Outer(BaseModel):
    inner: Inner
    items: list[Inner] = []
    maybe: Inner | None = None
    by_key: dict[str, Inner] = {}


async def test_strict_rejects_unknown_nested_field(body_request):
    fn, calls = _recorder()
    result = await strict_request(
        body_request(b'{"inner":{"x":1,"bogus":2}}'), Outer, fn,
    )
    assert result.status_code == 400
    assert result.cause.fields == ["inner.bogus"]
    assert str(result.cause) == "unexpected field: inner.bogus"
    assert calls == []


async def test_strict_rejects_unknown_fields_in_containers(body_request):
    fn, calls = _recorder()
    body = (
        b'{"inner":{"x":1},"items":[{"x":1},{"x":2,"y":3}],'
        b'"maybe":{"x":1,"z":0},"by_key":{"k":{"x":1,"w":0}}}'
    )
    result = await strict_request(body_request(body), Outer, fn)
    assert result.cause.fields == ["by_key.k.w", "items.1.y", "maybe.z"]
    assert calls == []


async def test_strict_accepts_valid_nested_body(body_request):
    fn, calls = _recorder()
    body = b'{"inner":{"x":1},"items":[{"x":2}],"maybe":null}'
    assert await strict_request(body_request(body), Outer, fn) == "handled"
    assert calls[0].items == [Inner(x=2)]


async def test_lenient_ignores_unknown_nested_field(body_request):
    fn, calls = _recorder()
    await handle_request(body_request(b'{"inner":{"x":1,"bogus":2}}'), Outer, fn)
    assert calls == [Outer(inner=Inner(x=1))]
