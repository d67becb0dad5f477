"""Result: the success-path response model.

Invariants:
    - status_code is within 1-599; anything else raises InvalidStatusCodeError
    - with_content() sets bytes + explicit content type and bypasses negotiation;
      content that is not bytes-like raises InvalidArgumentError
    - with_value() sets a value for negotiated marshalling and clears any
      explicit content type
    - A value that fails to marshal yields a 500 Error response, never an exception

Design Decisions:
    - Fixed-status factories (ok, created, ...) plus status(code) for the rest
    - not_implemented() is a Result, not an Error: a placeholder response needs none
      of the Error projection machinery
"""

from collections.abc import Mapping
from typing import Any

from starlette import status as http_status

from endware.core.context import EndwareConfig
from endware.core.diagnostics import InternalError, report
from endware.core.error import internal_server_error
from endware.core.errors import (
    InvalidArgumentError,
    InvalidStatusCodeError,
    MarshalResultError,
)
from endware.core.headers import Headers
from endware.core.request import NegotiatedRequest
from endware.core.response import Response


class Result:
    """A successful REST API result."""

    def __init__(self, status_code: int = http_status.HTTP_200_OK):
        if not 1 <= status_code <= 599:
            raise InvalidStatusCodeError(status_code, "1-599")
        self.status_code = status_code
        self.content: Any = None
        self.content_type: str | None = None
        self.headers = Headers()

    def __repr__(self) -> str:
        return (
            f"Result(status_code={self.status_code}, content_type={self.content_type!r}, "
            f"content={self.content!r}, headers={dict(self.headers)!r})"
        )

    def with_content(self, content_type: str, content: bytes) -> "Result":
        """Set raw content with an explicit content type (ignores Accept)."""
        if not isinstance(content, (bytes, bytearray, memoryview)):
            raise InvalidArgumentError(
                f"content must be bytes-like, got {type(content).__name__}",
            )
        self.content = bytes(content)
        self.content_type = content_type
        return self

    def with_value(self, value: Any) -> "Result":
        """Set a value to be marshalled to the negotiated content type."""
        self.content = value
        self.content_type = None
        return self

    def with_header(self, key: str, value: Any) -> "Result":
        self.headers.set(key, value)
        return self

    def with_headers(self, headers: Mapping[str, Any]) -> "Result":
        self.headers.set_all(headers)
        return self

    def with_non_canonical_header(self, key: str, value: Any) -> "Result":
        """Set a header without canonicalizing its key (rarely needed)."""
        self.headers.set_non_canonical(key, value)
        return self

    def make_response(self, rq: NegotiatedRequest, config: EndwareConfig) -> Response:
        headers = Headers(self.headers)

        if self.content is None:
            return Response(status_code=self.status_code, headers=headers)

        if self.content_type is not None:
            return Response(
                status_code=self.status_code,
                content_type=self.content_type,
                content=self.content,
                headers=headers,
            )

        try:
            content = rq.marshal(self.content)
        except Exception as exc:
            report(config.log_error, InternalError(
                error=exc,
                message="error marshalling Result response",
                help=f"Result: {self!r}",
                request=rq.request,
                content_type=rq.accept,
            ))
            return internal_server_error(cause=MarshalResultError(exc)).make_response(
                rq, config,
            )

        return Response(
            status_code=self.status_code,
            content_type=rq.accept,
            content=content,
            headers=headers,
        )


# ─── Factories ───────────────────────────────────────────────────

def ok() -> Result:
    return Result(http_status.HTTP_200_OK)


def created() -> Result:
    return Result(http_status.HTTP_201_CREATED)


def accepted() -> Result:
    return Result(http_status.HTTP_202_ACCEPTED)


def no_content() -> Result:
    return Result(http_status.HTTP_204_NO_CONTENT)


def not_implemented() -> Result:
    return Result(http_status.HTTP_501_NOT_IMPLEMENTED)


def status(status_code: int) -> Result:
    """Result with an arbitrary status code in the range 1-599."""
    return Result(status_code)
