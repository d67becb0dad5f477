"""Error: the failure-path response model and its total response builder.

Invariants:
    - status_code is 0 (unset) or within 400-599; anything else raises at construction
    - Unset status resolves to 500, unset timestamp to the clock, unset request to
      the inbound request, at the moment the response is built
    - make_response() always returns a Response: if projecting or marshalling the
      error body fails, a fixed plain/text body describing both failures is
      returned with status 500
    - str(error) == "<code> <status text>[: <cause>][: <message>]"

Design Decisions:
    - Error is an Exception: endpoint code may return it or raise it
    - Explicit keyword options (cause=, request=) over mixed-type varargs: no runtime
      inspection of argument types (ADR: discrete builder options)
    - Several causes are combined into one ExceptionGroup so each stays matchable
      with except* / .exceptions
    - Timestamp stamped at construction from the active config clock
"""

from collections.abc import Mapping, Sequence
from datetime import datetime
from types import MappingProxyType
from typing import Any

from starlette import status
from starlette.requests import Request

from endware.core.context import EndwareConfig, current_config
from endware.core.diagnostics import InternalError, report
from endware.core.errors import InvalidStatusCodeError
from endware.core.headers import Headers
from endware.core.projection import ErrorInfo, describe_error
from endware.core.request import NegotiatedRequest
from endware.core.response import Response, status_text

FALLBACK_CONTENT_TYPE = "plain/text"

Causes = BaseException | Sequence[BaseException] | None


def _combine_causes(cause: Causes) -> BaseException | None:
    if cause is None or isinstance(cause, BaseException):
        return cause
    causes = list(cause)
    if not causes:
        return None
    if len(causes) == 1:
        return causes[0]
    return BaseExceptionGroup("multiple errors", causes)


def _check_status(status_code: int) -> None:
    if status_code and not 400 <= status_code <= 599:
        raise InvalidStatusCodeError(status_code, "4xx-5xx")


def fallback_body(marshal_error: BaseException, error: "Error") -> bytes:
    """Body emitted when an error response cannot itself be marshalled."""
    return "\n".join([
        "An error occurred marshalling an error response",
        "",
        "The marshalling error was:",
        "   " + str(marshal_error),
        "",
        "The original error was:",
        "   " + str(error),
    ]).encode()


class Error(Exception):
    """A REST API error, projected into the response body at build time."""

    def __init__(
        self,
        status_code: int = 0,
        *messages: str,
        cause: Causes = None,
        request: Request | None = None,
    ):
        _check_status(status_code)
        super().__init__(status_code, *messages)
        self.status_code = status_code
        self.message: str | None = " ".join(messages) if messages else None
        self.cause = _combine_causes(cause)
        if self.cause is not None:
            self.__cause__ = self.cause
        self.help: str | None = None
        self.request = request
        self.timestamp: datetime | None = current_config().clock()
        self.properties: dict[str, Any] = {}
        self.headers = Headers()

    def __str__(self) -> str:
        code = self.status_code or status.HTTP_500_INTERNAL_SERVER_ERROR
        parts = [f"{code} {status_text(code)}"]
        if self.cause is not None:
            parts.append(describe_error(self.cause))
        if self.message is not None:
            parts.append(self.message)
        return ": ".join(parts)

    def __repr__(self) -> str:
        return f"Error({str(self)!r})"

    # ─── Builders ────────────────────────────────────────────────

    def with_message(self, message: str) -> "Error":
        self.message = message
        return self

    def with_help(self, help: str) -> "Error":
        self.help = help
        return self

    def with_property(self, key: str, value: Any) -> "Error":
        self.properties[key] = value
        return self

    def with_request(self, request: Request) -> "Error":
        self.request = request
        return self

    def with_header(self, key: str, value: Any) -> "Error":
        self.headers.set(key, value)
        return self

    def with_headers(self, headers: Mapping[str, Any]) -> "Error":
        self.headers.set_all(headers)
        return self

    def with_non_canonical_header(self, key: str, value: Any) -> "Error":
        """Set a header without canonicalizing its key (rarely needed)."""
        self.headers.set_non_canonical(key, value)
        return self

    # ─── Response ────────────────────────────────────────────────

    def info(self) -> ErrorInfo:
        """Frozen snapshot of the error for projection."""
        return ErrorInfo(
            status_code=self.status_code,
            timestamp=self.timestamp,
            error=self.cause,
            message=self.message or "",
            help=self.help or "",
            request=self.request,
            properties=MappingProxyType(dict(self.properties)),
        )

    def make_response(self, rq: NegotiatedRequest, config: EndwareConfig) -> Response:
        _check_status(self.status_code)
        self.status_code = self.status_code or status.HTTP_500_INTERNAL_SERVER_ERROR
        if self.timestamp is None:
            self.timestamp = config.clock()
        if self.request is None:
            self.request = rq.request

        try:
            content = rq.marshal(config.project_error(self.info()))
        except Exception as exc:
            report(config.log_error, InternalError(
                error=exc,
                message="error marshalling error response",
                help=f"the original error was: {self}",
                request=rq.request,
                content_type=rq.accept,
            ))
            return Response(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content_type=FALLBACK_CONTENT_TYPE,
                content=fallback_body(exc, self),
            )

        return Response(
            status_code=self.status_code,
            content_type=rq.accept,
            content=content,
            headers=Headers(self.headers),
        )


# ─── Factories ───────────────────────────────────────────────────

def bad_request(*messages: str, cause: Causes = None, request: Request | None = None) -> Error:
    return Error(status.HTTP_400_BAD_REQUEST, *messages, cause=cause, request=request)


def unauthorized(*messages: str, cause: Causes = None, request: Request | None = None) -> Error:
    return Error(status.HTTP_401_UNAUTHORIZED, *messages, cause=cause, request=request)


def forbidden(*messages: str, cause: Causes = None, request: Request | None = None) -> Error:
    return Error(status.HTTP_403_FORBIDDEN, *messages, cause=cause, request=request)


def not_found(*messages: str, cause: Causes = None, request: Request | None = None) -> Error:
    return Error(status.HTTP_404_NOT_FOUND, *messages, cause=cause, request=request)


def internal_server_error(
    *messages: str, cause: Causes = None, request: Request | None = None,
) -> Error:
    return Error(
        status.HTTP_500_INTERNAL_SERVER_ERROR, *messages, cause=cause, request=request,
    )
