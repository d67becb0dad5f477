"""Problem: RFC 7807 problem details response model.

Invariants:
    - Only fields that are set appear in the body (type, title, status > 0, detail,
      instance, plus free-form properties)
    - Properties never use a reserved key (type, title, status, detail, instance)
    - Content type is always application/problem+json, regardless of Accept
    - An entirely unset Problem raises InvalidOperationError when its response is
      requested (progressive building is legitimate, so not at construction)

Design Decisions:
    - Body is a plain dict marshalled with the negotiator's application/json
      marshaller; RFC 7807 mandates its own media type so Accept is not consulted
    - new_problem() applies defaults (status 500, detail = status text); Problem()
      is the blank form for builder-style use
"""

from collections.abc import Mapping
from typing import Any

from starlette import status as http_status

from endware.core.context import EndwareConfig
from endware.core.diagnostics import InternalError, report
from endware.core.error import internal_server_error
from endware.core.errors import InvalidArgumentError, InvalidOperationError
from endware.core.negotiation import APPLICATION_JSON
from endware.core.request import NegotiatedRequest
from endware.core.response import Response, status_text

PROBLEM_CONTENT_TYPE = "application/problem+json"

RESERVED_KEYS = frozenset({"type", "title", "status", "detail", "instance"})


def _check_key(key: str) -> None:
    if key in RESERVED_KEYS:
        raise InvalidArgumentError(
            f"'{key}' is a reserved field which must be set using the "
            "appropriate Problem method",
        )


class Problem:
    """An RFC 7807 Problem Details response."""

    def __init__(self):
        self.type: str | None = None
        self.title = ""
        self.status = 0
        self.detail = ""
        self.instance: str | None = None
        self.properties: dict[str, Any] = {}

    def __repr__(self) -> str:
        return f"Problem({self.to_dict()!r})"

    def with_status(self, status: int) -> "Problem":
        self.status = status
        return self

    def with_detail(self, detail: str) -> "Problem":
        """Human-readable explanation specific to this occurrence."""
        self.detail = detail
        return self

    def with_instance(self, instance: str) -> "Problem":
        """URI identifying this specific occurrence of the problem."""
        self.instance = instance
        return self

    def with_type(self, type: str, *title: str) -> "Problem":
        """Set the problem type URI; title words, if any, are space-joined."""
        self.type = type
        self.title = " ".join(title)
        return self

    def with_property(self, key: str, value: Any) -> "Problem":
        _check_key(key)
        self.properties[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {}
        if self.type is not None:
            body["type"] = self.type
        if self.title:
            body["title"] = self.title
        if self.status > 0:
            body["status"] = self.status
        if self.detail:
            body["detail"] = self.detail
        if self.instance is not None:
            body["instance"] = self.instance
        body.update(self.properties)
        return body

    def make_response(self, rq: NegotiatedRequest, config: EndwareConfig) -> Response:
        body = self.to_dict()
        if not body:
            raise InvalidOperationError("an uninitialised Problem was returned")

        try:
            content = config.negotiator.marshaller(APPLICATION_JSON)(body)
        except Exception as exc:
            report(config.log_error, InternalError(
                error=exc,
                message="error marshalling Problem response",
                help=f"Problem: {self!r}",
                request=rq.request,
                content_type=PROBLEM_CONTENT_TYPE,
            ))
            return internal_server_error(cause=exc, request=rq.request).make_response(
                rq, config,
            )

        return Response(
            status_code=self.status or http_status.HTTP_500_INTERNAL_SERVER_ERROR,
            content_type=PROBLEM_CONTENT_TYPE,
            content=content,
        )


def new_problem(
    status: int = 0,
    *properties: Mapping[str, Any],
    type: str | None = None,
    detail: str | None = None,
    cause: BaseException | None = None,
) -> Problem:
    """Build a Problem from named options.

    Explicit status and detail take precedence over those derived from cause.
    Property maps are merged in order; later maps override earlier keys.
    Status defaults to 500 and detail to the status text.
    """
    p = Problem()
    p.status = status
    p.type = type
    p.detail = detail or ""

    if cause is not None:
        p.status = p.status or http_status.HTTP_500_INTERNAL_SERVER_ERROR
        p.detail = p.detail or str(cause)

    for props in properties:
        for key, value in props.items():
            p.with_property(key, value)

    p.status = p.status or http_status.HTTP_500_INTERNAL_SERVER_ERROR
    p.detail = p.detail or status_text(p.status)
    return p
