"""Error Projection: convert a resolved Error into a marshallable response body.

Invariants:
    - ErrorInfo is a frozen snapshot; projections cannot mutate the Error
    - Default projection omits empty optional fields (message, query, help, additional)
    - "additional" keys are sorted so JSON and XML encodings are byte-stable
    - message = "<cause>: <message>" when both are present, else whichever is

Design Decisions:
    - ErrorResponse is a pydantic model: one declaration serves JSON (field order
      preserved) and XML (root tag "error") (ADR: pydantic is the project-wide
      model layer)
    - The projection function is injected through EndwareConfig, replaceable wholesale
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any, ClassVar

from pydantic import BaseModel, model_serializer
from starlette.requests import Request

from endware.core.response import status_text


@dataclass(frozen=True)
class ErrorInfo:
    """Resolved state of an Error at the moment its response is built."""
    status_code: int
    timestamp: datetime
    error: BaseException | None = None
    message: str = ""
    help: str = ""
    request: Request | None = None
    properties: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))


ErrorProjector = Callable[[ErrorInfo], Any]


class ErrorResponse(BaseModel):
    """Default error body; XML root element is <error>."""

    xml_tag: ClassVar[str] = "error"

    status: int
    error: str
    message: str | None = None
    path: str
    query: str | None = None
    timestamp: datetime
    help: str | None = None
    additional: dict[str, Any] | None = None

    @model_serializer(mode="wrap")
    def omit_empty(self, handler):
        return {k: v for k, v in handler(self).items() if v is not None}


def describe_error(error: BaseException) -> str:
    """String form of an error; a group renders as its members, one per line."""
    if isinstance(error, BaseExceptionGroup):
        return "\n".join(describe_error(e) for e in error.exceptions)
    return str(error)


def project_error(info: ErrorInfo) -> ErrorResponse:
    """Default projection of an ErrorInfo."""
    message = info.message
    if info.error is not None:
        cause = describe_error(info.error)
        message = f"{cause}: {message}" if message else cause

    path, query = "", ""
    if info.request is not None:
        path, query = info.request.url.path, info.request.url.query

    additional = None
    if info.properties:
        additional = {k: info.properties[k] for k in sorted(info.properties)}

    return ErrorResponse(
        status=info.status_code,
        error=status_text(info.status_code),
        message=message or None,
        path=path,
        query=query or None,
        timestamp=info.timestamp,
        help=info.help or None,
        additional=additional,
    )
