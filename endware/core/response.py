"""Response: the final wire-level {status, content type, body, headers}.

Invariants:
    - Immutable once built by a Result, Error or Problem
    - header_items() yields Content-Type first, then the additional headers with
      values rendered by str(); a caller-set Content-Type replaces the negotiated one
    - An empty content type is not emitted

Design Decisions:
    - Pure value object; writing to a transport lives in endware.api.transport
      (ADR: functional core, imperative shell)
"""

from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any

from endware.core.headers import Headers

CONTENT_TYPE = "Content-Type"


def status_text(status_code: int) -> str:
    """Reason phrase for a status code, or "" when the code is unknown."""
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return ""


@dataclass(frozen=True)
class Response:
    status_code: int
    content_type: str = ""
    content: bytes = b""
    headers: dict[str, Any] = field(default_factory=Headers)

    def header_items(self) -> list[tuple[str, str]]:
        items: dict[str, str] = {}
        if self.content_type:
            items[CONTENT_TYPE] = self.content_type
        for key, value in self.headers.items():
            items[key] = str(value)
        return list(items.items())
