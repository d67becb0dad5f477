"""ASGI Transport: write a Response through the ASGI send channel.

Invariants:
    - Order is load-bearing: Content-Type, then additional headers, then the status
      is committed (http.response.start), then the body (http.response.body)
    - Content-Length is added for statuses that carry a body, unless set by the caller
    - Headers are encoded before anything is sent: a header that cannot be
      encoded is reported and the response is replaced by a 500 plain/text body
    - A failed send is reported to the diagnostic hook only; a committed status
      cannot be revised, so nothing is raised to the caller
"""

from starlette import status
from starlette.requests import Request
from starlette.types import Send

from endware.core.diagnostics import ErrorLogger, InternalError, report
from endware.core.error import FALLBACK_CONTENT_TYPE
from endware.core.response import Response, status_text


def _carries_body(status_code: int) -> bool:
    return status_code >= 200 and status_code not in (204, 304)


def encode_headers(response: Response) -> list[tuple[bytes, bytes]]:
    """Raises if a header key or value cannot be rendered as latin-1."""
    items = response.header_items()
    if _carries_body(response.status_code) and not any(
        k.lower() == "content-length" for k, _ in items
    ):
        items.append(("Content-Length", str(len(response.content))))
    return [(k.encode("latin-1"), v.encode("latin-1")) for k, v in items]


def header_failure_response(error: BaseException, response: Response) -> Response:
    """Replacement for a response whose headers could not be encoded."""
    code = response.status_code
    body = "\n".join([
        "An error occurred encoding response headers",
        "",
        "The encoding error was:",
        "   " + str(error),
        "",
        "The original response was:",
        f"   {code} {status_text(code)}",
    ])
    return Response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content_type=FALLBACK_CONTENT_TYPE,
        content=body.encode(),
    )


async def write_response(
    response: Response,
    send: Send,
    request: Request | None,
    log_error: ErrorLogger,
    failure_message: str = "error writing response",
) -> None:
    try:
        headers = encode_headers(response)
    except Exception as exc:
        report(log_error, InternalError(
            error=exc,
            message="error encoding response headers",
            help=f"(response: {response.status_code} {status_text(response.status_code)})",
            request=request,
            content_type=response.content_type,
        ))
        response = header_failure_response(exc, response)
        headers = encode_headers(response)

    code = response.status_code
    try:
        await send({"type": "http.response.start", "status": code, "headers": headers})
        await send({"type": "http.response.body", "body": response.content})
    except Exception as exc:
        report(log_error, InternalError(
            error=exc,
            message=failure_message,
            help=f"(response: {code} {status_text(code)}): send() error: {exc}",
            request=request,
            content_type=response.content_type,
        ))
