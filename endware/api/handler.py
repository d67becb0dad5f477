"""Endpoint Handler: ASGI entry point wrapping an endpoint function.

Invariants:
    - Unsupported Accept -> fixed 406 and the endpoint is never called
    - A raised endware Error is treated exactly like a returned one
    - Any other exception from the endpoint, or from dispatching its result, is
      reported once to the diagnostic hook and becomes a 500 Error; nothing is
      re-raised past this boundary
    - Write failures are reported diagnostically only
    - Every hook call goes through report(), so a raising diagnostic hook is
      contained too

Design Decisions:
    - Single fault barrier at the request boundary (ADR: one place converts
      unexpected faults to EndpointFaultError)
    - Sync endpoints run in the threadpool, async endpoints are awaited; the active
      config travels with the context either way
    - An ASGI app rather than a FastAPI route function: the handler owns the write
      order (headers, status, body) instead of delegating it to a Response class
"""

import inspect
from collections.abc import Callable
from typing import Any

from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.types import Receive, Scope, Send

from endware.api.transport import write_response
from endware.core.context import DEFAULT_CONFIG, EndwareConfig, activate
from endware.core.diagnostics import InternalError, report
from endware.core.dispatch import make_response
from endware.core.error import Error, internal_server_error
from endware.core.errors import EndpointFaultError, InvalidAcceptHeaderError
from endware.core.negotiation import APPLICATION_JSON
from endware.core.request import NegotiatedRequest
from endware.core.response import Response

Endpoint = Callable[[Request], Any]

# kept byte-for-byte for client compatibility
NOT_ACCEPTABLE_BODY = (
    b'["application/json","application/xml","text/json","test/xml","*/*",none]'
)


def not_acceptable_response() -> Response:
    return Response(
        status_code=406, content_type=APPLICATION_JSON, content=NOT_ACCEPTABLE_BODY,
    )


class EndpointHandler:
    """Wraps an endpoint as an ASGI app. Mount with Router.add_route()."""

    def __init__(self, endpoint: Endpoint, config: EndwareConfig | None = None):
        self._endpoint = endpoint
        self._config = config or DEFAULT_CONFIG

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        request = Request(scope, receive)
        config = self._config

        try:
            rq = NegotiatedRequest.negotiate(request, config.negotiator)
        except InvalidAcceptHeaderError as exc:
            report(config.log_error, InternalError(
                error=exc, message="error initialising request", request=request,
            ))
            await write_response(
                not_acceptable_response(), send, request, config.log_error,
                failure_message="error writing request error response",
            )
            return

        with activate(config):
            response = await self._respond(request, rq, config)
        await write_response(response, send, request, config.log_error)

    async def _respond(
        self, request: Request, rq: NegotiatedRequest, config: EndwareConfig,
    ) -> Response:
        try:
            try:
                result = await self._invoke(request)
            except Error as declared:
                result = declared
            return make_response(result, rq, config)
        except Exception as exc:
            report(config.log_error, InternalError(
                error=exc,
                message="endpoint fault",
                request=request,
                content_type=rq.accept,
            ))
            return internal_server_error(
                cause=EndpointFaultError(exc), request=request,
            ).make_response(rq, config)

    async def _invoke(self, request: Request) -> Any:
        if inspect.iscoroutinefunction(self._endpoint):
            return await self._endpoint(request)
        result = await run_in_threadpool(self._endpoint, request)
        if inspect.isawaitable(result):
            result = await result
        return result


def handler(endpoint: Endpoint, config: EndwareConfig | None = None) -> EndpointHandler:
    return EndpointHandler(endpoint, config)
