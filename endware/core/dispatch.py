"""Response Dispatch: route an endpoint's returned value to exactly one response model.

Invariants:
    - classify() is total; priority: Error, Problem, Result, exception, bytes,
      int (not bool), anything else
    - make_response() matches the closed Outcome variant exhaustively
    - Every branch funnels through Result.make_response or Error.make_response;
      no response-writing logic is duplicated per branch
    - RawBytes: non-empty -> 200 application/octet-stream; empty -> 204, no body

Design Decisions:
    - Closed variant {Error, Problem, Result, RawBytes, StatusOnly, Value}: endpoints
      may construct the variant explicitly, or return plain values that classify()
      wraps (ADR: explicit routing, every case visible in one place)
"""

from dataclasses import dataclass
from typing import Any, assert_never

from endware.core.context import EndwareConfig
from endware.core.error import Error, internal_server_error
from endware.core.problem import Problem
from endware.core.request import NegotiatedRequest
from endware.core.response import Response
from endware.core.result import Result, no_content, ok, status

OCTET_STREAM = "application/octet-stream"


@dataclass(frozen=True)
class RawBytes:
    content: bytes


@dataclass(frozen=True)
class StatusOnly:
    status_code: int


@dataclass(frozen=True)
class Value:
    value: Any


Outcome = Error | Problem | Result | RawBytes | StatusOnly | Value


def classify(value: Any) -> Outcome:
    """Wrap an arbitrary returned value in the Outcome variant."""
    if isinstance(value, (Error, Problem, Result, RawBytes, StatusOnly, Value)):
        return value
    if isinstance(value, BaseException):
        return internal_server_error(cause=value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return RawBytes(bytes(value))
    if isinstance(value, int) and not isinstance(value, bool):
        return StatusOnly(value)
    return Value(value)


def make_response(value: Any, rq: NegotiatedRequest, config: EndwareConfig) -> Response:
    outcome = classify(value)

    if isinstance(outcome, (Error, Problem, Result)):
        return outcome.make_response(rq, config)
    if isinstance(outcome, RawBytes):
        if not outcome.content:
            return no_content().make_response(rq, config)
        return ok().with_content(OCTET_STREAM, outcome.content).make_response(rq, config)
    if isinstance(outcome, StatusOnly):
        return status(outcome.status_code).make_response(rq, config)
    if isinstance(outcome, Value):
        return ok().with_value(outcome.value).make_response(rq, config)
    assert_never(outcome)
