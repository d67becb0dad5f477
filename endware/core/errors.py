"""Error Hierarchy: typed, categorized exceptions for endware's own failure modes.

Invariants:
    - Every error has a code (str) and a category (ErrorCategory)
    - Programmer errors also derive from the matching builtin (ValueError, RuntimeError)
      so callers can catch them without importing endware
    - None of these are response models; endpoint code returns endware.core.error.Error

Design Decisions:
    - Single hierarchy with EndwareError base: the handler barrier can tell library
      conditions apart from endpoint faults by code (ADR: uniform error shape)
    - Messages mirror the wrapped condition so str(error) reads well inside the
      projected "message" of a 500 response
"""

from enum import Enum


class ErrorCategory(str, Enum):
    """High-level error categories for routing and observability."""
    PROGRAMMING = "programming"
    NEGOTIATION = "negotiation"
    MARSHALLING = "marshalling"
    REQUEST = "request"
    INTERNAL = "internal"


class EndwareError(Exception):
    """Base exception for all endware errors."""

    def __init__(self, message: str, code: str, category: ErrorCategory):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category

    def __str__(self) -> str:
        return self.message


# ─── Programmer Errors ──────────────────────────────────────────

class InvalidStatusCodeError(EndwareError, ValueError):
    """A status code outside the range permitted for the model."""
    def __init__(self, status_code: int, valid_range: str):
        super().__init__(
            f"invalid statuscode: {status_code}: valid range is {valid_range}",
            "INVALID_STATUS_CODE", ErrorCategory.PROGRAMMING,
        )
        self.status_code = status_code


class InvalidArgumentError(EndwareError, ValueError):
    """An argument the builder cannot accept (e.g. a reserved Problem key)."""
    def __init__(self, message: str):
        super().__init__(
            f"invalid argument: {message}",
            "INVALID_ARGUMENT", ErrorCategory.PROGRAMMING,
        )


class InvalidOperationError(EndwareError, RuntimeError):
    """An operation requested on a model that is not ready for it."""
    def __init__(self, message: str):
        super().__init__(
            f"invalid operation: {message}",
            "INVALID_OPERATION", ErrorCategory.PROGRAMMING,
        )


# ─── Negotiation & Marshalling ──────────────────────────────────

class InvalidAcceptHeaderError(EndwareError):
    """No marshaller is registered for the requested content type."""
    def __init__(self, accept: str):
        super().__init__(
            f"no formatter for content type: {accept}",
            "INVALID_ACCEPT_HEADER", ErrorCategory.NEGOTIATION,
        )
        self.accept = accept


class MarshalError(EndwareError, TypeError):
    """A value could not be marshalled to the negotiated content type."""
    def __init__(self, message: str):
        super().__init__(message, "MARSHAL_ERROR", ErrorCategory.MARSHALLING)


class MarshalResultError(EndwareError):
    """Marshalling a Result value failed; wraps the marshaller's exception."""
    def __init__(self, reason: BaseException):
        super().__init__(
            f"error marshalling response: {reason}",
            "MARSHAL_RESULT_FAILED", ErrorCategory.MARSHALLING,
        )
        self.__cause__ = reason


# ─── Request Errors ─────────────────────────────────────────────

class BodyRequiredError(EndwareError):
    """A request body was required but the request had none."""
    def __init__(self):
        super().__init__("a body is required", "BODY_REQUIRED", ErrorCategory.REQUEST)


class UnexpectedFieldError(EndwareError):
    """A strictly-decoded body contained fields the model does not declare."""
    def __init__(self, fields: list[str]):
        super().__init__(
            f"unexpected field: {', '.join(fields)}",
            "UNEXPECTED_FIELD", ErrorCategory.REQUEST,
        )
        self.fields = fields


class ErrorReadingRequestBodyError(EndwareError):
    """The request body stream could not be read."""
    def __init__(self, reason: BaseException):
        super().__init__(
            f"error reading request body: {reason}",
            "ERROR_READING_REQUEST_BODY", ErrorCategory.REQUEST,
        )
        self.__cause__ = reason


class RequestDecodeError(EndwareError):
    """The request body was not valid for the declared model."""
    def __init__(self, reason: BaseException):
        super().__init__(
            f"decode request body: {reason}",
            "REQUEST_DECODE_FAILED", ErrorCategory.REQUEST,
        )
        self.__cause__ = reason


# ─── Internal Errors ────────────────────────────────────────────

class EndpointFaultError(EndwareError):
    """An endpoint (or the dispatch of its result) raised an unexpected exception."""
    def __init__(self, fault: BaseException):
        super().__init__(
            f"endpoint fault: {fault}",
            "ENDPOINT_FAULT", ErrorCategory.INTERNAL,
        )
        self.__cause__ = fault
