"""Negotiated Request: an inbound request paired with its response content type.

Invariants:
    - accept is always a registered content type (never "", "*/*" or unknown)
    - marshal is the marshaller registered for accept
"""

from dataclasses import dataclass

from starlette.requests import Request

from endware.core.negotiation import ContentNegotiator, MarshalFunc


@dataclass(frozen=True)
class NegotiatedRequest:
    request: Request
    accept: str
    marshal: MarshalFunc

    @classmethod
    def negotiate(
        cls, request: Request, negotiator: ContentNegotiator,
    ) -> "NegotiatedRequest":
        """Raises InvalidAcceptHeaderError if the Accept header is unsupported."""
        accept, marshal = negotiator.negotiate(request.headers.get("accept"))
        return cls(request=request, accept=accept, marshal=marshal)
