"""Root conftest: shared fixtures for building requests, configs and ASGI calls.

Invariants:
    - Every test that needs a config gets a fixed clock and a recording
      diagnostic hook (never the process default)
    - Requests are built from raw ASGI scopes; no server is started
"""

import os
from datetime import datetime, timezone

import pytest
from starlette.requests import Request

from endware.core.context import EndwareConfig
from endware.core.negotiation import ContentNegotiator
from endware.core.request import NegotiatedRequest

# Keep the reference app quiet and deterministic under test
os.environ.setdefault("ENDWARE_LOG_FORMAT", "text")

FIXED_TS = datetime(2012, 11, 10, 9, 8, 7, tzinfo=timezone.utc)


def build_scope(
    path: str = "/api/v1/test",
    query: str = "param=value",
    accept: str | None = None,
    method: str = "GET",
) -> dict:
    headers = []
    if accept is not None:
        headers.append((b"accept", accept.encode("latin-1")))
    return {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": method,
        "scheme": "http",
        "server": ("test", 80),
        "root_path": "",
        "path": path,
        "raw_path": path.encode(),
        "query_string": query.encode(),
        "headers": headers,
    }


def body_receiver(body: bytes = b""):
    """ASGI receive callable delivering body in a single message."""
    sent = False

    async def receive():
        nonlocal sent
        if sent:
            return {"type": "http.disconnect"}
        sent = True
        return {"type": "http.request", "body": body, "more_body": False}

    return receive


@pytest.fixture
def fixed_ts() -> datetime:
    return FIXED_TS


@pytest.fixture
def diagnostics() -> list:
    """InternalError snapshots reported through the config hook."""
    return []


@pytest.fixture
def config(diagnostics) -> EndwareConfig:
    return EndwareConfig(clock=lambda: FIXED_TS, log_error=diagnostics.append)


@pytest.fixture
def make_request():
    def _make(accept: str | None = None, **kwargs) -> Request:
        return Request(build_scope(accept=accept, **kwargs))
    return _make


@pytest.fixture
def negotiate(make_request):
    """Factory: NegotiatedRequest for an Accept value."""
    def _negotiate(accept: str | None = None, **kwargs) -> NegotiatedRequest:
        return NegotiatedRequest.negotiate(
            make_request(accept, **kwargs), ContentNegotiator(),
        )
    return _negotiate


@pytest.fixture
def asgi_call():
    """Call an ASGI app directly; returns the list of sent messages."""
    async def _call(app, accept: str | None = None, body: bytes = b"", **kwargs):
        messages = []

        async def send(message):
            messages.append(message)

        await app(build_scope(accept=accept, **kwargs), body_receiver(body), send)
        return messages
    return _call
