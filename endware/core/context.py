"""Configuration Object: the process-wide extension points, injected explicitly.

Invariants:
    - EndwareConfig is frozen; built once at the composition root
    - Defaults: UTC wall clock, no-op diagnostic hook, default error projection,
      the fixed four-type negotiator
    - activate() scopes a config to the current request context; builders created
      by endpoint code (e.g. Error timestamps) read the active clock through it

Design Decisions:
    - ContextVar over module globals: concurrent requests never observe each
      other's configuration, and threadpool workers inherit the caller's context
"""

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import datetime, timezone

from endware.core import projection
from endware.core.diagnostics import ErrorLogger, ignore_internal_error
from endware.core.negotiation import ContentNegotiator

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class EndwareConfig:
    clock: Clock = utc_now
    log_error: ErrorLogger = ignore_internal_error
    project_error: projection.ErrorProjector = projection.project_error
    negotiator: ContentNegotiator = field(default_factory=ContentNegotiator)


DEFAULT_CONFIG = EndwareConfig()

_active_config: ContextVar[EndwareConfig] = ContextVar(
    "endware_config", default=DEFAULT_CONFIG,
)


def current_config() -> EndwareConfig:
    """The config active for the current request, or the defaults."""
    return _active_config.get()


@contextmanager
def activate(config: EndwareConfig) -> Iterator[EndwareConfig]:
    token = _active_config.set(config)
    try:
        yield config
    finally:
        _active_config.reset(token)
