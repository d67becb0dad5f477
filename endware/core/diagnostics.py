"""Diagnostics: the snapshot handed to the diagnostic hook.

Invariants:
    - InternalError is frozen; hooks receive it and cannot alter it
    - Hooks are always invoked through report(): an exception raised by the hook
      itself is logged and swallowed, never propagated to the request path
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from starlette.requests import Request

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InternalError:
    """An error in endware itself, or one contained on behalf of an endpoint."""
    error: BaseException | None = None
    message: str = ""
    help: str = ""
    request: Request | None = None
    content_type: str = ""


ErrorLogger = Callable[[InternalError], None]


def ignore_internal_error(_: InternalError) -> None:
    """Default diagnostic hook: no-op."""


def report(log_error: ErrorLogger, err: InternalError) -> None:
    """Hand err to the diagnostic hook, containing any failure of the hook."""
    try:
        log_error(err)
    except Exception:
        logger.exception(f"diagnostic hook failed while reporting '{err.message}'")
