"""Structured Logging: JSON formatter, setup, and the logging diagnostic hook.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (path, status_code, content_type, error_code) surfaced when present
    - log_internal_error never raises; it is safe to install as EndwareConfig.log_error

Design Decisions:
    - JSONFormatter over third-party libs: zero dependencies, full control
    - setup_logging called once on startup via lifespan
"""

import json
import logging
from datetime import datetime, timezone

from endware.core.diagnostics import InternalError
from endware.core.errors import EndwareError

EXTRA_FIELDS = ("path", "status_code", "content_type", "error_code")

diagnostics_logger = logging.getLogger("endware.diagnostics")


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def setup_logging(level: str = "INFO", fmt: str = "json"):
    """Configure logging for the application."""
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))


def log_internal_error(err: InternalError) -> None:
    """Diagnostic hook that writes InternalError snapshots to the logging tree."""
    extra = {"content_type": err.content_type or None}
    if err.request is not None:
        extra["path"] = err.request.url.path
    if isinstance(err.error, EndwareError):
        extra["error_code"] = err.error.code

    message = err.message or "internal error"
    if err.error is not None:
        message = f"{message}: {err.error}"
    if err.help:
        message = f"{message} ({err.help})"
    diagnostics_logger.error(message, extra=extra, exc_info=err.error)
