"""Health Probe: liveness endpoint served through an endware handler.

Invariants:
    - GET /api/v1/health/ always returns 200 if the process is up
    - Body is negotiated like any other Result (JSON by default, XML on request)
"""

from typing import ClassVar

from fastapi import APIRouter
from pydantic import BaseModel
from starlette.requests import Request

from endware import __version__
from endware.api.handler import handler
from endware.core.context import EndwareConfig
from endware.core.result import Result, ok

PREFIX = "/api/v1/health"


class HealthStatus(BaseModel):
    xml_tag: ClassVar[str] = "health"

    status: str
    service: str
    version: str


def health_check(_request: Request) -> Result:
    """Basic liveness probe."""
    return ok().with_value(
        HealthStatus(status="healthy", service="endware", version=__version__),
    )


def build_router(config: EndwareConfig) -> APIRouter:
    # add_route() does not apply APIRouter.prefix, so paths are spelled out
    router = APIRouter(tags=["health"])
    router.add_route(f"{PREFIX}/", handler(health_check, config), methods=["GET"])
    return router
