"""Widget Resource: demo CRUD routes exercising Result, Error, Problem and body decoding.

Invariants:
    - Store is in-memory and per-router (one per composition root)
    - Unknown id -> 404 Error; non-integer id -> 400 Error
    - Duplicate name on create -> 409 Problem (application/problem+json)
    - Create decodes strictly: empty body or unknown fields -> 400
"""

from typing import ClassVar

from fastapi import APIRouter
from pydantic import BaseModel
from starlette import status
from starlette.requests import Request

from endware.api.handler import handler
from endware.api.request_body import strict_request
from endware.core.context import EndwareConfig
from endware.core.error import bad_request, not_found
from endware.core.problem import new_problem
from endware.core.result import created, ok

PREFIX = "/api/v1/widgets"

CONFLICT_TYPE = "https://endware.dev/problems/duplicate-widget"


class Widget(BaseModel):
    xml_tag: ClassVar[str] = "widget"

    id: int
    name: str


class WidgetIn(BaseModel):
    name: str


class WidgetStore:
    def __init__(self):
        self._widgets: dict[int, Widget] = {}

    def all(self) -> list[Widget]:
        return list(self._widgets.values())

    def get(self, widget_id: int) -> Widget | None:
        return self._widgets.get(widget_id)

    def find_by_name(self, name: str) -> Widget | None:
        return next((w for w in self._widgets.values() if w.name == name), None)

    def add(self, name: str) -> Widget:
        widget = Widget(id=len(self._widgets) + 1, name=name)
        self._widgets[widget.id] = widget
        return widget


class WidgetRoutes:
    """Endpoint functions bound to one WidgetStore."""

    def __init__(self, store: WidgetStore):
        self._store = store

    def list_widgets(self, _request: Request):
        return ok().with_value(self._store.all())

    def get_widget(self, request: Request):
        raw_id = request.path_params["widget_id"]
        try:
            widget_id = int(raw_id)
        except ValueError:
            return bad_request(f"widget id must be an integer, got '{raw_id}'")
        widget = self._store.get(widget_id)
        if widget is None:
            return not_found("no widget exists with that id").with_property("id", widget_id)
        return widget

    async def create_widget(self, request: Request):
        return await strict_request(request, WidgetIn, self._create)

    def _create(self, body: WidgetIn):
        if self._store.find_by_name(body.name) is not None:
            return new_problem(
                status.HTTP_409_CONFLICT,
                {"name": body.name},
                detail="a widget with that name already exists",
            ).with_type(CONFLICT_TYPE, "Duplicate", "widget")
        widget = self._store.add(body.name)
        return (
            created()
            .with_value(widget)
            .with_header("location", f"{PREFIX}/{widget.id}")
        )


def build_router(config: EndwareConfig, store: WidgetStore | None = None) -> APIRouter:
    routes = WidgetRoutes(store or WidgetStore())
    router = APIRouter(tags=["widgets"])
    router.add_route(PREFIX, handler(routes.list_widgets, config), methods=["GET"])
    router.add_route(PREFIX, handler(routes.create_widget, config), methods=["POST"])
    router.add_route(
        f"{PREFIX}/{{widget_id}}", handler(routes.get_widget, config), methods=["GET"],
    )
    return router
