"""Request Body Decoding: read a JSON body into a pydantic model and hand it on.

Invariants:
    - The body is read once and cached on the Request; endpoint code can re-read it
    - Lenient (handle_request): empty body -> fn(None); unknown fields ignored
    - Strict (strict_request): empty body -> 400 BodyRequiredError; unknown
      fields, at any depth of nested models, -> 400 UnexpectedFieldError naming
      each by its dotted path
    - Undecodable or invalid bodies -> 400 RequestDecodeError; fn is not called
    - A failure reading the stream is returned as ErrorReadingRequestBodyError,
      which dispatches as a 500

Design Decisions:
    - Returns (never raises) its failures so the caller can return the result
      straight from the endpoint
    - pydantic model_validate over hand-written checks (ADR: pydantic is the
      project-wide model layer)
"""

import inspect
from collections.abc import Callable
from typing import Any, TypeVar, get_args, get_origin

from pydantic import BaseModel, ValidationError
from pydantic_core import from_json
from starlette.requests import Request

from endware.core.error import bad_request
from endware.core.errors import (
    BodyRequiredError,
    ErrorReadingRequestBodyError,
    RequestDecodeError,
    UnexpectedFieldError,
)

M = TypeVar("M", bound=BaseModel)


def _is_model(annotation: Any) -> bool:
    return (
        get_origin(annotation) is None
        and isinstance(annotation, type)
        and issubclass(annotation, BaseModel)
    )


def _unexpected_in(annotation: Any, value: Any, path: str) -> list[str] | None:
    """Unknown field paths within value, or None if annotation holds no model for it."""
    if _is_model(annotation):
        if isinstance(value, dict):
            return _unexpected_fields(annotation, value, path)
        return None

    origin, args = get_origin(annotation), get_args(annotation)
    if origin is None:
        return None
    if origin in (list, tuple, set, frozenset) and isinstance(value, list) and args:
        found = []
        for i, item in enumerate(value):
            found.extend(_unexpected_in(args[0], item, f"{path}{i}.") or [])
        return found
    if origin is dict and isinstance(value, dict) and len(args) == 2:
        found = []
        for key, item in value.items():
            found.extend(_unexpected_in(args[1], item, f"{path}{key}.") or [])
        return found

    # Union / Optional: clean if any member model accepts the value
    candidates = [
        r for r in (_unexpected_in(arg, value, path) for arg in args) if r is not None
    ]
    if not candidates:
        return None
    return min(candidates, key=len)


def _unexpected_fields(
    model: type[BaseModel], data: dict[str, Any], path: str = "",
) -> list[str]:
    """Dotted paths of fields in data (and nested models) the model does not declare."""
    if model.model_config.get("extra") == "allow":
        return []
    fields = {}
    for name, info in model.model_fields.items():
        fields[name] = info
        if info.alias:
            fields[info.alias] = info

    found = []
    for key, value in data.items():
        info = fields.get(key)
        if info is None:
            found.append(f"{path}{key}")
        else:
            found.extend(_unexpected_in(info.annotation, value, f"{path}{key}.") or [])
    return found


async def _call(fn: Callable[[Any], Any], value: Any) -> Any:
    result = fn(value)
    if inspect.isawaitable(result):
        result = await result
    return result


async def _decode(
    request: Request, model: type[M], fn: Callable[[M | None], Any], strict: bool,
) -> Any:
    try:
        body = await request.body()
    except Exception as exc:
        return ErrorReadingRequestBodyError(exc)

    if not body:
        if strict:
            return bad_request(cause=BodyRequiredError())
        return await _call(fn, None)

    try:
        data = from_json(body)
    except ValueError as exc:
        return bad_request(cause=RequestDecodeError(exc))

    if strict and isinstance(data, dict):
        unexpected = sorted(_unexpected_fields(model, data))
        if unexpected:
            return bad_request(cause=UnexpectedFieldError(unexpected))

    try:
        value = model.model_validate(data)
    except ValidationError as exc:
        return bad_request(cause=RequestDecodeError(exc))

    return await _call(fn, value)


async def handle_request(
    request: Request, model: type[M], fn: Callable[[M | None], Any],
) -> Any:
    """Decode the body leniently and return whatever fn returns."""
    return await _decode(request, model, fn, strict=False)


async def strict_request(
    request: Request, model: type[M], fn: Callable[[M], Any],
) -> Any:
    """Decode the body strictly and return whatever fn returns."""
    return await _decode(request, model, fn, strict=True)
