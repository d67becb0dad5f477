"""Content Negotiation: resolve an Accept value to a (content type, marshaller) pair.

Invariants:
    - "" and "*/*" resolve to application/json
    - Any other value must exactly match a registered content type, else
      InvalidAcceptHeaderError
    - Marshallers take any value and return bytes, or raise

Design Decisions:
    - Fixed registry of four content types; no q-weights, wildcards or parameters
      (ADR: exact match keeps negotiation total and predictable)
    - JSON via pydantic_core.to_json: pydantic models, dataclasses and datetimes
      serialize without custom encoders (ADR: pydantic is the project-wide model layer)
    - XML via xml.etree.ElementTree: values are first reduced with
      to_jsonable_python so models and dataclasses share one element builder
    - Mapping keys become element names and must be valid XML names, else
      MarshalError; a malformed document is never emitted
"""

import re
import xml.etree.ElementTree as ET
from collections.abc import Callable, Mapping
from typing import Any

from pydantic_core import to_json, to_jsonable_python

from endware.core.errors import InvalidAcceptHeaderError, MarshalError

MarshalFunc = Callable[[Any], bytes]

APPLICATION_JSON = "application/json"
APPLICATION_XML = "application/xml"
TEXT_JSON = "text/json"
TEXT_XML = "text/xml"

DEFAULT_CONTENT_TYPE = APPLICATION_JSON

# letter or underscore, then letters, digits, "_", "-" or "."; no namespace prefix
_XML_NAME = re.compile(r"[^\W\d][\w.-]*")


# ─── JSON ────────────────────────────────────────────────────────

def marshal_json(value: Any) -> bytes:
    return to_json(value)


def marshal_json_indented(value: Any) -> bytes:
    return to_json(value, indent=2)


# ─── XML ─────────────────────────────────────────────────────────

def _xml_root_tag(value: Any) -> str:
    """Root element name: the class's xml_tag attribute, else the class name."""
    return getattr(type(value), "xml_tag", None) or type(value).__name__


def _append_xml(parent: ET.Element, tag: str, value: Any) -> None:
    if value is None:
        return
    if isinstance(value, (list, tuple)):
        for item in value:
            _append_xml(parent, tag, item)
        return
    parent.append(_xml_element(tag, value))


def _xml_element(tag: str, value: Any) -> ET.Element:
    if not _XML_NAME.fullmatch(tag):
        raise MarshalError(f"xml: invalid element name: {tag!r}")
    element = ET.Element(tag)
    if isinstance(value, Mapping):
        for key, item in value.items():
            _append_xml(element, str(key), item)
    elif isinstance(value, bool):
        element.text = "true" if value else "false"
    elif value is not None:
        element.text = str(value)
    return element


def _xml_elements(value: Any) -> list[ET.Element]:
    if isinstance(value, Mapping):
        # a bare mapping has no name for its root element
        raise MarshalError(f"xml: unsupported type: {type(value).__name__}")
    if isinstance(value, (list, tuple)):
        return [element for item in value for element in _xml_elements(item)]
    return [_xml_element(_xml_root_tag(value), to_jsonable_python(value))]


def marshal_xml(value: Any) -> bytes:
    elements = _xml_elements(value)
    return "".join(ET.tostring(e, encoding="unicode") for e in elements).encode()


def marshal_xml_indented(value: Any) -> bytes:
    elements = _xml_elements(value)
    for element in elements:
        ET.indent(element, space="    ")
    return "\n".join(ET.tostring(e, encoding="unicode") for e in elements).encode()


# ─── Registry ────────────────────────────────────────────────────

DEFAULT_MARSHALLERS: Mapping[str, MarshalFunc] = {
    APPLICATION_JSON: marshal_json,
    APPLICATION_XML: marshal_xml,
    TEXT_JSON: marshal_json_indented,
    TEXT_XML: marshal_xml_indented,
}


class ContentNegotiator:
    """Maps Accept values to marshallers. Explicit registry, no auto-discovery."""

    def __init__(self, marshallers: Mapping[str, MarshalFunc] | None = None):
        self._marshallers = dict(
            DEFAULT_MARSHALLERS if marshallers is None else marshallers,
        )

    @property
    def content_types(self) -> list[str]:
        return list(self._marshallers)

    def negotiate(self, accept: str | None) -> tuple[str, MarshalFunc]:
        """Resolve an Accept header value to (content type, marshaller)."""
        content_type = accept or ""
        if content_type in ("", "*/*"):
            content_type = DEFAULT_CONTENT_TYPE
        marshal = self._marshallers.get(content_type)
        if marshal is None:
            raise InvalidAcceptHeaderError(content_type)
        return content_type, marshal

    def marshaller(self, content_type: str) -> MarshalFunc:
        """Marshaller for a specific content type (bypassing Accept)."""
        return self.negotiate(content_type)[1]
