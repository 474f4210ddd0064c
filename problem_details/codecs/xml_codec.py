"""XML encoding and decoding of problem details (`application/problem+xml`).

XML has no notion of merging one object into another, so both directions
go through the flat member mapping from `problem_details.codecs.fields`:
members become direct children of a single ``<problem>`` root, lists are
written as repeated ``<i>`` children and mappings as nested elements, as in
RFC 7807 appendix A. Text carries no types; only ``status`` is converted
back to an integer on decode, extension payloads are expected to coerce.
``None`` is written as ``xsi:nil="true"`` and an empty list as
``items="0"``, so neither reads back as an empty string.
"""

from __future__ import annotations

from collections.abc import Mapping
import math
import re
from typing import Any
from xml.etree import ElementTree

from problem_details.codecs.errors import DecodeError
from problem_details.codecs.errors import EncodeError
from problem_details.codecs.fields import flatten
from problem_details.codecs.fields import split
from problem_details.schemas.extensions import ExtT
from problem_details.schemas.extensions import NoExtensions
from problem_details.schemas.problem import ProblemDetails

XML_MEDIA_TYPE = "application/problem+xml"
XML_NAMESPACE = "urn:ietf:rfc:7807"
ROOT_TAG = "problem"
LIST_ITEM_TAG = "i"
XML_DECLARATION = b'<?xml version="1.0" encoding="UTF-8"?>'
XSI_NAMESPACE = "http://www.w3.org/2001/XMLSchema-instance"
NIL_ATTRIBUTE = "{" + XSI_NAMESPACE + "}nil"
ITEMS_ATTRIBUTE = "items"

_XML_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_.\-]*$")
_INVALID_XML_CHARS = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ufffe\uffff]")

ElementTree.register_namespace("xsi", XSI_NAMESPACE)


def encode_xml(problem: ProblemDetails[Any]) -> bytes:
    """Write a problem as an XML document with one child element per member."""
    root = ElementTree.Element(ROOT_TAG, {"xmlns": XML_NAMESPACE})
    for name, value in flatten(problem).items():
        _append_member(root, name, value)
    return XML_DECLARATION + ElementTree.tostring(root, encoding="unicode").encode("utf-8")


def decode_xml(
    raw: bytes | str,
    extensions: type[ExtT] = NoExtensions,  # type: ignore[assignment]
) -> ProblemDetails[ExtT]:
    """Parse an XML problem document, rebuilding extension members as ``extensions``."""
    try:
        root = ElementTree.fromstring(raw)
    except ElementTree.ParseError as exc:
        raise DecodeError(f"Invalid problem details XML: {exc}") from exc

    if _local_name(root.tag) != ROOT_TAG:
        raise DecodeError(f"Problem details XML root must be <{ROOT_TAG}>, got <{_local_name(root.tag)}>")

    fields: dict[str, Any] = {}
    for child in root:
        fields[_local_name(child.tag)] = _read_value(child)

    status = fields.get("status")
    if isinstance(status, str) and status.strip().isdigit():
        fields["status"] = int(status.strip())
    return split(fields, extensions)


def _append_member(parent: ElementTree.Element, name: Any, value: Any) -> None:
    if not isinstance(name, str) or not _XML_NAME.match(name) or name.lower().startswith("xml"):
        raise EncodeError(f"Member name {name!r} is not a valid XML element name")
    _write_value(ElementTree.SubElement(parent, name), value)


def _write_value(element: ElementTree.Element, value: Any) -> None:
    if value is None:
        element.set(NIL_ATTRIBUTE, "true")
        return
    if isinstance(value, bool):
        element.text = "true" if value else "false"
    elif isinstance(value, float):
        if not math.isfinite(value):
            raise EncodeError(f"Out of range float value {value!r} in member <{element.tag}>")
        element.text = repr(value)
    elif isinstance(value, (int, str)):
        text = str(value)
        if _INVALID_XML_CHARS.search(text):
            raise EncodeError(f"Member <{element.tag}> contains characters not allowed in XML")
        element.text = text
    elif isinstance(value, Mapping):
        for name, item in value.items():
            _append_member(element, name, item)
    elif isinstance(value, (list, tuple)):
        if not value:
            element.set(ITEMS_ATTRIBUTE, "0")
        for item in value:
            _append_member(element, LIST_ITEM_TAG, item)
    else:
        raise EncodeError(f"Cannot write value of type `{type(value).__name__}` in member <{element.tag}>")


def _read_value(element: ElementTree.Element) -> Any:
    if element.get(NIL_ATTRIBUTE) == "true":
        return None
    children = list(element)
    if not children:
        if element.get(ITEMS_ATTRIBUTE) == "0":
            return []
        return element.text or ""
    if all(_local_name(child.tag) == LIST_ITEM_TAG for child in children):
        return [_read_value(child) for child in children]
    return {_local_name(child.tag): _read_value(child) for child in children}


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]
